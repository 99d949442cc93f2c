"""Auth, registration and profile schemas."""
import re
from datetime import date, datetime
from pydantic import BaseModel, EmailStr, Field, model_validator, field_validator
from arivelab.models.user import UserRole, AccountStatus
from arivelab.services.capabilities import Capability

PHONE_MIN_DIGITS = 7
PHONE_MAX_DIGITS = 15
PASSWORD_MIN_LENGTH = 8


def _validate_phone_digits(phone: str) -> None:
    digits = re.sub(r"\D", "", phone or "")
    if not digits:
        raise ValueError("Phone number is required.")
    if len(digits) < PHONE_MIN_DIGITS:
        raise ValueError(f"Phone number must have at least {PHONE_MIN_DIGITS} digits.")
    if len(digits) > PHONE_MAX_DIGITS:
        raise ValueError(f"Phone number cannot exceed {PHONE_MAX_DIGITS} digits.")


def _required_text(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("This field is required.")
    return v


class RegisterRequest(BaseModel):
    """Personal details plus the registration application, submitted together at signup."""
    name: str
    email: EmailStr
    phone: str
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    confirm_password: str = ""
    gender: str
    date_of_birth: date
    country: str
    city: str
    profile_photo: str | None = None

    motivation: str
    field_category: str
    has_experience: bool = False
    experience_description: str | None = None
    teamwork_feelings: str
    future_goals: str
    skills: list[str] = Field(default_factory=list)
    other_skills: str | None = None
    hobbies: str
    availability_days: int = Field(ge=1, le=7)
    availability_hours: int = Field(ge=1, le=168)
    linkedin: str | None = None
    github: str | None = None

    @field_validator(
        "name", "gender", "country", "city", "motivation", "field_category",
        "teamwork_feelings", "future_goals", "hobbies",
    )
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: str) -> str:
        _validate_phone_digits(v)
        return v.strip()

    @field_validator("skills")
    @classmethod
    def unique_skills(cls, v: list[str]) -> list[str]:
        # Skills are a set; keep first-seen order for display
        seen = []
        for s in v:
            s = (s or "").strip()
            if s and s not in seen:
                seen.append(s)
        return seen

    @model_validator(mode="after")
    def passwords_match_and_experience(self):
        if self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        if self.has_experience and not (self.experience_description or "").strip():
            raise ValueError("Please describe your experience")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AccountResponse(BaseModel):
    """Public projection of an account. Never includes the password hash."""
    id: int
    email: str
    name: str | None = None
    role: UserRole
    status: AccountStatus
    phone: str | None = None
    country: str | None = None
    city: str | None = None
    gender: str | None = None
    date_of_birth: date | None = None
    profile_photo: str | None = None
    bio: str | None = None
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class RegistrationResponse(BaseModel):
    id: int
    motivation: str
    field_category: str
    has_experience: bool
    experience_description: str | None = None
    teamwork_feelings: str
    future_goals: str
    skills: list[str] = []
    other_skills: str | None = None
    hobbies: str
    availability_days: int
    availability_hours: int
    linkedin: str | None = None
    github: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class AccountWithRegistration(AccountResponse):
    registration: RegistrationResponse | None = None


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: AccountResponse
    capabilities: list[Capability] = []
    notice: str | None = None  # set for pending/rejected/suspended accounts


class MeResponse(BaseModel):
    user: AccountResponse
    capabilities: list[Capability]
    notice: str | None = None


class ProfileUpdateRequest(BaseModel):
    version: int
    name: str | None = None
    bio: str | None = None
    phone: str | None = None
    gender: str | None = None
    date_of_birth: date | None = None
    country: str | None = None
    city: str | None = None
    profile_photo: str | None = None

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: str | None) -> str | None:
        if v is None:
            return v
        _validate_phone_digits(v)
        return v.strip()
