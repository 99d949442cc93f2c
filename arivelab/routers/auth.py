"""Registration, login and the signed-in user's own status."""
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from arivelab.config import get_settings
from arivelab.database import get_db
from arivelab.models.notification import NotificationType
from arivelab.models.registration import UserRegistration
from arivelab.models.user import User, UserRole, AccountStatus
from arivelab.schemas.auth import RegisterRequest, LoginRequest, Token, AccountResponse, MeResponse
from arivelab.services.audit_log import create_log, request_context, CATEGORY_REGISTRATION, CATEGORY_FAILED_ATTEMPT
from arivelab.services.auth import get_password_hash, verify_password, create_access_token
from arivelab.services.capabilities import capabilities_for, status_notice
from arivelab.services.notifications import create_notification
from arivelab.dependencies import get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])

EMAIL_TAKEN_MESSAGE = "User already exists"


def _capability_list(user: User) -> list:
    return sorted(capabilities_for(user), key=lambda c: c.value)


@router.post("/register", response_model=AccountResponse, status_code=201)
def register(request: Request, data: RegisterRequest, db: Session = Depends(get_db)):
    """New accounts are MEMBERs in PENDING status until an admin approves them."""
    email = data.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail=EMAIL_TAKEN_MESSAGE)

    user = User(
        email=email,
        hashed_password=get_password_hash(data.password),
        name=data.name,
        role=UserRole.MEMBER,
        status=AccountStatus.PENDING,
        phone=data.phone,
        gender=data.gender,
        date_of_birth=data.date_of_birth,
        country=data.country,
        city=data.city,
        profile_photo=data.profile_photo or None,
    )
    user.registration = UserRegistration(
        motivation=data.motivation,
        field_category=data.field_category,
        has_experience=data.has_experience,
        experience_description=(data.experience_description or None) if data.has_experience else None,
        teamwork_feelings=data.teamwork_feelings,
        future_goals=data.future_goals,
        skills=data.skills,
        other_skills=data.other_skills or None,
        hobbies=data.hobbies,
        availability_days=data.availability_days,
        availability_hours=data.availability_hours,
        linkedin=data.linkedin or None,
        github=data.github or None,
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail=EMAIL_TAKEN_MESSAGE)
    create_notification(db, NotificationType.NEW_REGISTRATION, user)
    create_log(
        db,
        CATEGORY_REGISTRATION,
        "New registration",
        f"{user.email} registered and is pending approval.",
        target_user_id=user.id,
        actor_user_id=user.id,
        actor_email=user.email,
        meta={"field_category": data.field_category},
        **request_context(request),
    )
    db.commit()
    db.refresh(user)
    return AccountResponse.model_validate(user)


@router.post("/login", response_model=Token)
def login(request: Request, response: Response, data: LoginRequest, db: Session = Depends(get_db)):
    """Any account with valid credentials gets a token. Non-approved accounts only hold
    view_own_status, and the response carries the notice the client should display."""
    user = db.query(User).filter(User.email == data.email.lower()).first()
    if not user or not verify_password(data.password, user.hashed_password):
        create_log(
            db,
            CATEGORY_FAILED_ATTEMPT,
            "Login failed",
            f"Failed login attempt for email: {data.email}.",
            actor_email=data.email,
            meta={"reason": "invalid_email_or_password"},
            **request_context(request),
        )
        db.commit()
        raise HTTPException(status_code=401, detail="Invalid credentials")
    settings = get_settings()
    token = create_access_token(user.id, user.email, user.role)
    response.set_cookie(
        settings.auth_cookie_name,
        token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        max_age=settings.jwt_access_token_expire_minutes * 60,
    )
    return Token(
        access_token=token,
        user=AccountResponse.model_validate(user),
        capabilities=_capability_list(user),
        notice=status_notice(user),
    )


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(get_settings().auth_cookie_name)
    return {"status": "ok"}


@router.get("/me", response_model=MeResponse)
def me(current_user: User = Depends(get_current_user)):
    """Own account, status and capabilities. Available in every status (view_own_status)."""
    return MeResponse(
        user=AccountResponse.model_validate(current_user),
        capabilities=_capability_list(current_user),
        notice=status_notice(current_user),
    )
