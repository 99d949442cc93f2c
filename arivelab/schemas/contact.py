from datetime import datetime
from pydantic import BaseModel
from arivelab.schemas.admin import Pagination


class ContactSubmissionCreate(BaseModel):
    # Presence is checked by the endpoint, which answers 400 like the form expects
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    message: str | None = None


class ContactSender(BaseModel):
    id: int
    name: str | None = None
    email: str

    class Config:
        from_attributes = True


class ContactSubmissionResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str | None = None
    message: str
    user_id: int | None = None
    user: ContactSender | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class ContactSubmissionListResponse(BaseModel):
    submissions: list[ContactSubmissionResponse]
    pagination: Pagination
