"""Admin dashboard schemas: moderation, registrations, notifications, audit log."""
from datetime import datetime
from pydantic import BaseModel, Field
from arivelab.models.notification import NotificationType
from arivelab.models.user import AccountStatus
from arivelab.schemas.auth import AccountWithRegistration


class ModerateRequest(BaseModel):
    version: int  # the account version the admin was looking at


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class RegistrationListResponse(BaseModel):
    registrations: list[AccountWithRegistration]
    pagination: Pagination


class NotificationUser(BaseModel):
    id: int
    name: str | None = None
    email: str
    status: AccountStatus

    class Config:
        from_attributes = True


class NotificationResponse(BaseModel):
    id: int
    type: NotificationType
    title: str
    message: str
    is_read: bool
    user_id: int
    user: NotificationUser | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    unread_count: int
    new_registration_count: int


class MarkNotificationsRequest(BaseModel):
    notification_ids: list[int] = Field(min_length=1)
    mark_as_read: bool = True


class AuditLogEntry(BaseModel):
    id: int
    category: str
    title: str
    message: str
    target_user_id: int | None = None
    content_item_id: int | None = None
    actor_user_id: int | None = None
    actor_email: str | None = None
    meta: dict | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
