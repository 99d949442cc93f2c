"""Admin dashboard: account moderation, registrations, notifications, audit log."""
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session, joinedload

from arivelab.config import get_settings
from arivelab.database import get_db
from arivelab.models.audit_log import AuditLog
from arivelab.models.notification import Notification, NotificationType
from arivelab.models.user import User, UserRole
from arivelab.schemas.admin import (
    AuditLogEntry,
    MarkNotificationsRequest,
    ModerateRequest,
    NotificationListResponse,
    NotificationResponse,
    Pagination,
    RegistrationListResponse,
)
from arivelab.schemas.auth import AccountResponse, AccountWithRegistration, RegistrationResponse
from arivelab.services.audit_log import request_context
from arivelab.services.errors import ArivelabError, to_http
from arivelab.services.moderation import apply_moderation, parse_action
from arivelab.services.notifications import send_moderation_email
from arivelab.services.registration_state import NOTIFICATION_FOR_ACTION
from arivelab.services.registrations import (
    delete_registration,
    export_registrations_csv,
    get_account,
    list_accounts,
    list_registrations,
    parse_status_filter,
)
from arivelab.dependencies import require_admin

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=list[AccountWithRegistration])
def admin_list_users(
    status: str | None = Query(None, description="PENDING | APPROVED | REJECTED | SUSPENDED | all"),
    role: UserRole | None = Query(None),
    search: str | None = Query(None),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    try:
        users = list_accounts(db, parse_status_filter(status), role, search)
    except ArivelabError as e:
        raise to_http(e)
    return [AccountWithRegistration.model_validate(u) for u in users]


@router.get("/users/{user_id}", response_model=AccountWithRegistration)
def admin_get_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    try:
        return AccountWithRegistration.model_validate(get_account(db, user_id))
    except ArivelabError as e:
        raise to_http(e)


@router.get("/users/{user_id}/registration", response_model=RegistrationResponse)
def admin_get_user_registration(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    try:
        user = get_account(db, user_id)
    except ArivelabError as e:
        raise to_http(e)
    if not user.registration:
        raise HTTPException(status_code=404, detail="Registration not found")
    return RegistrationResponse.model_validate(user.registration)


@router.patch("/users/{user_id}/{action}", response_model=AccountResponse)
def moderate_user(
    request: Request,
    user_id: int,
    action: str,
    data: ModerateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Approve, reject or suspend an account. The role dependency runs before the body and
    the action are validated, so a non-admin caller always gets 403."""
    try:
        user = apply_moderation(db, admin, user_id, action, data.version, **request_context(request))
    except ArivelabError as e:
        raise to_http(e)
    send_moderation_email(user, NOTIFICATION_FOR_ACTION[parse_action(action)])
    return AccountResponse.model_validate(user)


@router.get("/registrations", response_model=RegistrationListResponse)
def admin_list_registrations(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    status: str | None = Query(None),
    search: str | None = Query(None),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    settings = get_settings()
    limit = min(limit or settings.registrations_page_limit_default, settings.registrations_page_limit_max)
    try:
        rows, pagination = list_registrations(db, page, limit, parse_status_filter(status), search)
    except ArivelabError as e:
        raise to_http(e)
    return RegistrationListResponse(
        registrations=[AccountWithRegistration.model_validate(u) for u in rows],
        pagination=Pagination(**pagination),
    )


@router.get("/registrations/export")
def admin_export_registrations(
    status: str | None = Query(None),
    search: str | None = Query(None),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    try:
        users = list_accounts(db, parse_status_filter(status), None, search)
    except ArivelabError as e:
        raise to_http(e)
    filename = f"registrations_{date.today().isoformat()}.csv"
    return Response(
        content=export_registrations_csv(users),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/registrations/{user_id}")
def admin_delete_registration(
    request: Request,
    user_id: int,
    version: int = Query(..., description="Account version the admin was looking at"),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    try:
        delete_registration(db, admin, user_id, version, **request_context(request))
    except ArivelabError as e:
        raise to_http(e)
    return {"success": True, "message": "User and registration deleted successfully"}


@router.get("/notifications", response_model=NotificationListResponse)
def admin_notifications(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    notes = (
        db.query(Notification)
        .options(joinedload(Notification.user))
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notes],
        unread_count=sum(1 for n in notes if not n.is_read),
        new_registration_count=sum(
            1 for n in notes if n.type == NotificationType.NEW_REGISTRATION and not n.is_read
        ),
    )


@router.patch("/notifications")
def admin_mark_notifications(
    data: MarkNotificationsRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    updated = (
        db.query(Notification)
        .filter(Notification.id.in_(data.notification_ids))
        .update({Notification.is_read: data.mark_as_read}, synchronize_session=False)
    )
    db.commit()
    return {"success": True, "updated": updated}


@router.get("/audit-logs", response_model=list[AuditLogEntry])
def admin_audit_logs(
    category: str | None = Query(None),
    target_user_id: int | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    q = db.query(AuditLog)
    if category:
        q = q.filter(AuditLog.category == category)
    if target_user_id is not None:
        q = q.filter(AuditLog.target_user_id == target_user_id)
    rows = q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit).all()
    return [AuditLogEntry.model_validate(r) for r in rows]
