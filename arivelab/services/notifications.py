"""Notification service: in-app notification rows plus transactional email via Mailgun."""
import logging

from sqlalchemy.orm import Session

from arivelab.config import get_settings
from arivelab.models.notification import Notification, NotificationType
from arivelab.models.user import User

log = logging.getLogger("uvicorn.error")

MAILGUN_US_BASE = "https://api.mailgun.net"

NOTIFICATION_TITLES = {
    NotificationType.NEW_REGISTRATION: "New User Registration",
    NotificationType.USER_APPROVED: "Account Approved",
    NotificationType.USER_REJECTED: "Account Rejected",
    NotificationType.USER_SUSPENDED: "Account Suspended",
}


def _display_name(user: User) -> str:
    return (user.name or "").strip() or user.email


def notification_message(kind: NotificationType, user: User) -> str:
    if kind == NotificationType.NEW_REGISTRATION:
        return f"New user {_display_name(user)} has registered and is pending approval."
    if kind == NotificationType.USER_APPROVED:
        return "Your account has been approved! Welcome to Arive Lab."
    if kind == NotificationType.USER_REJECTED:
        return "Your account registration has been rejected."
    return "Your account has been suspended."


def create_notification(db: Session, kind: NotificationType, user: User) -> Notification:
    """Add a notification about `user`. Commit remains with caller."""
    note = Notification(
        type=kind,
        title=NOTIFICATION_TITLES[kind],
        message=notification_message(kind, user),
        user_id=user.id,
    )
    db.add(note)
    return note


def close_registration_notifications(db: Session, user_id: int) -> int:
    """Mark the account's unread NEW_REGISTRATION notifications as read (after a rejection)."""
    return (
        db.query(Notification)
        .filter(
            Notification.user_id == user_id,
            Notification.type == NotificationType.NEW_REGISTRATION,
            Notification.is_read.is_(False),
        )
        .update({Notification.is_read: True}, synchronize_session=False)
    )


def send_email(to_email: str, subject: str, html_content: str, text_content: str | None = None) -> bool:
    """Send email via Mailgun. Returns False when Mailgun is not configured or the request fails."""
    settings = get_settings()
    if not (settings.mailgun_api_key and settings.mailgun_domain):
        print(f"[Email] NOT SENT: to={to_email} subject={subject}. MAILGUN_API_KEY/MAILGUN_DOMAIN not set.", flush=True)
        return False
    return _send_email_mailgun(to_email, subject, html_content, text_content=text_content, settings=settings)


def _send_email_mailgun(to_email: str, subject: str, html_content: str, text_content: str | None = None, settings=None) -> bool:
    import httpx

    if settings is None:
        settings = get_settings()
    base = (settings.mailgun_base_url or MAILGUN_US_BASE).strip().rstrip("/")
    domain = (settings.mailgun_domain or "").strip().lower()
    from_addr = (settings.mailgun_from_email or "").strip()
    from_domain = from_addr.split("@")[-1].lower() if "@" in from_addr else ""
    if domain and from_domain != domain:
        from_addr = f"noreply@{domain}"
    data = {
        "from": f"{settings.mailgun_from_name} <{from_addr}>",
        "to": to_email,
        "subject": subject,
        "text": text_content or "",
        "html": html_content or "",
    }
    try:
        with httpx.Client(timeout=10.0) as client:
            r = client.post(f"{base}/v3/{domain}/messages", auth=("api", settings.mailgun_api_key), data=data)
    except httpx.HTTPError as e:
        print(f"[Mailgun] Exception: to={to_email} error={type(e).__name__}: {e}", flush=True)
        return False
    if 200 <= r.status_code < 300:
        print(f"[Mailgun] API success: to={to_email} status={r.status_code}", flush=True)
        return True
    print(f"[Mailgun] API failed: status={r.status_code} to={to_email} body={r.text[:500]}", flush=True)
    return False


def send_moderation_email(user: User, kind: NotificationType) -> bool:
    """Tell the account owner about an approve/reject/suspend decision. Best effort."""
    name = (user.name or "").strip() or "there"
    title = NOTIFICATION_TITLES[kind]
    text = f"Hi {name}, {notification_message(kind, user)}"
    if kind == NotificationType.USER_APPROVED:
        text += " You can now sign in and submit research and projects."
    html = f"""
    <p>Hi {name},</p>
    <p>{notification_message(kind, user)}</p>
    <p>- Arive Lab</p>
    """
    ok = send_email(user.email, f"[Arive Lab] {title}", html, text_content=text)
    if not ok:
        log.warning("Moderation email (%s) not delivered to user_id=%s", kind.value, user.id)
    return ok
