"""Audit trail for moderation and admin actions. Rows are only ever inserted."""
from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Any

from fastapi import Request
from sqlalchemy.orm import Session

from arivelab.models.audit_log import AuditLog

CATEGORY_MODERATION = "moderation"
CATEGORY_REGISTRATION = "registration"
CATEGORY_CONTENT = "content"
CATEGORY_TEAM = "team"
CATEGORY_SETTINGS = "settings"
CATEGORY_FAILED_ATTEMPT = "failed_attempt"

# String(n) sizes on AuditLog
FIELD_LIMITS = {
    "category": 32,
    "title": 255,
    "actor_email": 255,
    "ip_address": 64,
    "user_agent": 500,
}
MESSAGE_LIMIT = 20_000


def _clip(value: str | None, limit: int) -> str | None:
    if value is None:
        return None
    value = str(value).strip()[:limit]
    return value or None


def _json_safe(value: Any) -> Any:
    """Meta is stored as JSON: enums become their value, dates ISO strings, sets lists."""
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_json_safe(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def request_context(request: Request | None) -> dict[str, str | None]:
    """ip_address / user_agent kwargs for create_log from the incoming request."""
    if request is None:
        return {"ip_address": None, "user_agent": None}
    return {
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }


def create_log(
    db: Session,
    category: str,
    title: str,
    message: str,
    *,
    target_user_id: int | None = None,
    content_item_id: int | None = None,
    actor_user_id: int | None = None,
    actor_email: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
    meta: dict[str, Any] | None = None,
) -> AuditLog:
    """Add an audit entry to the session and flush it. The caller commits, so the entry
    lands in the same transaction as the change it describes."""
    entry = AuditLog(
        category=_clip(category, FIELD_LIMITS["category"]) or CATEGORY_MODERATION,
        title=_clip(title, FIELD_LIMITS["title"]) or "-",
        message=_clip(message, MESSAGE_LIMIT) or "-",
        target_user_id=target_user_id,
        content_item_id=content_item_id,
        actor_user_id=actor_user_id,
        actor_email=_clip(actor_email, FIELD_LIMITS["actor_email"]),
        ip_address=_clip(ip_address, FIELD_LIMITS["ip_address"]),
        user_agent=_clip(user_agent, FIELD_LIMITS["user_agent"]),
        meta=_json_safe(meta) if meta is not None else None,
    )
    db.add(entry)
    db.flush()
    return entry
