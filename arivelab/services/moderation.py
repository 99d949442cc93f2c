"""Moderation dispatcher: maps an admin's approve/reject/suspend onto the registration state machine."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from arivelab.config import get_settings
from arivelab.models.user import User
from arivelab.services.audit_log import create_log, CATEGORY_MODERATION
from arivelab.services.capabilities import Capability, has_capability
from arivelab.services.errors import Conflict, Forbidden, InvalidTransition, NotFound, ValidationError
from arivelab.services.notifications import close_registration_notifications, create_notification
from arivelab.services.registration_state import (
    NOTIFICATION_FOR_ACTION,
    ModerationAction,
    SideEffect,
    transition,
)

log = logging.getLogger("uvicorn.error")


def parse_action(action: str) -> ModerationAction:
    try:
        return ModerationAction((action or "").strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid action '{action}'. Expected one of: approve, reject, suspend.")


def apply_moderation(
    db: Session,
    actor: User | None,
    target_id: int,
    action: ModerationAction | str,
    expected_version: int,
    *,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> User:
    """Apply one moderation action and return the updated account.

    Raises Forbidden when the actor cannot moderate accounts, NotFound for an unknown
    target, and Conflict when the state machine rejects the action from the current
    status or when `expected_version` is stale. The status change is a single
    conditional UPDATE, so a failed call never leaves a partial write.
    """
    if not has_capability(actor, Capability.moderate_accounts):
        raise Forbidden("Administrator role required to moderate accounts.")
    act = action if isinstance(action, ModerationAction) else parse_action(action)

    target = db.query(User).filter(User.id == target_id).first()
    if not target:
        raise NotFound("User not found")

    settings = get_settings()
    try:
        result = transition(target.status, act, rejected_is_terminal=settings.rejected_is_terminal)
    except InvalidTransition as exc:
        raise Conflict(
            f"Cannot {act.value} this account: its current status is {target.status.value}."
        ) from exc

    if expected_version != target.version:
        raise Conflict(
            f"Account was modified since it was loaded (version {expected_version}, current {target.version}). Reload and try again."
        )

    # Status, version and timestamp change together in one statement, guarded by the values we read
    updated = (
        db.query(User)
        .filter(
            User.id == target.id,
            User.version == expected_version,
            User.status == result.previous_status,
        )
        .update(
            {
                User.status: result.new_status,
                User.version: User.version + 1,
                User.updated_at: datetime.now(timezone.utc),
            },
            synchronize_session=False,
        )
    )
    if updated != 1:
        db.rollback()
        raise Conflict("Account was modified by another request. Reload and try again.")

    create_notification(db, NOTIFICATION_FOR_ACTION[act], target)
    if SideEffect.close_registration_notifications in result.side_effects:
        close_registration_notifications(db, target.id)
    create_log(
        db,
        CATEGORY_MODERATION,
        f"Account {result.new_status.value.lower()}",
        f"{actor.email} applied '{act.value}' to {target.email}: {result.previous_status.value} -> {result.new_status.value}.",
        target_user_id=target.id,
        actor_user_id=actor.id,
        actor_email=actor.email,
        ip_address=ip_address,
        user_agent=user_agent,
        meta={
            "action": act,
            "old_status": result.previous_status,
            "new_status": result.new_status,
            "side_effects": list(result.side_effects),
        },
    )
    db.commit()
    db.refresh(target)
    log.info("Moderation: admin %s %s user %s (%s -> %s)", actor.id, act.value, target.id, result.previous_status.value, result.new_status.value)
    return target
