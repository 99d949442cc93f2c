"""Registration state machine: which moderation actions are valid from which account status.

    PENDING   --approve--> APPROVED
    PENDING   --reject---> REJECTED
    APPROVED  --suspend--> SUSPENDED
    SUSPENDED --approve--> APPROVED

REJECTED is terminal unless the `rejected_is_terminal` setting is turned off, in which
case `approve` is also accepted from REJECTED. The machine is pure: it computes the next
status and the side effects the caller must apply; it never touches the database.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass

from arivelab.models.notification import NotificationType
from arivelab.models.user import AccountStatus
from arivelab.services.errors import InvalidTransition


class ModerationAction(str, enum.Enum):
    approve = "approve"
    reject = "reject"
    suspend = "suspend"


class SideEffect(str, enum.Enum):
    grant_member_capabilities = "grant_member_capabilities"
    revoke_member_access = "revoke_member_access"
    revoke_member_capabilities = "revoke_member_capabilities"
    notify_user_approved = "notify_user_approved"
    notify_user_rejected = "notify_user_rejected"
    notify_user_suspended = "notify_user_suspended"
    close_registration_notifications = "close_registration_notifications"


TARGET_STATUS = {
    ModerationAction.approve: AccountStatus.APPROVED,
    ModerationAction.reject: AccountStatus.REJECTED,
    ModerationAction.suspend: AccountStatus.SUSPENDED,
}

VALID_SOURCES = {
    ModerationAction.approve: frozenset({AccountStatus.PENDING, AccountStatus.SUSPENDED}),
    ModerationAction.reject: frozenset({AccountStatus.PENDING}),
    ModerationAction.suspend: frozenset({AccountStatus.APPROVED}),
}

SIDE_EFFECTS = {
    ModerationAction.approve: (SideEffect.grant_member_capabilities, SideEffect.notify_user_approved),
    ModerationAction.reject: (
        SideEffect.revoke_member_access,
        SideEffect.notify_user_rejected,
        SideEffect.close_registration_notifications,
    ),
    ModerationAction.suspend: (SideEffect.revoke_member_capabilities, SideEffect.notify_user_suspended),
}

NOTIFICATION_FOR_ACTION = {
    ModerationAction.approve: NotificationType.USER_APPROVED,
    ModerationAction.reject: NotificationType.USER_REJECTED,
    ModerationAction.suspend: NotificationType.USER_SUSPENDED,
}


@dataclass(frozen=True)
class TransitionResult:
    previous_status: AccountStatus
    new_status: AccountStatus
    action: ModerationAction
    side_effects: tuple[SideEffect, ...]


def valid_sources(action: ModerationAction, rejected_is_terminal: bool = True) -> frozenset[AccountStatus]:
    sources = VALID_SOURCES[action]
    if action == ModerationAction.approve and not rejected_is_terminal:
        sources = sources | {AccountStatus.REJECTED}
    return sources


def allowed_actions(status: AccountStatus, rejected_is_terminal: bool = True) -> list[ModerationAction]:
    """Actions an admin may take on an account in `status` (drives which buttons a UI offers)."""
    return [a for a in ModerationAction if status in valid_sources(a, rejected_is_terminal)]


def transition(
    status: AccountStatus | str,
    action: ModerationAction | str,
    *,
    rejected_is_terminal: bool = True,
) -> TransitionResult:
    """Compute the next status for `action`. Raises InvalidTransition for any pair not in the table."""
    try:
        current = AccountStatus(status)
    except ValueError:
        raise InvalidTransition(status, action)
    try:
        act = ModerationAction(action)
    except ValueError:
        raise InvalidTransition(current, action)
    if current not in valid_sources(act, rejected_is_terminal):
        raise InvalidTransition(current, act)
    return TransitionResult(
        previous_status=current,
        new_status=TARGET_STATUS[act],
        action=act,
        side_effects=SIDE_EFFECTS[act],
    )
