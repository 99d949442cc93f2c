"""What a signed-in account may do, derived from role + status on every request."""
from __future__ import annotations

import enum

from arivelab.models.user import AccountStatus, User, UserRole


class Capability(str, enum.Enum):
    view_own_status = "view_own_status"
    view_profile = "view_profile"
    edit_own_profile = "edit_own_profile"
    submit_content = "submit_content"
    view_own_submissions = "view_own_submissions"
    moderate_accounts = "moderate_accounts"
    moderate_content = "moderate_content"
    manage_team_members = "manage_team_members"
    manage_site_settings = "manage_site_settings"
    view_all_submissions = "view_all_submissions"


UNAPPROVED_CAPABILITIES = frozenset({Capability.view_own_status})

MEMBER_CAPABILITIES = frozenset({
    Capability.view_own_status,
    Capability.view_profile,
    Capability.edit_own_profile,
    Capability.submit_content,
    Capability.view_own_submissions,
})

ADMIN_CAPABILITIES = MEMBER_CAPABILITIES | frozenset({
    Capability.moderate_accounts,
    Capability.moderate_content,
    Capability.manage_team_members,
    Capability.manage_site_settings,
    Capability.view_all_submissions,
})

STATUS_NOTICES = {
    AccountStatus.PENDING: "Your account is pending approval. You will be notified once an administrator reviews it.",
    AccountStatus.REJECTED: "Your registration has been rejected. Please contact an administrator.",
    AccountStatus.SUSPENDED: "Your account has been suspended. Please contact an administrator.",
}


def capabilities_for(account: User | None) -> frozenset[Capability]:
    if account is None:
        return frozenset()
    if account.status != AccountStatus.APPROVED:
        return UNAPPROVED_CAPABILITIES
    if account.role == UserRole.ADMIN:
        return ADMIN_CAPABILITIES
    return MEMBER_CAPABILITIES


def has_capability(account: User | None, capability: Capability) -> bool:
    return capability in capabilities_for(account)


def status_notice(account: User) -> str | None:
    """Message for the pending/rejected/suspended page; None for approved accounts."""
    return STATUS_NOTICES.get(account.status)
