import pytest

from arivelab.models.user import AccountStatus, User, UserRole
from arivelab.services.capabilities import (
    ADMIN_CAPABILITIES,
    MEMBER_CAPABILITIES,
    Capability,
    capabilities_for,
    status_notice,
)


def _account(status, role=UserRole.MEMBER):
    return User(email="x@example.com", hashed_password="x", role=role, status=status)


def test_anonymous_has_no_capabilities():
    assert capabilities_for(None) == frozenset()


@pytest.mark.parametrize("role", list(UserRole))
@pytest.mark.parametrize("status", [AccountStatus.PENDING, AccountStatus.REJECTED, AccountStatus.SUSPENDED])
def test_unapproved_accounts_only_view_status(status, role):
    caps = capabilities_for(_account(status, role))
    assert caps == {Capability.view_own_status}
    assert Capability.submit_content not in caps
    assert Capability.moderate_accounts not in caps


def test_approved_member():
    caps = capabilities_for(_account(AccountStatus.APPROVED))
    assert caps == MEMBER_CAPABILITIES
    assert Capability.submit_content in caps
    assert Capability.moderate_accounts not in caps


def test_approved_admin_is_superset_of_member():
    caps = capabilities_for(_account(AccountStatus.APPROVED, UserRole.ADMIN))
    assert caps == ADMIN_CAPABILITIES
    assert MEMBER_CAPABILITIES < caps
    for cap in (
        Capability.moderate_accounts,
        Capability.moderate_content,
        Capability.manage_team_members,
        Capability.manage_site_settings,
        Capability.view_all_submissions,
    ):
        assert cap in caps


def test_capabilities_follow_status_changes():
    account = _account(AccountStatus.APPROVED)
    assert Capability.submit_content in capabilities_for(account)
    account.status = AccountStatus.SUSPENDED
    assert Capability.submit_content not in capabilities_for(account)


def test_status_notice():
    assert status_notice(_account(AccountStatus.APPROVED)) is None
    assert "pending" in status_notice(_account(AccountStatus.PENDING))
    assert "rejected" in status_notice(_account(AccountStatus.REJECTED))
    assert "suspended" in status_notice(_account(AccountStatus.SUSPENDED))
