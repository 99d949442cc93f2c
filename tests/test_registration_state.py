import pytest

from arivelab.models.user import AccountStatus
from arivelab.services.errors import InvalidTransition
from arivelab.services.registration_state import (
    ModerationAction,
    SideEffect,
    allowed_actions,
    transition,
)

ALL_STATUSES = list(AccountStatus)


@pytest.mark.parametrize("status", ALL_STATUSES)
def test_approve_only_from_pending_or_suspended(status):
    if status in (AccountStatus.PENDING, AccountStatus.SUSPENDED):
        result = transition(status, ModerationAction.approve)
        assert result.new_status == AccountStatus.APPROVED
        assert result.previous_status == status
    else:
        with pytest.raises(InvalidTransition):
            transition(status, ModerationAction.approve)


@pytest.mark.parametrize("status", ALL_STATUSES)
def test_reject_only_from_pending(status):
    if status == AccountStatus.PENDING:
        assert transition(status, "reject").new_status == AccountStatus.REJECTED
    else:
        with pytest.raises(InvalidTransition):
            transition(status, "reject")


@pytest.mark.parametrize("status", ALL_STATUSES)
def test_suspend_only_from_approved(status):
    if status == AccountStatus.APPROVED:
        assert transition(status, "suspend").new_status == AccountStatus.SUSPENDED
    else:
        with pytest.raises(InvalidTransition):
            transition(status, "suspend")


def test_invalid_transition_names_status_and_action():
    with pytest.raises(InvalidTransition) as exc:
        transition(AccountStatus.APPROVED, ModerationAction.approve)
    assert exc.value.current_status == AccountStatus.APPROVED
    assert exc.value.action == ModerationAction.approve
    assert "approve" in exc.value.detail
    assert "APPROVED" in exc.value.detail


def test_unknown_action_is_invalid():
    with pytest.raises(InvalidTransition):
        transition(AccountStatus.PENDING, "delete")


def test_rejected_is_terminal_by_default():
    assert allowed_actions(AccountStatus.REJECTED) == []
    with pytest.raises(InvalidTransition):
        transition(AccountStatus.REJECTED, ModerationAction.approve)


def test_rejected_can_be_approved_when_not_terminal():
    result = transition(AccountStatus.REJECTED, ModerationAction.approve, rejected_is_terminal=False)
    assert result.new_status == AccountStatus.APPROVED
    # reject and suspend stay invalid from REJECTED
    assert allowed_actions(AccountStatus.REJECTED, rejected_is_terminal=False) == [ModerationAction.approve]


def test_side_effects():
    assert SideEffect.grant_member_capabilities in transition("PENDING", "approve").side_effects
    reject = transition("PENDING", "reject").side_effects
    assert SideEffect.revoke_member_access in reject
    assert SideEffect.close_registration_notifications in reject
    assert SideEffect.revoke_member_capabilities in transition("APPROVED", "suspend").side_effects


def test_allowed_actions():
    assert allowed_actions(AccountStatus.PENDING) == [ModerationAction.approve, ModerationAction.reject]
    assert allowed_actions(AccountStatus.APPROVED) == [ModerationAction.suspend]
    assert allowed_actions(AccountStatus.SUSPENDED) == [ModerationAction.approve]
