import pytest

from arivelab.config import get_settings
from arivelab.models.audit_log import AuditLog
from arivelab.models.notification import Notification, NotificationType
from arivelab.models.user import AccountStatus, UserRole
from arivelab.services.errors import Conflict, Forbidden, InvalidTransition, NotFound, ValidationError
from arivelab.services.moderation import apply_moderation

from conftest import auth_headers


def test_approve_pending_account(db, admin, make_user):
    user = make_user(status=AccountStatus.PENDING)
    updated = apply_moderation(db, admin, user.id, "approve", user.version)
    assert updated.status == AccountStatus.APPROVED
    assert updated.version == 2


def test_approve_suspended_account(db, admin, make_user):
    user = make_user(status=AccountStatus.SUSPENDED)
    assert apply_moderation(db, admin, user.id, "approve", user.version).status == AccountStatus.APPROVED


def test_second_approve_is_a_conflict(db, admin, make_user):
    user = make_user(status=AccountStatus.PENDING)
    updated = apply_moderation(db, admin, user.id, "approve", user.version)
    with pytest.raises(Conflict) as exc:
        apply_moderation(db, admin, user.id, "approve", updated.version)
    assert isinstance(exc.value.__cause__, InvalidTransition)
    assert "approve" in exc.value.detail and "APPROVED" in exc.value.detail
    db.expire_all()
    assert user.status == AccountStatus.APPROVED
    assert user.version == 2


@pytest.mark.parametrize("role", [UserRole.MEMBER, UserRole.ADMIN])
def test_non_admin_or_unapproved_actor_is_forbidden(db, make_user, role):
    # An ADMIN whose own account is suspended has no moderation capability either
    status = AccountStatus.APPROVED if role == UserRole.MEMBER else AccountStatus.SUSPENDED
    actor = make_user(status=status, role=role)
    target = make_user(status=AccountStatus.PENDING)
    with pytest.raises(Forbidden):
        apply_moderation(db, actor, target.id, "approve", target.version)
    db.expire_all()
    assert target.status == AccountStatus.PENDING
    assert target.version == 1


def test_anonymous_actor_is_forbidden(db, make_user):
    target = make_user()
    with pytest.raises(Forbidden):
        apply_moderation(db, None, target.id, "approve", target.version)


def test_unknown_target(db, admin):
    with pytest.raises(NotFound):
        apply_moderation(db, admin, 9999, "approve", 1)


def test_unknown_action(db, admin, make_user):
    target = make_user()
    with pytest.raises(ValidationError):
        apply_moderation(db, admin, target.id, "promote", target.version)


def test_stale_version_is_a_conflict(db, admin, make_user):
    user = make_user(status=AccountStatus.PENDING)
    with pytest.raises(Conflict):
        apply_moderation(db, admin, user.id, "reject", user.version + 5)
    db.expire_all()
    assert user.status == AccountStatus.PENDING


def test_reject_marks_registration_notification_read(db, admin, make_user):
    user = make_user(status=AccountStatus.PENDING)
    db.add(Notification(type=NotificationType.NEW_REGISTRATION, title="New", message="m", user_id=user.id))
    db.commit()
    apply_moderation(db, admin, user.id, "reject", user.version)
    notes = db.query(Notification).filter(Notification.user_id == user.id).all()
    by_type = {n.type: n for n in notes}
    assert by_type[NotificationType.NEW_REGISTRATION].is_read is True
    assert by_type[NotificationType.USER_REJECTED].is_read is False


def test_moderation_is_attributed_to_admin(db, admin, make_user):
    user = make_user(status=AccountStatus.APPROVED)
    apply_moderation(db, admin, user.id, "suspend", user.version)
    entry = db.query(AuditLog).filter(AuditLog.target_user_id == user.id).one()
    assert entry.actor_user_id == admin.id
    assert entry.meta["old_status"] == "APPROVED"
    assert entry.meta["new_status"] == "SUSPENDED"


def test_rejected_terminal_setting(db, admin, make_user, monkeypatch):
    user = make_user(status=AccountStatus.REJECTED)
    with pytest.raises(Conflict):
        apply_moderation(db, admin, user.id, "approve", user.version)
    monkeypatch.setattr(get_settings(), "rejected_is_terminal", False)
    assert apply_moderation(db, admin, user.id, "approve", user.version).status == AccountStatus.APPROVED


# --- HTTP binding ---


def test_api_approve(client, admin, make_user):
    user = make_user(status=AccountStatus.PENDING)
    r = client.patch(f"/admin/users/{user.id}/approve", json={"version": user.version}, headers=auth_headers(admin))
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "APPROVED"
    assert body["version"] == 2
    assert "hashed_password" not in body


def test_api_double_approve_returns_409(client, admin, make_user):
    user = make_user(status=AccountStatus.PENDING)
    headers = auth_headers(admin)
    r1 = client.patch(f"/admin/users/{user.id}/approve", json={"version": 1}, headers=headers)
    assert r1.status_code == 200
    r2 = client.patch(f"/admin/users/{user.id}/approve", json={"version": r1.json()["version"]}, headers=headers)
    assert r2.status_code == 409
    assert "APPROVED" in r2.json()["detail"]
    r3 = client.get(f"/admin/users/{user.id}", headers=headers)
    assert r3.json()["status"] == "APPROVED"


def test_api_non_admin_is_forbidden_and_nothing_changes(client, admin, member, make_user):
    user = make_user(status=AccountStatus.PENDING)
    r = client.patch(f"/admin/users/{user.id}/approve", json={"version": 1}, headers=auth_headers(member))
    assert r.status_code == 403
    r2 = client.get(f"/admin/users/{user.id}", headers=auth_headers(admin))
    assert r2.json()["status"] == "PENDING"
    assert r2.json()["version"] == 1


def test_api_non_admin_forbidden_before_action_and_body_checks(client, member, make_user):
    user = make_user(status=AccountStatus.PENDING)
    headers = auth_headers(member)
    r = client.patch(f"/admin/users/{user.id}/promote", json={"version": 1}, headers=headers)
    assert r.status_code == 403
    r = client.patch(f"/admin/users/{user.id}/approve", headers=headers)
    assert r.status_code == 403


def test_service_checks_role_before_parsing_action(db, member, make_user):
    user = make_user()
    with pytest.raises(Forbidden):
        apply_moderation(db, member, user.id, "promote", user.version)


def test_api_requires_authentication(client, make_user):
    user = make_user()
    r = client.patch(f"/admin/users/{user.id}/approve", json={"version": 1})
    assert r.status_code == 401


def test_api_unknown_user_and_action(client, admin, make_user):
    headers = auth_headers(admin)
    assert client.patch("/admin/users/999/approve", json={"version": 1}, headers=headers).status_code == 404
    user = make_user()
    assert client.patch(f"/admin/users/{user.id}/promote", json={"version": 1}, headers=headers).status_code == 400


def test_api_suspension_applies_on_next_request(client, admin, make_user):
    user = make_user(status=AccountStatus.APPROVED)
    user_headers = auth_headers(user)
    assert client.get(f"/users/{user.id}", headers=user_headers).status_code == 200

    r = client.patch(f"/admin/users/{user.id}/suspend", json={"version": user.version}, headers=auth_headers(admin))
    assert r.status_code == 200

    # Same token, next request: capabilities are re-derived from the stored status
    r = client.get(f"/users/{user.id}", headers=user_headers)
    assert r.status_code == 403
    assert "suspended" in r.json()["detail"]
    me = client.get("/auth/me", headers=user_headers).json()
    assert me["capabilities"] == ["view_own_status"]
