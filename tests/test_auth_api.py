from arivelab.models.audit_log import AuditLog
from arivelab.models.notification import Notification, NotificationType
from arivelab.models.user import AccountStatus, User, UserRole
from arivelab.services.audit_log import CATEGORY_FAILED_ATTEMPT
from arivelab.services.auth import create_access_token, read_access_token

from conftest import PASSWORD, auth_headers, registration_payload


def test_register_creates_pending_member(client, db):
    r = client.post("/auth/register", json=registration_payload(email="Ada@Example.com"))
    assert r.status_code == 201
    body = r.json()
    assert body["email"] == "ada@example.com"
    assert body["status"] == "PENDING"
    assert body["role"] == "MEMBER"
    assert "hashed_password" not in body

    user = db.query(User).filter(User.email == "ada@example.com").one()
    assert user.registration.skills == ["Python", "MATLAB"]
    assert user.registration.experience_description == "Two years in a battery lab"
    note = db.query(Notification).filter(Notification.user_id == user.id).one()
    assert note.type == NotificationType.NEW_REGISTRATION
    assert note.is_read is False


def test_register_duplicate_email(client, make_user):
    make_user(email="ada@example.com")
    r = client.post("/auth/register", json=registration_payload())
    assert r.status_code == 400
    assert r.json()["detail"] == "User already exists"


def test_register_validation(client):
    r = client.post("/auth/register", json=registration_payload(experience_description=""))
    assert r.status_code == 422
    r = client.post("/auth/register", json=registration_payload(confirm_password="different1"))
    assert r.status_code == 422
    r = client.post("/auth/register", json=registration_payload(availability_days=8))
    assert r.status_code == 422
    r = client.post("/auth/register", json=registration_payload(phone="12"))
    assert r.status_code == 422


def test_register_without_experience_drops_description(client, db):
    r = client.post(
        "/auth/register",
        json=registration_payload(has_experience=False, experience_description="ignored"),
    )
    assert r.status_code == 201
    user = db.query(User).filter(User.email == "ada@example.com").one()
    assert user.registration.experience_description is None


def test_login_pending_account_gets_notice(client, make_user):
    make_user(email="pending@example.com")
    r = client.post("/auth/login", json={"email": "pending@example.com", "password": PASSWORD})
    client.cookies.clear()
    assert r.status_code == 200
    body = r.json()
    assert body["token_type"] == "bearer"
    assert body["capabilities"] == ["view_own_status"]
    assert "pending approval" in body["notice"]
    assert body["user"]["status"] == "PENDING"


def test_login_approved_member(client, member):
    r = client.post("/auth/login", json={"email": "member@example.com", "password": PASSWORD})
    assert r.status_code == 200
    assert "auth-token" in r.cookies
    client.cookies.clear()
    body = r.json()
    assert body["notice"] is None
    assert "submit_content" in body["capabilities"]
    assert "moderate_accounts" not in body["capabilities"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["user"]["id"] == member.id


def test_login_wrong_password_is_logged(client, db, member):
    r = client.post("/auth/login", json={"email": "member@example.com", "password": "nope-nope"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid credentials"
    entry = db.query(AuditLog).filter(AuditLog.category == CATEGORY_FAILED_ATTEMPT).one()
    assert entry.actor_email == "member@example.com"


def test_cookie_authenticates(client, member):
    r = client.post("/auth/login", json={"email": "member@example.com", "password": PASSWORD})
    assert r.status_code == 200
    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["email"] == "member@example.com"
    client.post("/auth/logout")
    client.cookies.clear()
    assert client.get("/auth/me").status_code == 401


def test_me_for_rejected_account(client, make_user):
    user = make_user(status=AccountStatus.REJECTED)
    r = client.get("/auth/me", headers=auth_headers(user))
    assert r.status_code == 200
    body = r.json()
    assert body["capabilities"] == ["view_own_status"]
    assert "rejected" in body["notice"]


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401
    r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


def test_profile_update_with_version(client, member):
    headers = auth_headers(member)
    r = client.put(f"/users/{member.id}", json={"version": 1, "bio": "Battery chemist"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["bio"] == "Battery chemist"
    assert r.json()["version"] == 2

    stale = client.put(f"/users/{member.id}", json={"version": 1, "bio": "Again"}, headers=headers)
    assert stale.status_code == 409


def test_profile_of_other_member_forbidden(client, member, make_user):
    other = make_user(status=AccountStatus.APPROVED)
    r = client.get(f"/users/{other.id}", headers=auth_headers(member))
    assert r.status_code == 403
    assert client.get(f"/users/{member.id}", headers=auth_headers(member)).status_code == 200


def test_read_access_token():
    assert read_access_token(create_access_token(42, "x@example.com", UserRole.MEMBER)) == (42, None)
    user_id, reason = read_access_token("garbage")
    assert user_id is None and reason
    assert read_access_token("") == (None, "empty token")
