from arivelab.models.contact_submission import ContactSubmission

from conftest import auth_headers


def _send(client, headers=None, **overrides):
    body = {"name": "Grace", "email": "grace@example.com", "message": "Can I visit the lab?"}
    body.update(overrides)
    return client.post("/contact-submissions", json=body, headers=headers or {})


def test_public_submission(client, db):
    r = _send(client, phone=" +1 555 0100 ")
    assert r.status_code == 201
    body = r.json()
    assert body["phone"] == "+1 555 0100"
    assert body["user_id"] is None
    assert db.query(ContactSubmission).count() == 1


def test_missing_required_fields_is_400(client, db):
    for field in ("name", "email", "message"):
        r = _send(client, **{field: "  "})
        assert r.status_code == 400
        assert r.json()["detail"] == "Name, email, and message are required"
    r = client.post("/contact-submissions", json={"name": "Grace"})
    assert r.status_code == 400
    assert db.query(ContactSubmission).count() == 0


def test_invalid_email_is_400(client):
    assert _send(client, email="not-an-email").status_code == 400


def test_signed_in_sender_is_linked(client, member):
    r = _send(client, headers=auth_headers(member))
    assert r.status_code == 201
    assert r.json()["user_id"] == member.id


def test_admin_listing_is_paginated_newest_first(client, admin, member):
    for i in range(3):
        _send(client, message=f"Question {i}")
    _send(client, headers=auth_headers(member), message="From a member")

    r = client.get("/contact-submissions?page=1&limit=3", headers=auth_headers(admin))
    assert r.status_code == 200
    body = r.json()
    assert body["pagination"] == {"page": 1, "limit": 3, "total": 4, "pages": 2}
    assert [s["message"] for s in body["submissions"]] == ["From a member", "Question 2", "Question 1"]
    assert body["submissions"][0]["user"]["email"] == "member@example.com"

    page2 = client.get("/contact-submissions?page=2&limit=3", headers=auth_headers(admin)).json()
    assert [s["message"] for s in page2["submissions"]] == ["Question 0"]


def test_admin_listing_search(client, admin):
    _send(client, message="Sponsorship offer")
    _send(client, name="Linus", email="linus@example.com", message="Hello")
    r = client.get("/contact-submissions?search=SPONSOR", headers=auth_headers(admin))
    assert [s["message"] for s in r.json()["submissions"]] == ["Sponsorship offer"]


def test_listing_is_admin_only(client, member):
    assert client.get("/contact-submissions", headers=auth_headers(member)).status_code == 403
    assert client.get("/contact-submissions").status_code == 401
