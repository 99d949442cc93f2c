"""Shared fixtures: in-memory SQLite database, TestClient with get_db overridden, account factory."""
import os

# Must be set before arivelab is imported (settings are read at import time)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["MAILGUN_API_KEY"] = ""
os.environ["MAILGUN_DOMAIN"] = ""
os.environ["ADMIN_EMAIL"] = ""
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-the-arive-lab-suite"

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from arivelab.database import Base, get_db
from arivelab.main import app
from arivelab.models.registration import UserRegistration
from arivelab.models.user import AccountStatus, User, UserRole
from arivelab.services.auth import create_access_token, get_password_hash

PASSWORD = "password123"
PASSWORD_HASH = get_password_hash(PASSWORD)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def factory(
        status: AccountStatus = AccountStatus.PENDING,
        role: UserRole = UserRole.MEMBER,
        email: str | None = None,
        name: str | None = None,
        with_registration: bool = True,
        **fields,
    ) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=email or f"user{n}@example.com",
            hashed_password=PASSWORD_HASH,
            name=name or f"User {n}",
            role=role,
            status=status,
            phone=fields.pop("phone", "+1 555 123 4567"),
            country=fields.pop("country", "Germany"),
            city=fields.pop("city", "Berlin"),
            **fields,
        )
        if with_registration:
            user.registration = UserRegistration(
                motivation="I love research",
                field_category="Electric Vehicles",
                has_experience=False,
                teamwork_feelings="Great",
                future_goals="Publish papers",
                skills=["Python", "CAD"],
                hobbies="Cycling",
                availability_days=3,
                availability_hours=10,
            )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return factory


@pytest.fixture
def admin(make_user):
    return make_user(status=AccountStatus.APPROVED, role=UserRole.ADMIN, email="admin@example.com", name="Admin")


@pytest.fixture
def member(make_user):
    return make_user(status=AccountStatus.APPROVED, email="member@example.com", name="Member")


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email, user.role)}"}


def registration_payload(**overrides) -> dict:
    payload = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "+44 20 7946 0958",
        "password": PASSWORD,
        "confirm_password": PASSWORD,
        "gender": "female",
        "date_of_birth": date(1995, 12, 10).isoformat(),
        "country": "United Kingdom",
        "city": "London",
        "motivation": "Advance battery research",
        "field_category": "Electric Vehicles",
        "has_experience": True,
        "experience_description": "Two years in a battery lab",
        "teamwork_feelings": "I enjoy it",
        "future_goals": "Lead a research group",
        "skills": ["Python", "MATLAB", "Python"],
        "hobbies": "Chess",
        "availability_days": 4,
        "availability_hours": 12,
    }
    payload.update(overrides)
    return payload
