"""Startup seed: the first admin account and default categories."""
import logging

from sqlalchemy.orm import Session
from arivelab.config import get_settings
from arivelab.models.content import Category, CategoryType
from arivelab.models.user import User, UserRole, AccountStatus
from arivelab.services.auth import get_password_hash

log = logging.getLogger("uvicorn.error")

DEFAULT_CATEGORIES = [
    ("Autonomous Systems", CategoryType.RESEARCH),
    ("Electric Vehicles", CategoryType.RESEARCH),
    ("Vehicle Safety", CategoryType.RESEARCH),
    ("Software", CategoryType.PROJECT),
    ("Hardware", CategoryType.PROJECT),
]


def seed_admin(db: Session) -> User | None:
    """Create the configured admin (APPROVED) if ADMIN_EMAIL/ADMIN_PASSWORD are set and unused."""
    settings = get_settings()
    email = (settings.admin_email or "").strip().lower()
    if not email or not settings.admin_password:
        return None
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        return existing
    admin = User(
        email=email,
        hashed_password=get_password_hash(settings.admin_password),
        name=settings.admin_name,
        role=UserRole.ADMIN,
        status=AccountStatus.APPROVED,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    log.info("Seeded admin account %s", email)
    return admin


def seed_categories(db: Session) -> None:
    if db.query(Category).count() > 0:
        return
    for name, kind in DEFAULT_CATEGORIES:
        db.add(Category(name=name, type=kind))
    db.commit()
