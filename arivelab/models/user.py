"""Accounts: role, moderation status and profile fields."""
from sqlalchemy import Column, Integer, String, Enum as SQLEnum, DateTime, Date, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from arivelab.database import Base
import enum


class UserRole(str, enum.Enum):
    MEMBER = "MEMBER"
    ADMIN = "ADMIN"


class AccountStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    SUSPENDED = "SUSPENDED"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)

    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.MEMBER)
    status = Column(SQLEnum(AccountStatus), nullable=False, default=AccountStatus.PENDING, index=True)

    phone = Column(String(50), nullable=True)
    country = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    gender = Column(String(50), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    profile_photo = Column(String(500), nullable=True)
    bio = Column(Text, nullable=True)

    # Optimistic concurrency token: every mutation must present the current value
    version = Column(Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    registration = relationship(
        "UserRegistration",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    notifications = relationship(
        "Notification",
        back_populates="user",
        cascade="all, delete-orphan",
    )
