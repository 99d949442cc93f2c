"""Registration application submitted at signup (1:1 with User)."""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from arivelab.database import Base


class UserRegistration(Base):
    __tablename__ = "user_registrations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    motivation = Column(Text, nullable=False)
    field_category = Column(String(255), nullable=False)
    has_experience = Column(Boolean, default=False, nullable=False)
    experience_description = Column(Text, nullable=True)
    teamwork_feelings = Column(Text, nullable=False)
    future_goals = Column(Text, nullable=False)
    skills = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    other_skills = Column(Text, nullable=True)
    hobbies = Column(Text, nullable=False)
    availability_days = Column(Integer, nullable=False)
    availability_hours = Column(Integer, nullable=False)
    linkedin = Column(String(500), nullable=True)
    github = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="registration")
