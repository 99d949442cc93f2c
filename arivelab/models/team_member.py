"""Admin-curated team roster, independent of accounts."""
from sqlalchemy import Column, Integer, String, Text, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func
from arivelab.database import Base
import enum


class TeamRole(str, enum.Enum):
    FOUNDER = "FOUNDER"
    ADMIN = "ADMIN"
    COORDINATOR = "COORDINATOR"
    MEMBER = "MEMBER"
    INTERN = "INTERN"


class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    role = Column(String(255), nullable=False)
    team_role = Column(SQLEnum(TeamRole), nullable=False, default=TeamRole.MEMBER)
    bio = Column(Text, nullable=True)
    image = Column(String(500), nullable=True)
    email = Column(String(255), nullable=True)
    linkedin = Column(String(500), nullable=True)
    twitter = Column(String(500), nullable=True)
    github = Column(String(500), nullable=True)
    display_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
