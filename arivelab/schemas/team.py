from pydantic import BaseModel, Field
from arivelab.models.team_member import TeamRole


class TeamMemberCreate(BaseModel):
    name: str = Field(min_length=1)
    role: str = Field(min_length=1)
    team_role: TeamRole = TeamRole.MEMBER
    bio: str | None = None
    image: str | None = None
    email: str | None = None
    linkedin: str | None = None
    twitter: str | None = None
    github: str | None = None
    display_order: int = 0


class TeamMemberUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    role: str | None = Field(default=None, min_length=1)
    team_role: TeamRole | None = None
    bio: str | None = None
    image: str | None = None
    email: str | None = None
    linkedin: str | None = None
    twitter: str | None = None
    github: str | None = None
    display_order: int | None = None


class TeamMemberResponse(TeamMemberCreate):
    id: int

    class Config:
        from_attributes = True
