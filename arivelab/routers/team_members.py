"""Team roster shown on the public site; admin-managed."""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from arivelab.database import get_db
from arivelab.models.team_member import TeamMember, TeamRole
from arivelab.models.user import User
from arivelab.schemas.team import TeamMemberCreate, TeamMemberResponse, TeamMemberUpdate
from arivelab.services.audit_log import create_log, request_context, CATEGORY_TEAM
from arivelab.services.capabilities import Capability
from arivelab.dependencies import require_capability

router = APIRouter(prefix="/team-members", tags=["team-members"])

# Shown on the home page when featured=true
FEATURED_TEAM_ROLES = (TeamRole.FOUNDER, TeamRole.ADMIN, TeamRole.COORDINATOR)

require_team_manager = require_capability(Capability.manage_team_members)


@router.get("", response_model=list[TeamMemberResponse])
def list_team_members(featured: bool = Query(False), db: Session = Depends(get_db)):
    q = db.query(TeamMember)
    if featured:
        q = q.filter(TeamMember.team_role.in_(FEATURED_TEAM_ROLES))
    members = q.order_by(TeamMember.display_order.asc(), TeamMember.id.asc()).all()
    return [TeamMemberResponse.model_validate(m) for m in members]


@router.post("", response_model=TeamMemberResponse, status_code=201)
def create_team_member(
    request: Request,
    data: TeamMemberCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_team_manager),
):
    member = TeamMember(**data.model_dump())
    db.add(member)
    db.flush()
    create_log(
        db,
        CATEGORY_TEAM,
        "Team member added",
        f"{admin.email} added team member {member.name} ({member.team_role.value}).",
        actor_user_id=admin.id,
        actor_email=admin.email,
        meta={"team_member_id": member.id},
        **request_context(request),
    )
    db.commit()
    db.refresh(member)
    return TeamMemberResponse.model_validate(member)


@router.put("/{member_id}", response_model=TeamMemberResponse)
def update_team_member(
    request: Request,
    member_id: int,
    data: TeamMemberUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_team_manager),
):
    member = db.query(TeamMember).filter(TeamMember.id == member_id).first()
    if not member:
        raise HTTPException(status_code=404, detail="Team member not found")
    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None and field in ("name", "role", "team_role", "display_order"):
            continue
        setattr(member, field, value)
    create_log(
        db,
        CATEGORY_TEAM,
        "Team member updated",
        f"{admin.email} updated team member {member.name}.",
        actor_user_id=admin.id,
        actor_email=admin.email,
        meta={"team_member_id": member.id, "fields": sorted(changes.keys())},
        **request_context(request),
    )
    db.commit()
    db.refresh(member)
    return TeamMemberResponse.model_validate(member)


@router.delete("/{member_id}")
def delete_team_member(
    request: Request,
    member_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_team_manager),
):
    member = db.query(TeamMember).filter(TeamMember.id == member_id).first()
    if not member:
        raise HTTPException(status_code=404, detail="Team member not found")
    name = member.name
    db.delete(member)
    create_log(
        db,
        CATEGORY_TEAM,
        "Team member removed",
        f"{admin.email} removed team member {name}.",
        actor_user_id=admin.id,
        actor_email=admin.email,
        meta={"team_member_id": member_id},
        **request_context(request),
    )
    db.commit()
    return {"success": True}
