"""Member profile: read and update own profile (admins may access any profile)."""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.orm.exc import StaleDataError

from arivelab.database import get_db
from arivelab.models.user import User
from arivelab.schemas.auth import AccountResponse, AccountWithRegistration, ProfileUpdateRequest
from arivelab.services.capabilities import Capability, has_capability
from arivelab.dependencies import require_capability

router = APIRouter(prefix="/users", tags=["users"])


def _load_profile(db: Session, current_user: User, user_id: int) -> User:
    if current_user.id != user_id and not has_capability(current_user, Capability.moderate_accounts):
        raise HTTPException(status_code=403, detail="Forbidden")
    user = db.query(User).options(joinedload(User.registration)).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/{user_id}", response_model=AccountWithRegistration)
def get_profile(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.view_profile)),
):
    return AccountWithRegistration.model_validate(_load_profile(db, current_user, user_id))


@router.put("/{user_id}", response_model=AccountResponse)
def update_profile(
    user_id: int,
    data: ProfileUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.edit_own_profile)),
):
    """Profile fields only; role and status are never changed here."""
    user = _load_profile(db, current_user, user_id)
    changes = data.model_dump(exclude_unset=True)
    expected_version = changes.pop("version")
    if user.version != expected_version:
        raise HTTPException(
            status_code=409,
            detail=f"Profile was modified since it was loaded (version {expected_version}, current {user.version}). Reload and try again.",
        )
    for field, value in changes.items():
        setattr(user, field, value)
    user.updated_at = datetime.now(timezone.utc)
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Profile was modified by another request. Reload and try again.")
    db.refresh(user)
    return AccountResponse.model_validate(user)
