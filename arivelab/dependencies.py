"""Shared dependencies: DB session, current user, capability checks.

The account is reloaded from the database on every request, so a status change made
by an admin (approve, suspend) applies to the user's very next request.
"""
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from arivelab.config import get_settings
from arivelab.database import get_db
from arivelab.models.user import User, AccountStatus
from arivelab.services.auth import read_access_token
from arivelab.services.capabilities import Capability, capabilities_for, status_notice

security = HTTPBearer(auto_error=False)


def _token_from_request(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str:
    if credentials and credentials.credentials:
        return credentials.credentials.strip()
    return (request.cookies.get(get_settings().auth_cookie_name) or "").strip()


def _load_user(db: Session, token_str: str) -> User:
    user_id, _ = read_access_token(token_str)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    token_str = _token_from_request(request, credentials)
    if not token_str:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return _load_user(db, token_str)


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User | None:
    """Current user for public endpoints; anonymous (None) when there is no valid token."""
    token_str = _token_from_request(request, credentials)
    if not token_str:
        return None
    try:
        return _load_user(db, token_str)
    except HTTPException:
        return None


def require_capability(capability: Capability):
    """Dependency factory: the signed-in account must hold `capability`.

    Accounts that are not APPROVED get 403 with the pending/rejected/suspended notice,
    which the client shows instead of the protected page.
    """
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if capability in capabilities_for(current_user):
            return current_user
        if current_user.status != AccountStatus.APPROVED:
            raise HTTPException(status_code=403, detail=status_notice(current_user))
        raise HTTPException(status_code=403, detail="Administrator role required")
    return dependency


require_approved_member = require_capability(Capability.view_profile)
require_admin = require_capability(Capability.moderate_accounts)
