"""Admin views over accounts and their registration applications: listing, deletion, CSV export."""
from __future__ import annotations

import csv
import io
import logging
import math
from collections.abc import Iterable

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.orm.exc import StaleDataError

from arivelab.models.registration import UserRegistration
from arivelab.models.user import AccountStatus, User, UserRole
from arivelab.services.audit_log import create_log, CATEGORY_REGISTRATION
from arivelab.services.capabilities import Capability, has_capability
from arivelab.services.errors import Conflict, Forbidden, NotFound, ValidationError

log = logging.getLogger("uvicorn.error")

CSV_COLUMNS = [
    "Name", "Email", "Phone", "Country", "City", "Status",
    "Field Category", "Experience", "Skills", "Availability", "Created At",
]


def parse_status_filter(status: str | None) -> AccountStatus | None:
    """None/'all'/'' mean no filter; anything else must be an AccountStatus value."""
    value = (status or "").strip()
    if not value or value.lower() == "all":
        return None
    try:
        return AccountStatus(value.upper())
    except ValueError:
        raise ValidationError(f"Invalid status filter '{status}'.")


def _accounts_query(
    db: Session,
    status: AccountStatus | None = None,
    role: UserRole | None = None,
    search: str | None = None,
):
    q = db.query(User).options(joinedload(User.registration))
    if status is not None:
        q = q.filter(User.status == status)
    if role is not None:
        q = q.filter(User.role == role)
    term = (search or "").strip()
    if term:
        like = f"%{term}%"
        q = q.outerjoin(UserRegistration, UserRegistration.user_id == User.id).filter(
            or_(
                User.name.ilike(like),
                User.email.ilike(like),
                UserRegistration.field_category.ilike(like),
            )
        )
    return q


def list_accounts(
    db: Session,
    status: AccountStatus | None = None,
    role: UserRole | None = None,
    search: str | None = None,
) -> list[User]:
    """All matching accounts, newest first."""
    return _accounts_query(db, status, role, search).order_by(User.created_at.desc(), User.id.desc()).all()


def page_info(page: int, limit: int, total: int) -> dict:
    """Pagination block shared by the paginated admin listings."""
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if total else 0,
    }


def list_registrations(
    db: Session,
    page: int = 1,
    limit: int = 10,
    status: AccountStatus | None = None,
    search: str | None = None,
) -> tuple[list[User], dict]:
    """One page of accounts with their registration plus pagination info.

    Ordered by creation time, newest first, with id as tiebreaker so pages never overlap.
    """
    if page < 1:
        raise ValidationError("page must be >= 1")
    if limit < 1:
        raise ValidationError("limit must be >= 1")
    q = _accounts_query(db, status, None, search)
    total = q.order_by(None).count()
    rows = (
        q.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return rows, page_info(page, limit, total)


def get_account(db: Session, user_id: int) -> User:
    user = db.query(User).options(joinedload(User.registration)).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def delete_registration(
    db: Session,
    actor: User,
    user_id: int,
    expected_version: int,
    *,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> None:
    """Delete an account together with its registration application. Irreversible."""
    if not has_capability(actor, Capability.moderate_accounts):
        raise Forbidden("Administrator role required to delete registrations.")
    if actor.id == user_id:
        raise Forbidden("Administrators cannot delete their own account.")
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    if user.version != expected_version:
        raise Conflict(
            f"Account was modified since it was loaded (version {expected_version}, current {user.version}). Reload and try again."
        )
    email, status = user.email, user.status
    db.delete(user)
    try:
        create_log(
            db,
            CATEGORY_REGISTRATION,
            "Registration deleted",
            f"{actor.email} deleted account {email} and its registration.",
            actor_user_id=actor.id,
            actor_email=actor.email,
            ip_address=ip_address,
            user_agent=user_agent,
            meta={"deleted_user_id": user_id, "email": email, "status": status},
        )
        db.commit()
    except StaleDataError:
        db.rollback()
        raise Conflict("Account was modified by another request. Reload and try again.")
    log.info("Registration deleted: user_id=%s by admin %s", user_id, actor.id)


def _csv_row(user: User) -> list[str]:
    reg = user.registration
    skills = ""
    days = hours = 0
    if reg is not None:
        skills = ", ".join(reg.skills or [])
        days = reg.availability_days or 0
        hours = reg.availability_hours or 0
    return [
        user.name or "",
        user.email,
        user.phone or "",
        user.country or "",
        user.city or "",
        user.status.value,
        (reg.field_category if reg else "") or "",
        "Yes" if (reg and reg.has_experience) else "No",
        skills,
        f"{days} days, {hours} hours",
        user.created_at.date().isoformat() if user.created_at else "",
    ]


def export_registrations_csv(users: Iterable[User]) -> str:
    """Render accounts as CSV (header + one row each). Cells with commas, quotes or newlines are quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for user in users:
        writer.writerow(_csv_row(user))
    return buf.getvalue()
