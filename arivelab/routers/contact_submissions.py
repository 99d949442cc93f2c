"""Public contact form and the admin inbox that lists its submissions."""
import logging

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from arivelab.config import get_settings
from arivelab.database import get_db
from arivelab.models.contact_submission import ContactSubmission
from arivelab.models.user import User
from arivelab.schemas.admin import Pagination
from arivelab.schemas.contact import (
    ContactSubmissionCreate,
    ContactSubmissionListResponse,
    ContactSubmissionResponse,
)
from arivelab.services.registrations import page_info
from arivelab.dependencies import get_optional_user, require_admin

log = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/contact-submissions", tags=["contact"])

REQUIRED_MESSAGE = "Name, email, and message are required"


@router.post("", response_model=ContactSubmissionResponse, status_code=201)
def create_contact_submission(
    data: ContactSubmissionCreate,
    db: Session = Depends(get_db),
    sender: User | None = Depends(get_optional_user),
):
    name = (data.name or "").strip()
    email = (data.email or "").strip()
    message = (data.message or "").strip()
    if not (name and email and message):
        raise HTTPException(status_code=400, detail=REQUIRED_MESSAGE)
    try:
        email = validate_email(email, check_deliverability=False).normalized
    except EmailNotValidError:
        raise HTTPException(status_code=400, detail="Invalid email address")

    submission = ContactSubmission(
        name=name,
        email=email,
        phone=(data.phone or "").strip() or None,
        message=message,
        user_id=sender.id if sender else None,
    )
    db.add(submission)
    db.commit()
    db.refresh(submission)
    log.info("Contact submission %s received from %s", submission.id, email)
    return ContactSubmissionResponse.model_validate(submission)


@router.get("", response_model=ContactSubmissionListResponse)
def list_contact_submissions(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    search: str | None = Query(None, description="Case-insensitive match on name, email or message"),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Newest first, same pagination block as the registrations listing."""
    settings = get_settings()
    limit = min(limit or settings.registrations_page_limit_default, settings.registrations_page_limit_max)
    q = db.query(ContactSubmission)
    term = (search or "").strip()
    if term:
        like = f"%{term}%"
        q = q.filter(
            or_(
                ContactSubmission.name.ilike(like),
                ContactSubmission.email.ilike(like),
                ContactSubmission.message.ilike(like),
            )
        )
    total = q.count()
    rows = (
        q.options(joinedload(ContactSubmission.user))
        .order_by(ContactSubmission.created_at.desc(), ContactSubmission.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return ContactSubmissionListResponse(
        submissions=[ContactSubmissionResponse.model_validate(s) for s in rows],
        pagination=Pagination(**page_info(page, limit, total)),
    )
