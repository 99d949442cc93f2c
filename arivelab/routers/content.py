"""Research and Project items: public listing plus member submission and admin moderation."""
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from arivelab.database import get_db
from arivelab.models.content import ContentKind
from arivelab.models.user import User
from arivelab.schemas.content import ContentResponse, SubmitContentRequest, UpdateContentRequest
from arivelab.services import content_workflow
from arivelab.services.audit_log import request_context
from arivelab.services.content_workflow import ContentFilters
from arivelab.services.errors import ArivelabError, to_http
from arivelab.dependencies import get_current_user, get_optional_user

router = APIRouter(prefix="/content", tags=["content"])


@router.get("/{kind}", response_model=list[ContentResponse])
def list_content(
    kind: ContentKind,
    featured: bool | None = Query(None),
    published: bool | None = Query(None),
    author_id: int | None = Query(None),
    category_id: int | None = Query(None),
    search: str | None = Query(None, description="Case-insensitive match on title or description"),
    limit: int | None = Query(None, ge=1),
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
):
    filters = ContentFilters(
        author_id=author_id,
        featured=featured,
        published=published,
        category_id=category_id,
        search=search,
        limit=limit,
    )
    items = content_workflow.list_items(db, viewer, kind, filters)
    return [ContentResponse.model_validate(i) for i in items]


@router.get("/{kind}/{item_id}", response_model=ContentResponse)
def get_content(
    kind: ContentKind,
    item_id: int,
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
):
    try:
        return ContentResponse.model_validate(content_workflow.get_item(db, viewer, kind, item_id))
    except ArivelabError as e:
        raise to_http(e)


@router.post("/{kind}", response_model=ContentResponse, status_code=201)
def submit_content(
    request: Request,
    kind: ContentKind,
    data: SubmitContentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        item = content_workflow.submit(db, current_user, kind, data, **request_context(request))
    except ArivelabError as e:
        raise to_http(e)
    return ContentResponse.model_validate(item)


@router.put("/{kind}/{item_id}", response_model=ContentResponse)
def update_content(
    request: Request,
    kind: ContentKind,
    item_id: int,
    data: UpdateContentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        item = content_workflow.edit(db, current_user, kind, item_id, data, **request_context(request))
    except ArivelabError as e:
        raise to_http(e)
    return ContentResponse.model_validate(item)


@router.delete("/{kind}/{item_id}")
def delete_content(
    request: Request,
    kind: ContentKind,
    item_id: int,
    version: int = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        content_workflow.delete(db, current_user, kind, item_id, version, **request_context(request))
    except ArivelabError as e:
        raise to_http(e)
    return {"message": f"{kind.value.capitalize()} deleted successfully"}
