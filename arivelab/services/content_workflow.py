"""Research/Project submission workflow: draft -> published, with an admin-only featured flag.

Members create items as drafts or publish them directly (published items are live at
once; there is no separate review step for content). Members may only edit their own
items and never the publication fields; admins may edit or delete anything.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy.orm.exc import StaleDataError

from arivelab.models.content import Category, ContentImage, ContentItem, ContentKind
from arivelab.models.user import User
from arivelab.schemas.content import SubmitContentRequest, UpdateContentRequest
from arivelab.services.audit_log import create_log, CATEGORY_CONTENT
from arivelab.services.capabilities import Capability, has_capability, status_notice
from arivelab.services.errors import Conflict, Forbidden, NotFound

log = logging.getLogger("uvicorn.error")

PUBLICATION_FIELDS = frozenset({"published", "featured"})
# NOT NULL columns: an explicit null in a patch leaves them unchanged
REQUIRED_FIELDS = frozenset({"title", "description", "images"}) | PUBLICATION_FIELDS


@dataclass
class ContentFilters:
    author_id: int | None = None
    featured: bool | None = None
    published: bool | None = None
    category_id: int | None = None
    search: str | None = None
    limit: int | None = None


def search_items(items: list[ContentItem], term: str | None) -> list[ContentItem]:
    """Case-insensitive substring match on title or description over an already fetched list."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(items)
    return [
        i for i in items
        if needle in (i.title or "").lower() or needle in (i.description or "").lower()
    ]


def _base_query(db: Session, kind: ContentKind):
    return (
        db.query(ContentItem)
        .options(
            joinedload(ContentItem.category),
            joinedload(ContentItem.author),
            selectinload(ContentItem.images),
        )
        .filter(ContentItem.kind == kind)
    )


def _can_view(viewer: User | None, item: ContentItem) -> bool:
    if item.published:
        return True
    if has_capability(viewer, Capability.view_all_submissions):
        return True
    return (
        viewer is not None
        and item.author_id == viewer.id
        and has_capability(viewer, Capability.view_own_submissions)
    )


def _check_category(db: Session, category_id: int | None) -> None:
    if category_id is not None and not db.query(Category).filter(Category.id == category_id).first():
        raise NotFound("Category not found")


def list_items(db: Session, viewer: User | None, kind: ContentKind, filters: ContentFilters) -> list[ContentItem]:
    """Items of `kind` matching `filters`, newest first.

    Unpublished items are returned only to admins, or to a member listing their own
    submissions (author_id equal to their id). featured=True implies published=True.
    """
    q = _base_query(db, kind)
    sees_all = has_capability(viewer, Capability.view_all_submissions)
    own_listing = (
        viewer is not None
        and filters.author_id == viewer.id
        and has_capability(viewer, Capability.view_own_submissions)
    )
    if filters.featured is True:
        q = q.filter(ContentItem.featured.is_(True), ContentItem.published.is_(True))
    elif filters.featured is False:
        q = q.filter(ContentItem.featured.is_(False))
    if filters.published is not None:
        q = q.filter(ContentItem.published.is_(filters.published))
    if not (sees_all or own_listing):
        q = q.filter(ContentItem.published.is_(True))
    if filters.author_id is not None:
        q = q.filter(ContentItem.author_id == filters.author_id)
    if filters.category_id is not None:
        q = q.filter(ContentItem.category_id == filters.category_id)
    items = search_items(q.order_by(ContentItem.created_at.desc(), ContentItem.id.desc()).all(), filters.search)
    if filters.limit:
        items = items[: filters.limit]
    return items


def get_item(db: Session, viewer: User | None, kind: ContentKind, item_id: int) -> ContentItem:
    item = _base_query(db, kind).filter(ContentItem.id == item_id).first()
    # Drafts the viewer may not see are reported as missing
    if not item or not _can_view(viewer, item):
        raise NotFound(f"{kind.value.capitalize()} not found")
    return item


def submit(
    db: Session,
    author: User | None,
    kind: ContentKind,
    data: SubmitContentRequest,
    *,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> ContentItem:
    """Create an item owned by `author`. published = not as_draft, unless an admin sets it explicitly."""
    if not has_capability(author, Capability.submit_content):
        raise Forbidden(status_notice(author) if author else "Not authenticated")
    is_admin = has_capability(author, Capability.moderate_content)
    if not is_admin and (data.published is not None or data.featured is not None):
        raise Forbidden("Only administrators can publish or feature content directly.")
    _check_category(db, data.category_id)

    published = data.published if (is_admin and data.published is not None) else not data.as_draft
    item = ContentItem(
        kind=kind,
        title=data.title,
        description=data.description,
        excerpt=data.excerpt,
        content=data.content if data.content is not None else data.description,
        video=data.video,
        tags=data.tags,
        category_id=data.category_id,
        author_id=author.id,
        published=published,
        featured=bool(data.featured) if is_admin else False,
        images=[ContentImage(**img.model_dump()) for img in data.images],
    )
    db.add(item)
    db.flush()
    create_log(
        db,
        CATEGORY_CONTENT,
        f"{kind.value.capitalize()} submitted",
        f"{author.email} created {kind.value} {item.id} '{item.title}' ({'published' if published else 'draft'}).",
        content_item_id=item.id,
        actor_user_id=author.id,
        actor_email=author.email,
        ip_address=ip_address,
        user_agent=user_agent,
        meta={"published": published, "featured": item.featured},
    )
    db.commit()
    return get_item(db, author, kind, item.id)


def edit(
    db: Session,
    actor: User | None,
    kind: ContentKind,
    item_id: int,
    patch: UpdateContentRequest,
    *,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> ContentItem:
    """Apply a partial update. Members: own items, non-publication fields only."""
    if not has_capability(actor, Capability.submit_content):
        raise Forbidden(status_notice(actor) if actor else "Not authenticated")
    item = db.query(ContentItem).filter(ContentItem.id == item_id, ContentItem.kind == kind).first()
    if not item:
        raise NotFound(f"{kind.value.capitalize()} not found")

    changes = patch.model_dump(exclude_unset=True)
    expected_version = changes.pop("version")
    changes = {k: v for k, v in changes.items() if not (v is None and k in REQUIRED_FIELDS)}
    if not has_capability(actor, Capability.moderate_content):
        if item.author_id != actor.id:
            raise Forbidden("You can only edit your own submissions.")
        blocked = PUBLICATION_FIELDS & changes.keys()
        if blocked:
            raise Forbidden(f"Only administrators can change: {', '.join(sorted(blocked))}.")
    if item.version != expected_version:
        raise Conflict(
            f"This {kind.value} was modified since it was loaded (version {expected_version}, current {item.version}). Reload and try again."
        )
    if "category_id" in changes:
        _check_category(db, changes["category_id"])

    images = changes.pop("images", None)
    if images is not None:
        item.images = [ContentImage(**img) for img in images]
    for field, value in changes.items():
        setattr(item, field, value)
    item.updated_at = datetime.now(timezone.utc)
    try:
        create_log(
            db,
            CATEGORY_CONTENT,
            f"{kind.value.capitalize()} updated",
            f"{actor.email} updated {kind.value} {item.id}.",
            content_item_id=item.id,
            actor_user_id=actor.id,
            actor_email=actor.email,
            ip_address=ip_address,
            user_agent=user_agent,
            meta={"fields": sorted(changes.keys()) + (["images"] if images is not None else [])},
        )
        db.commit()
    except StaleDataError:
        db.rollback()
        raise Conflict(f"This {kind.value} was modified by another request. Reload and try again.")
    return get_item(db, actor, kind, item.id)


def delete(
    db: Session,
    actor: User | None,
    kind: ContentKind,
    item_id: int,
    expected_version: int,
    *,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> None:
    """Admin-only, irreversible delete."""
    if not has_capability(actor, Capability.moderate_content):
        raise Forbidden("Administrator role required to delete content.")
    item = db.query(ContentItem).filter(ContentItem.id == item_id, ContentItem.kind == kind).first()
    if not item:
        raise NotFound(f"{kind.value.capitalize()} not found")
    if item.version != expected_version:
        raise Conflict(
            f"This {kind.value} was modified since it was loaded (version {expected_version}, current {item.version}). Reload and try again."
        )
    title = item.title
    db.delete(item)
    try:
        create_log(
            db,
            CATEGORY_CONTENT,
            f"{kind.value.capitalize()} deleted",
            f"{actor.email} deleted {kind.value} {item_id} '{title}'.",
            actor_user_id=actor.id,
            actor_email=actor.email,
            ip_address=ip_address,
            user_agent=user_agent,
            meta={"deleted_item_id": item_id, "title": title},
        )
        db.commit()
    except StaleDataError:
        db.rollback()
        raise Conflict(f"This {kind.value} was modified by another request. Reload and try again.")
    log.info("Content deleted: %s %s by admin %s", kind.value, item_id, actor.id)
