"""Research/Project content and category schemas."""
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from arivelab.models.content import ContentKind, CategoryType


class ContentImageIn(BaseModel):
    image_url: str = Field(min_length=1)
    alt_text: str | None = None
    caption: str | None = None
    is_featured: bool = False
    display_order: int = 0


class ContentImageResponse(ContentImageIn):
    id: int

    class Config:
        from_attributes = True


class SubmitContentRequest(BaseModel):
    title: str
    description: str
    excerpt: str | None = None
    content: str | None = None
    video: str | None = None
    tags: str | None = None
    category_id: int | None = None
    images: list[ContentImageIn] = []
    as_draft: bool = True
    # Admin only: set publication state directly
    published: bool | None = None
    featured: bool | None = None

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Title and description are required.")
        return v


class UpdateContentRequest(BaseModel):
    """Partial update. Only fields present in the request body are changed."""
    version: int
    title: str | None = None
    description: str | None = None
    excerpt: str | None = None
    content: str | None = None
    video: str | None = None
    tags: str | None = None
    category_id: int | None = None
    images: list[ContentImageIn] | None = None
    published: bool | None = None
    featured: bool | None = None

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title and description cannot be empty.")
        return v


class CategoryBrief(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class AuthorBrief(BaseModel):
    id: int
    name: str | None = None

    class Config:
        from_attributes = True


class ContentResponse(BaseModel):
    id: int
    kind: ContentKind
    title: str
    description: str
    excerpt: str | None = None
    content: str | None = None
    video: str | None = None
    tags: str | None = None
    published: bool
    featured: bool
    category_id: int | None = None
    category: CategoryBrief | None = None
    author_id: int | None = None
    author: AuthorBrief | None = None
    images: list[ContentImageResponse] = []
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    type: CategoryType


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    type: CategoryType

    class Config:
        from_attributes = True
