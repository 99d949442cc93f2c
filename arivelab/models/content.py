"""Research and Project items share one table and one draft/published/featured lifecycle."""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from arivelab.database import Base
import enum


class ContentKind(str, enum.Enum):
    research = "research"
    project = "project"


class CategoryType(str, enum.Enum):
    RESEARCH = "RESEARCH"
    PROJECT = "PROJECT"


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(SQLEnum(CategoryType), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ContentItem(Base):
    __tablename__ = "content_items"

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(SQLEnum(ContentKind), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=True)
    video = Column(String(500), nullable=True)
    tags = Column(String(500), nullable=True)

    published = Column(Boolean, default=False, nullable=False, index=True)
    featured = Column(Boolean, default=False, nullable=False, index=True)

    # ON DELETE SET NULL so removing an account or category keeps its items
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    version = Column(Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    category = relationship("Category")
    author = relationship("User")
    images = relationship(
        "ContentImage",
        back_populates="item",
        order_by="ContentImage.display_order",
        cascade="all, delete-orphan",
    )


class ContentImage(Base):
    __tablename__ = "content_images"

    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(Integer, ForeignKey("content_items.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = Column(String(500), nullable=False)
    alt_text = Column(String(255), nullable=True)
    caption = Column(String(500), nullable=True)
    is_featured = Column(Boolean, default=False, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)

    item = relationship("ContentItem", back_populates="images")
