from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from arivelab.database import get_db
from arivelab.models.content import Category, CategoryType
from arivelab.models.user import User
from arivelab.schemas.content import CategoryCreate, CategoryResponse
from arivelab.services.capabilities import Capability
from arivelab.dependencies import require_capability

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
def list_categories(type: CategoryType | None = Query(None), db: Session = Depends(get_db)):
    q = db.query(Category)
    if type is not None:
        q = q.filter(Category.type == type)
    return [CategoryResponse.model_validate(c) for c in q.order_by(Category.created_at.desc(), Category.id.desc()).all()]


@router.post("", response_model=CategoryResponse, status_code=201)
def create_category(
    data: CategoryCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_capability(Capability.moderate_content)),
):
    category = Category(name=data.name.strip(), description=data.description, type=data.type)
    db.add(category)
    db.commit()
    db.refresh(category)
    return CategoryResponse.model_validate(category)
