from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.data.database import get_db
from app.domain.schemas import (
    TokenClaims,
    CategoryCreate,
    CategoryUpdate,
    CategoryOut,
    CategoryDetailOut,
    CategoryStatOut,
    MessageOut,
)
from app.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


def get_service(db: Session):
    return CategoryService(db)


@router.get("/stats", response_model=List[CategoryStatOut])
def category_stats(db: Session = Depends(get_db)):
    return get_service(db).stats()


@router.get("", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return get_service(db).list_categories()


@router.get("/{category_id}", response_model=CategoryDetailOut)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_category(category_id)


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(
    payload: CategoryCreate,
    _: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).create_category(payload)


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    _: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).update_category(category_id, payload)


@router.delete("/{category_id}", response_model=MessageOut)
def delete_category(
    category_id: int,
    _: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    get_service(db).delete_category(category_id)
    return MessageOut(message="Category deleted")
