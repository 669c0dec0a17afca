# app/services/category_service.py
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.category import CategoryModel
from app.domain.errors import ConflictError, NotFoundError
from app.domain.schemas import (
    CategoryCreate,
    CategoryUpdate,
    CategoryOut,
    CategoryDetailOut,
    CategoryStatOut,
)
from app.repos.category_repo import CategoryRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CategoryService:
    def __init__(self, db: Session):
        self.repo = CategoryRepo(db)

    def _get_or_404(self, category_id: int) -> CategoryModel:
        category = self.repo.get_category(category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    def _save_unique(self, action, category: CategoryModel) -> CategoryModel:
        try:
            return action(category)
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError(f"Category '{category.name}' already exists")

    def create_category(self, payload: CategoryCreate) -> CategoryOut:
        if self.repo.get_category_by_name(payload.name):
            raise ConflictError(f"Category '{payload.name}' already exists")

        category = CategoryModel(
            name=payload.name,
            description=payload.description or "No description",
        )
        created = self._save_unique(self.repo.create_category, category)
        logger.info(f"Category {created.id} '{created.name}' created")
        return CategoryOut.model_validate(created)

    def update_category(self, category_id: int, payload: CategoryUpdate) -> CategoryOut:
        category = self._get_or_404(category_id)
        if payload.name and payload.name != category.name:
            if self.repo.get_category_by_name(payload.name):
                raise ConflictError(f"Category '{payload.name}' already exists")
            category.name = payload.name
        if payload.description:
            category.description = payload.description

        updated = self._save_unique(self.repo.save, category)
        return CategoryOut.model_validate(updated)

    def delete_category(self, category_id: int) -> None:
        category = self._get_or_404(category_id)
        self.repo.delete_category(category)
        logger.info(f"Category {category_id} deleted, products detached")

    def get_category(self, category_id: int) -> CategoryDetailOut:
        return CategoryDetailOut.model_validate(self._get_or_404(category_id))

    def list_categories(self) -> List[CategoryOut]:
        return [CategoryOut.model_validate(c) for c in self.repo.list_categories()]

    def stats(self) -> List[CategoryStatOut]:
        return [
            CategoryStatOut(category_id=cid, name=name, product_count=count)
            for cid, name, count in self.repo.product_counts()
        ]
