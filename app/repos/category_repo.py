from typing import List, Tuple

from sqlalchemy import select, func, update
from sqlalchemy.orm import Session

from app.data.models.category import CategoryModel
from app.data.models.product import ProductModel


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_category_by_name(self, name: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.name == name)
        ).scalar_one_or_none()

    def list_categories(self) -> List[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.id)).scalars().all())

    def create_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def save(self, category: CategoryModel) -> CategoryModel:
        self.db.commit()
        self.db.refresh(category)
        return category

    def delete_category(self, category: CategoryModel) -> None:
        #produkty odpinamy recznie, nie polegamy na ON DELETE bazy
        self.db.execute(
            update(ProductModel)
            .where(ProductModel.category_id == category.id)
            .values(category_id=None)
        )
        self.db.delete(category)
        self.db.commit()

    def product_counts(self) -> List[Tuple[int, str, int]]:
        rows = self.db.execute(
            select(CategoryModel.id, CategoryModel.name, func.count(ProductModel.id))
            .join(ProductModel, ProductModel.category_id == CategoryModel.id)
            .group_by(CategoryModel.id, CategoryModel.name)
            .order_by(CategoryModel.name)
        ).all()
        return [(r[0], r[1], r[2]) for r in rows]

    def rollback(self):
        self.db.rollback()
