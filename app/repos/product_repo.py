from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select, func, delete
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel
from app.data.models.review import ReviewModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_products(self, product_ids: List[int]) -> dict:
        if not product_ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(product_ids))
        ).scalars().all()
        return {p.id: p for p in rows}

    def list_products(self) -> List[ProductModel]:
        return list(self.db.execute(select(ProductModel).order_by(ProductModel.id)).scalars().all())

    def filter_products(
        self,
        min_price: Decimal,
        max_price: Decimal,
        brand: Optional[str] = None,
    ) -> List[ProductModel]:
        stmt = select(ProductModel).where(
            ProductModel.price >= min_price,
            ProductModel.price <= max_price,
        )
        if brand:
            stmt = stmt.where(ProductModel.brand == brand)
        return list(self.db.execute(stmt.order_by(ProductModel.price, ProductModel.id)).scalars().all())

    def top_by_review_count(self, limit: int = 10) -> List[Tuple[ProductModel, int]]:
        review_count = func.count(ReviewModel.id).label("review_count")
        rows = self.db.execute(
            select(ProductModel, review_count)
            .join(ReviewModel, ReviewModel.product_id == ProductModel.id)
            .group_by(ProductModel.id)
            .order_by(review_count.desc(), ProductModel.id)
            .limit(limit)
        ).all()
        return [(r[0], r[1]) for r in rows]

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def save(self, product: ProductModel) -> ProductModel:
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> int:
        """Kasuje najpierw recenzje produktu, potem produkt, w jednej transakcji."""
        result = self.db.execute(delete(ReviewModel).where(ReviewModel.product_id == product.id))
        self.db.delete(product)
        self.db.commit()
        return result.rowcount

    def rollback(self):
        self.db.rollback()
