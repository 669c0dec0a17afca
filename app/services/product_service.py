# app/services/product_service.py
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from app.data.models.product import ProductModel
from app.domain.errors import NotFoundError, ValidationError
from app.domain.schemas import (
    ProductCreate,
    ProductUpdate,
    ProductOut,
    ReviewOut,
    TopProductOut,
)
from app.repos.category_repo import CategoryRepo
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

TOP_PRODUCTS_LIMIT = 10


def to_product_out(product: ProductModel) -> ProductOut:
    return ProductOut(
        id=product.id,
        name=product.name,
        price=product.price,
        description=product.description,
        brand=product.brand,
        stock=product.stock,
        category_id=product.category_id,
        review_ids=[r.id for r in product.reviews],
    )


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.category_repo = CategoryRepo(db)

    def _get_or_404(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def _check_category(self, category_id: Optional[int]):
        if category_id is not None and not self.category_repo.get_category(category_id):
            raise NotFoundError("Category not found")

    #commands
    def create_product(self, payload: ProductCreate) -> ProductOut:
        self._check_category(payload.category_id)
        product = ProductModel(
            name=payload.name,
            price=payload.price,
            description=payload.description or "No description",
            brand=payload.brand,
            stock=payload.stock,
            category_id=payload.category_id,
        )
        created = self.repo.create_product(product)
        logger.info(f"Product {created.id} '{created.name}' created")
        return to_product_out(created)

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductOut:
        product = self._get_or_404(product_id)
        data = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "category_id" in data:
            self._check_category(data["category_id"])

        for field, value in data.items():
            setattr(product, field, value)

        updated = self.repo.save(product)
        logger.info(f"Product {product_id} updated: {sorted(data)}")
        return to_product_out(updated)

    def update_stock(self, product_id: int, stock: int) -> ProductOut:
        product = self._get_or_404(product_id)
        product.stock = stock
        return to_product_out(self.repo.save(product))

    def delete_product(self, product_id: int) -> None:
        product = self._get_or_404(product_id)
        removed = self.repo.delete_product(product)
        logger.info(f"Product {product_id} deleted together with {removed} reviews")

    #query
    def get_product(self, product_id: int) -> ProductOut:
        return to_product_out(self._get_or_404(product_id))

    def list_products(self) -> List[ProductOut]:
        return [to_product_out(p) for p in self.repo.list_products()]

    def filter_products(
        self,
        min_price: Decimal,
        max_price: Decimal,
        brand: Optional[str] = None,
    ) -> List[ProductOut]:
        if min_price > max_price:
            raise ValidationError("min_price must not be greater than max_price")
        return [to_product_out(p) for p in self.repo.filter_products(min_price, max_price, brand)]

    def top_products(self) -> List[TopProductOut]:
        return [
            TopProductOut(
                id=product.id,
                name=product.name,
                price=product.price,
                brand=product.brand,
                review_count=count,
                reviews=[ReviewOut.model_validate(r) for r in product.reviews],
            )
            for product, count in self.repo.top_by_review_count(TOP_PRODUCTS_LIMIT)
        ]
