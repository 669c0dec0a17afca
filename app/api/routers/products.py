from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.data.database import get_db
from app.domain.schemas import (
    TokenClaims,
    ProductCreate,
    ProductUpdate,
    ProductOut,
    StockUpdate,
    TopProductOut,
    MessageOut,
)
from app.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session):
    return ProductService(db)


#statyczne sciezki przed /{product_id}
@router.get("/filtro", response_model=List[ProductOut])
def filter_products(
    min_price: Decimal = Query(..., ge=0),
    max_price: Decimal = Query(..., ge=0),
    brand: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
):
    return get_service(db).filter_products(min_price, max_price, brand)


@router.get("/top", response_model=List[TopProductOut])
def top_products(db: Session = Depends(get_db)):
    return get_service(db).top_products()


@router.get("", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return get_service(db).list_products()


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_product(product_id)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductCreate,
    _: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).create_product(payload)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    _: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).update_product(product_id, payload)


@router.patch("/{product_id}/stock", response_model=ProductOut)
def update_stock(
    product_id: int,
    payload: StockUpdate,
    _: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).update_stock(product_id, payload.stock)


@router.delete("/{product_id}", response_model=MessageOut)
def delete_product(
    product_id: int,
    _: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    get_service(db).delete_product(product_id)
    return MessageOut(message="Product deleted")
