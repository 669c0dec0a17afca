#app/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_admin
from app.data.database import get_db
from app.domain.schemas import (
    TokenClaims,
    CreateCartIn,
    ItemIn,
    CartOut,
    CartTotalOut,
    MessageOut,
)
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.post("", response_model=CartOut, status_code=201)
def create_cart(
    payload: CreateCartIn,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_id = payload.user_id or identity.id
    return get_service(db).create_cart(user_id, identity)


@router.get("", response_model=List[CartOut])
def list_carts(_: TokenClaims = Depends(require_admin), db: Session = Depends(get_db)):
    return get_service(db).list_carts()


@router.get("/user/{user_id}", response_model=CartOut)
def get_cart_by_user(
    user_id: int,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_cart_with_display_info(user_id, identity)


@router.get("/{user_id}/total", response_model=CartTotalOut)
def get_cart_total(
    user_id: int,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_cart_total(user_id, identity)


@router.get("/{cart_id}", response_model=CartOut)
def get_cart(
    cart_id: int,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_cart(cart_id, identity)


@router.put("/{cart_id}", response_model=CartOut)
def add_item(
    cart_id: int,
    payload: ItemIn,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).add_or_merge_item(
        cart_id=cart_id,
        product_id=payload.product_id,
        quantity=payload.quantity,
        actor=identity,
    )


@router.delete("/{cart_id}/items/{product_id}", response_model=CartOut)
def remove_item(
    cart_id: int,
    product_id: int,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).remove_item(cart_id, product_id, identity)


@router.delete("/{cart_id}", response_model=MessageOut)
def delete_cart(
    cart_id: int,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_service(db).delete_cart(cart_id, identity)
    return MessageOut(message="Cart deleted")
