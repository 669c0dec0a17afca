# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_admin
from app.data.database import get_db
from app.domain.schemas import (
    TokenClaims,
    OrderCreate,
    OrderOut,
    OrderStatOut,
    OrderStatusUpdate,
    MessageOut,
)
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Tworzy zamówienie z koszyka uzytkownika i usuwa koszyk.
    Wysyła powiadomienie asynchronicznie.
    """
    user_id = payload.user_id or identity.id
    return get_service(db).create_order_from_cart(user_id, payload.payment_method, identity)


@router.get("/stats", response_model=List[OrderStatOut])
def order_stats(_: TokenClaims = Depends(require_admin), db: Session = Depends(get_db)):
    return get_service(db).stats()


@router.get("/user/{user_id}", response_model=List[OrderOut])
def list_user_orders(
    user_id: int,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).list_orders_by_user(user_id, identity)


@router.get("", response_model=List[OrderOut])
def list_orders(_: TokenClaims = Depends(require_admin), db: Session = Depends(get_db)):
    return get_service(db).list_orders()


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Pobiera szczegóły zamówienia.
    """
    return get_service(db).get_order(order_id, identity)


@router.patch("/{order_id}", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    _: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).update_status(order_id, payload.status)


@router.delete("/{order_id}", response_model=MessageOut)
def delete_order(
    order_id: int,
    _: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    get_service(db).delete_order(order_id)
    return MessageOut(message="Order deleted")
