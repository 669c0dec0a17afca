# app/repos/cart_repo.py
from typing import List

from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def list_carts(self) -> List[CartModel]:
        return list(self.db.execute(select(CartModel).order_by(CartModel.id)).scalars().all())

    def get_cart_items(self, cart_id: int) -> List[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.id)
            ).scalars().all()
        )

    def get_cart_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def add_cart_item(self, item: CartItemModel) -> None:
        #bez commita, zatwierdza dopiero update_cart_version + commit w serwisie
        self.db.add(item)
        self.db.flush()

    def delete_cart_item(self, cart_id: int, product_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        )
        return result.rowcount

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        # UPDATE carts SET version = 2 WHERE id = 1 AND version = 1
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_cart(self, cart: CartModel, commit: bool = True) -> None:
        self.db.delete(cart)
        if commit:
            self.db.commit()
        else:
            self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
