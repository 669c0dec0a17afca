# app/repos/order_repo.py
from typing import List, Tuple

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.user import UserModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        #tylko flush, commit robi serwis razem z usunieciem koszyka
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders_with_users(self) -> List[Tuple[OrderModel, UserModel | None]]:
        rows = self.db.execute(
            select(OrderModel, UserModel)
            .outerjoin(UserModel, UserModel.id == OrderModel.user_id)
            .order_by(OrderModel.id)
        ).all()
        return [(r[0], r[1]) for r in rows]

    def list_orders_by_user(self, user_id: int) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel).where(OrderModel.user_id == user_id).order_by(OrderModel.id)
            ).scalars().all()
        )

    def count_by_status(self) -> List[Tuple[str, int]]:
        rows = self.db.execute(
            select(OrderModel.status, func.count(OrderModel.id))
            .group_by(OrderModel.status)
            .order_by(OrderModel.status)
        ).all()
        return [(r[0], r[1]) for r in rows]

    def update_order_status(self, order_id: int, status: str) -> OrderModel | None:
        order = self.get_order(order_id)
        if order:
            order.status = status
            self.db.commit()
            self.db.refresh(order)
        return order

    def delete_order(self, order: OrderModel) -> None:
        self.db.delete(order)
        self.db.commit()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
