# app/services/order_service.py
from decimal import Decimal
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.domain.enums import OrderStatus, ORDER_TRANSITIONS
from app.domain.errors import ConflictError, InternalError, NotFoundError, StaleCartError, ValidationError
from app.domain.schemas import TokenClaims, OrderOut, OrderStatOut, OrderUserOut
from app.repos.cart_repo import CartRepo
from app.repos.order_repo import OrderRepo
from app.repos.product_repo import ProductRepo
from app.services.authorization import ensure_owner_or_admin
from app.services.notification_service import NotificationService
from app.utils.settings import STRICT_ORDER_TRANSITIONS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Separacja od CartService zgodnie z wymaganiami.
    """

    def __init__(
        self,
        db: Session,
        notification_service: NotificationService | None = None,
        strict_transitions: bool | None = None,
    ):
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.product_repo = ProductRepo(db)
        self.notification_service = notification_service or NotificationService()
        self.strict_transitions = (
            STRICT_ORDER_TRANSITIONS if strict_transitions is None else strict_transitions
        )

    def _get_or_404(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def create_order_from_cart(self, user_id: int, payment_method: str, actor: TokenClaims) -> OrderOut:
        """
        Use Case: Tworzenie zamówienia z koszyka.

        1. Pobiera aktualna cene kazdego produktu z koszyka
        2. Liczy subtotal = cena * ilosc i total = suma subtotali
        3. Zapisuje snapshot nazwy i ceny produktu w pozycji zamowienia
        4. Tworzy zamowienie PENDING i usuwa koszyk w jednej transakcji
        5. Wysyła powiadomienie (async)
        """
        ensure_owner_or_admin(actor, user_id)

        if not payment_method or not payment_method.strip():
            raise ValidationError("Payment method is required")

        cart = self.cart_repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")

        version = cart.version
        items = self.cart_repo.get_cart_items(cart.id)
        if not items:
            raise ValidationError("Cart is empty")

        products = self.product_repo.get_products([i.product_id for i in items])
        missing = [i.product_id for i in items if i.product_id not in products]
        if missing:
            #wszystko albo nic, nie tworzymy zamowienia z brakujacymi pozycjami
            raise NotFoundError(f"Products no longer available: {missing}")

        lines = []
        for i in items:
            product = products[i.product_id]
            lines.append(
                OrderItemModel(
                    product_id=product.id,
                    product_name=product.name,
                    unit_price=product.price,
                    quantity=i.quantity,
                    subtotal=product.price * i.quantity,
                )
            )
        total = sum((line.subtotal for line in lines), Decimal("0.00"))

        order = OrderModel(
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            total=total,
            payment_method=payment_method.strip(),
            items=lines,
        )

        try:
            #koszyk zmieniony po odczycie pozycji, zamowienie byloby nieaktualne
            rowcount = self.cart_repo.update_cart_version(
                cart_id=cart.id,
                old_version=version,
                new_data={"version": version + 1},
            )
            if rowcount == 0:
                self.repo.rollback()
                logger.warning(f"Cart {cart.id} changed during checkout, order not created")
                raise StaleCartError(cart.id)

            self.repo.add_order(order)
            self.cart_repo.delete_cart(cart, commit=False)
            self.repo.commit()
        except SQLAlchemyError as e:
            #rollback cofa i zamowienie i usuniecie koszyka
            self.repo.rollback()
            logger.error(f"Order creation from cart {cart.id} failed, cart left intact: {e}")
            raise InternalError("Could not create the order")

        logger.info(f"Order {order.id} created from cart {cart.id}, total {total}")

        self.notification_service.send_order_notification(user_id, order.id, total)

        return OrderOut.model_validate(order)

    def update_status(self, order_id: int, target: OrderStatus | str) -> OrderOut:
        """
        Zmiana stanu zamowienia (tylko admin, pilnuje tego router).
        Cel spoza enuma jest odrzucany zanim dotkniemy bazy.
        """
        try:
            target = OrderStatus(target)
        except ValueError:
            raise ValidationError(f"Invalid order status: {target}")

        order = self._get_or_404(order_id)
        current = OrderStatus(order.status)

        if target != current and target not in ORDER_TRANSITIONS[current]:
            if self.strict_transitions:
                raise ConflictError(f"Order cannot move from {current.value} to {target.value}")
            logger.warning(
                f"Order {order_id} moved outside the transition graph: {current.value} -> {target.value}"
            )

        updated = self.repo.update_order_status(order_id, target.value)
        logger.info(f"Order {order_id} status {current.value} -> {target.value}")

        self.notification_service.send_status_notification(updated.user_id, order_id, target.value)
        return OrderOut.model_validate(updated)

    def delete_order(self, order_id: int) -> None:
        order = self._get_or_404(order_id)
        self.repo.delete_order(order)
        logger.info(f"Order {order_id} deleted")

    def get_order(self, order_id: int, actor: TokenClaims) -> OrderOut:
        """
        Use Case: Pobranie zamówienia (Query).
        """
        order = self._get_or_404(order_id)
        ensure_owner_or_admin(actor, order.user_id)
        return OrderOut.model_validate(order)

    def list_orders(self) -> List[OrderOut]:
        result = []
        for order, user in self.repo.list_orders_with_users():
            out = OrderOut.model_validate(order)
            if user is not None:
                out.user = OrderUserOut(name=user.name, email=user.email)
            result.append(out)
        return result

    def list_orders_by_user(self, user_id: int, actor: TokenClaims) -> List[OrderOut]:
        ensure_owner_or_admin(actor, user_id)
        return [OrderOut.model_validate(o) for o in self.repo.list_orders_by_user(user_id)]

    def stats(self) -> List[OrderStatOut]:
        return [OrderStatOut(status=status, count=count) for status, count in self.repo.count_by_status()]
