from decimal import Decimal
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.errors import ConflictError, NotFoundError, StaleCartError, ValidationError
from app.domain.schemas import (
    MAX_ITEM_QUANTITY,
    TokenClaims,
    CartOut,
    CartItemOut,
    CartTotalOut,
    CartTotalItemOut,
)
from app.repos.cart_repo import CartRepo
from app.repos.product_repo import ProductRepo
from app.repos.user_repo import UserRepo
from app.services.authorization import ensure_owner_or_admin
from app.utils.retry import stale_cart_retry
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Serwis obsługujący Use Case'y dla domeny Cart.
    Zgodnie z CQRS: komendy (create, add, remove, delete) i zapytania (get, total).
    Jeden koszyk na uzytkownika, pozycje scalane po product_id.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.product_repo = ProductRepo(db)
        self.user_repo = UserRepo(db)

    def _get_or_404(self, cart_id: int) -> CartModel:
        cart = self.repo.get_cart(cart_id)
        if not cart:
            raise NotFoundError("Cart not found")
        return cart

    def _get_by_user_or_404(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")
        return cart

    def _to_out(self, cart: CartModel) -> CartOut:
        items = self.repo.get_cart_items(cart.id)
        products = self.product_repo.get_products([i.product_id for i in items])

        #tylko nazwa produktu, bez calego dokumentu
        return CartOut(
            cart_id=cart.id,
            user_id=cart.user_id,
            items=[
                CartItemOut(
                    product_id=i.product_id,
                    name=products[i.product_id].name if i.product_id in products else None,
                    quantity=i.quantity,
                )
                for i in items
            ],
        )

    # =====================================================
    # QUERY
    # =====================================================
    def get_cart(self, cart_id: int, actor: TokenClaims) -> CartOut:
        cart = self._get_or_404(cart_id)
        ensure_owner_or_admin(actor, cart.user_id)
        return self._to_out(cart)

    def get_cart_with_display_info(self, user_id: int, actor: TokenClaims) -> CartOut:
        ensure_owner_or_admin(actor, user_id)
        return self._to_out(self._get_by_user_or_404(user_id))

    def list_carts(self) -> List[CartOut]:
        return [self._to_out(c) for c in self.repo.list_carts()]

    def get_cart_total(self, user_id: int, actor: TokenClaims) -> CartTotalOut:
        """
        Szacunkowa suma po aktualnych cenach. Wiazaca suma powstaje
        dopiero przy tworzeniu zamowienia.
        """
        ensure_owner_or_admin(actor, user_id)
        cart = self._get_by_user_or_404(user_id)

        items = self.repo.get_cart_items(cart.id)
        products = self.product_repo.get_products([i.product_id for i in items])

        lines = []
        for i in items:
            product = products.get(i.product_id)
            if product is None:
                logger.warning(f"Cart {cart.id} references missing product {i.product_id}")
                continue
            lines.append(
                CartTotalItemOut(
                    product_id=product.id,
                    name=product.name,
                    quantity=i.quantity,
                    unit_price=product.price,
                    subtotal=product.price * i.quantity,
                )
            )

        total = sum((line.subtotal for line in lines), Decimal("0.00"))
        return CartTotalOut(cart_id=cart.id, user_id=cart.user_id, items=lines, total=total)

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_cart(self, user_id: int, actor: TokenClaims) -> CartOut:
        """
        Use Case: Utworzenie pustego koszyka (Command).
        Uzytkownik musi istniec i nie moze miec juz koszyka.
        """
        ensure_owner_or_admin(actor, user_id)

        if not self.user_repo.get_user(user_id):
            raise NotFoundError("User not found")

        if self.repo.get_cart_by_user(user_id):
            raise ConflictError("User already has a cart")

        try:
            created = self.repo.create_cart(CartModel(user_id=user_id, version=1))
        except IntegrityError:
            #rownolegly request zdazyl zalozyc koszyk
            self.repo.rollback()
            raise ConflictError("User already has a cart")

        logger.info(f"Utworzono nowy koszyk {created.id} dla użytkownika {user_id}")
        return self._to_out(created)

    def add_or_merge_item(self, cart_id: int, product_id: int, quantity: int, actor: TokenClaims) -> CartOut:
        """
        Use Case: Dodanie produktu do koszyka (Command).

        Jesli produkt jest juz w koszyku, zwiekszamy ilosc zamiast dublowac pozycje.
        Wspolbieznosc: optimistic locking na wersji koszyka + ponowienie (tenacity).
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("Quantity must be a positive integer")
        if quantity > MAX_ITEM_QUANTITY:
            raise ValidationError(f"Quantity must not exceed {MAX_ITEM_QUANTITY}")

        cart = self._get_or_404(cart_id)
        ensure_owner_or_admin(actor, cart.user_id)

        if not self.product_repo.get_product(product_id):
            raise NotFoundError("Product not found")

        self._merge_item(cart_id, product_id, quantity)
        return self._to_out(self._get_or_404(cart_id))

    @stale_cart_retry()
    def _merge_item(self, cart_id: int, product_id: int, quantity: int) -> None:
        cart = self._get_or_404(cart_id)
        version = cart.version

        try:
            existing_item = self.repo.get_cart_item(cart_id, product_id)
            if existing_item:
                if existing_item.quantity + quantity > MAX_ITEM_QUANTITY:
                    raise ValidationError(f"Quantity must not exceed {MAX_ITEM_QUANTITY}")
                logger.info(
                    f"Produkt {product_id} już jest w koszyku {cart_id}, zwiekszam ilosc "
                    f"z {existing_item.quantity} do {existing_item.quantity + quantity}"
                )
                existing_item.quantity += quantity
                self.repo.add_cart_item(existing_item)
            else:
                logger.info(f"Dodaje nowy produkt {product_id} do koszyka {cart_id}")
                self.repo.add_cart_item(
                    CartItemModel(cart_id=cart_id, product_id=product_id, quantity=quantity)
                )
        except IntegrityError:
            #ktos inny dodal ta sama pozycje, u_cart_product
            self.repo.rollback()
            raise StaleCartError(cart_id)

        # np w bazie update set version 2 where id 1 and version 1
        rowcount = self.repo.update_cart_version(
            cart_id=cart_id,
            old_version=version,
            new_data={"version": version + 1},
        )
        if rowcount == 0:
            self.repo.rollback()
            logger.warning(f"Konflikt wspolbieznosci na koszyku {cart_id}, ponawiam")
            raise StaleCartError(cart_id)

        self.repo.commit()
        logger.info(f"Koszyk {cart_id} zapisany, nowa wersja: {version + 1}")

    def remove_item(self, cart_id: int, product_id: int, actor: TokenClaims) -> CartOut:
        """
        Use Case: Usunięcie produktu z koszyka (Command).
        """
        cart = self._get_or_404(cart_id)
        ensure_owner_or_admin(actor, cart.user_id)

        if self.repo.delete_cart_item(cart_id, product_id) == 0:
            self.repo.rollback()
            raise NotFoundError("Product is not in the cart")

        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={"version": cart.version + 1},
        )
        if rowcount == 0:
            self.repo.rollback()
            raise StaleCartError(cart_id)

        self.repo.commit()
        logger.info(f"Produkt {product_id} usunięty z koszyka {cart_id}")
        return self._to_out(self._get_or_404(cart_id))

    def delete_cart(self, cart_id: int, actor: TokenClaims) -> None:
        cart = self._get_or_404(cart_id)
        ensure_owner_or_admin(actor, cart.user_id)
        self.repo.delete_cart(cart)
        logger.info(f"Koszyk {cart_id} usunięty")
