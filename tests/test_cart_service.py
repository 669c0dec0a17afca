from decimal import Decimal

import pytest

from app.data.models import CartModel, CartItemModel
from app.domain.errors import ConflictError, ForbiddenError, NotFoundError, StaleCartError, ValidationError
from app.domain.schemas import MAX_ITEM_QUANTITY
from app.repos.cart_repo import CartRepo
from app.services.cart_service import CartService
from tests.helpers import claims_for


@pytest.fixture
def service(db):
    return CartService(db)


def test_create_cart_is_empty_and_unique_per_user(service, alice):
    me = claims_for(alice)
    cart = service.create_cart(alice.id, me)

    assert cart.user_id == alice.id
    assert cart.items == []

    with pytest.raises(ConflictError):
        service.create_cart(alice.id, me)


def test_create_cart_for_unknown_user(service, admin):
    with pytest.raises(NotFoundError):
        service.create_cart(999, claims_for(admin))


def test_adding_same_product_twice_merges_quantities(service, alice, make_product):
    me = claims_for(alice)
    product = make_product(price="10.00")
    cart = service.create_cart(alice.id, me)

    service.add_or_merge_item(cart.cart_id, product.id, 2, me)
    result = service.add_or_merge_item(cart.cart_id, product.id, 3, me)

    assert len(result.items) == 1
    assert result.items[0].product_id == product.id
    assert result.items[0].quantity == 5
    assert result.items[0].name == "Keyboard"


def test_lines_keep_insertion_order(service, alice, make_product):
    me = claims_for(alice)
    first = make_product(name="Keyboard")
    second = make_product(name="Mouse")
    cart = service.create_cart(alice.id, me)

    service.add_or_merge_item(cart.cart_id, second.id, 1, me)
    service.add_or_merge_item(cart.cart_id, first.id, 1, me)
    result = service.add_or_merge_item(cart.cart_id, second.id, 4, me)

    assert [(i.name, i.quantity) for i in result.items] == [("Mouse", 5), ("Keyboard", 1)]


@pytest.mark.parametrize("quantity", [0, -1, 2.5, True, MAX_ITEM_QUANTITY + 1, 2**31])
def test_rejects_non_positive_or_non_integer_quantity(service, alice, make_product, quantity):
    me = claims_for(alice)
    product = make_product()
    cart = service.create_cart(alice.id, me)

    with pytest.raises(ValidationError):
        service.add_or_merge_item(cart.cart_id, product.id, quantity, me)


def test_merge_cannot_push_line_over_limit(service, alice, make_product):
    me = claims_for(alice)
    product = make_product()
    cart = service.create_cart(alice.id, me)
    service.add_or_merge_item(cart.cart_id, product.id, MAX_ITEM_QUANTITY - 1, me)

    with pytest.raises(ValidationError):
        service.add_or_merge_item(cart.cart_id, product.id, 2, me)

    assert service.get_cart(cart.cart_id, me).items[0].quantity == MAX_ITEM_QUANTITY - 1
    assert service.add_or_merge_item(cart.cart_id, product.id, 1, me).items[0].quantity == MAX_ITEM_QUANTITY


def test_adding_unknown_product_fails(service, alice):
    me = claims_for(alice)
    cart = service.create_cart(alice.id, me)

    with pytest.raises(NotFoundError):
        service.add_or_merge_item(cart.cart_id, 12345, 1, me)


def test_other_user_cannot_read_or_modify_cart(service, alice, bob, make_product):
    cart = service.create_cart(alice.id, claims_for(alice))
    product = make_product()

    with pytest.raises(ForbiddenError):
        service.get_cart(cart.cart_id, claims_for(bob))
    with pytest.raises(ForbiddenError):
        service.add_or_merge_item(cart.cart_id, product.id, 1, claims_for(bob))


def test_admin_can_read_any_cart(service, alice, admin):
    cart = service.create_cart(alice.id, claims_for(alice))
    assert service.get_cart(cart.cart_id, claims_for(admin)).user_id == alice.id


def test_cart_total_uses_current_prices(service, db, alice, make_product):
    me = claims_for(alice)
    keyboard = make_product(name="Keyboard", price="10.00")
    mouse = make_product(name="Mouse", price="2.50")
    cart = service.create_cart(alice.id, me)
    service.add_or_merge_item(cart.cart_id, keyboard.id, 2, me)
    service.add_or_merge_item(cart.cart_id, mouse.id, 3, me)

    keyboard.price = Decimal("12.00")
    db.commit()

    total = service.get_cart_total(alice.id, me)
    assert total.total == Decimal("31.50")
    assert [line.subtotal for line in total.items] == [Decimal("24.00"), Decimal("7.50")]


def test_remove_item(service, alice, make_product):
    me = claims_for(alice)
    product = make_product()
    cart = service.create_cart(alice.id, me)
    service.add_or_merge_item(cart.cart_id, product.id, 1, me)

    assert service.remove_item(cart.cart_id, product.id, me).items == []
    with pytest.raises(NotFoundError):
        service.remove_item(cart.cart_id, product.id, me)


def test_stale_version_write_is_detected(db, alice):
    repo = CartRepo(db)
    cart = repo.create_cart(CartModel(user_id=alice.id, version=1))

    assert repo.update_cart_version(cart.id, 1, {"version": 2}) == 1
    repo.commit()
    #drugi zapis z ta sama stara wersja nic nie zmienia
    assert repo.update_cart_version(cart.id, 1, {"version": 2}) == 0
    repo.rollback()


def test_merge_gives_up_with_conflict_after_retries(service, alice, make_product, monkeypatch):
    me = claims_for(alice)
    product = make_product()
    cart = service.create_cart(alice.id, me)

    calls = []

    def always_stale(cart_id, old_version, new_data):
        calls.append(old_version)
        return 0

    monkeypatch.setattr(service.repo, "update_cart_version", always_stale)

    with pytest.raises(StaleCartError) as exc:
        service.add_or_merge_item(cart.cart_id, product.id, 1, me)

    assert isinstance(exc.value, ConflictError)
    assert len(calls) == 3
    assert service.repo.get_cart_items(cart.cart_id) == []


def test_merge_retries_after_single_conflict(service, db, alice, make_product, monkeypatch):
    me = claims_for(alice)
    product = make_product()
    cart = service.create_cart(alice.id, me)
    original = service.repo.update_cart_version
    calls = []

    def stale_once(cart_id, old_version, new_data):
        calls.append(old_version)
        if len(calls) == 1:
            return 0
        return original(cart_id, old_version, new_data)

    monkeypatch.setattr(service.repo, "update_cart_version", stale_once)

    result = service.add_or_merge_item(cart.cart_id, product.id, 2, me)

    assert len(calls) == 2
    assert result.items[0].quantity == 2
    db.expire_all()
    assert db.get(CartModel, cart.cart_id).version == 2
    assert db.query(CartItemModel).count() == 1
