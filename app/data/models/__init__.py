#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.user import UserModel, AddressModel
from app.data.models.category import CategoryModel
from app.data.models.product import ProductModel
from app.data.models.review import ReviewModel
from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "AddressModel",
    "CategoryModel",
    "ProductModel",
    "ReviewModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
]
