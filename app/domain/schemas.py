# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from app.domain.enums import Role, OrderStatus

#gorna granica ilosci jednej pozycji koszyka, kolumna quantity to INTEGER
MAX_ITEM_QUANTITY = 10_000


# =====================================================
# ERRORS
# =====================================================
class ErrorBody(BaseModel):
    kind: str
    message: str


class ErrorOut(BaseModel):
    """Jednolity ksztalt kazdej odpowiedzi z bledem."""

    error: ErrorBody


class MessageOut(BaseModel):
    message: str


# =====================================================
# AUTH
# =====================================================
class TokenClaims(BaseModel):
    """Zdekodowany payload tokena, dolaczany do requestu przez Auth Gate."""

    id: int
    name: str
    email: str
    role: Role


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class LogoutIn(BaseModel):
    email: EmailStr


# =====================================================
# USERS
# =====================================================
class AddressIn(BaseModel):
    street: str = Field(..., min_length=1, max_length=200)
    postal_code: str = Field(..., min_length=1, max_length=20)
    number: str = Field(..., min_length=1, max_length=20)


class AddressOut(AddressIn):
    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    """Schema dla rejestracji uzytkownika."""

    name: str = Field(..., min_length=1, max_length=100, description="Imię użytkownika")
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    phone: str = Field(..., min_length=3, max_length=30)
    role: Role = Role.CLIENT
    addresses: List[AddressIn] = Field(default_factory=list)


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=72)
    phone: Optional[str] = Field(None, min_length=3, max_length=30)
    role: Optional[Role] = None
    addresses: Optional[List[AddressIn]] = None


class UserRead(BaseModel):
    """Schema dla użytkownika (response), bez hasha hasla."""

    id: int
    name: str
    email: str
    phone: str
    role: Role
    addresses: List[AddressOut] = []

    model_config = ConfigDict(from_attributes=True)


class LoginOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


# =====================================================
# CATEGORIES
# =====================================================
class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class CategoryProductOut(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class CategoryOut(BaseModel):
    id: int
    name: str
    description: str

    model_config = ConfigDict(from_attributes=True)


class CategoryDetailOut(CategoryOut):
    products: List[CategoryProductOut] = []


class CategoryStatOut(BaseModel):
    category_id: int
    name: str
    product_count: int


# =====================================================
# REVIEWS
# =====================================================
class ReviewCreate(BaseModel):
    product_id: int = Field(..., gt=0)
    rating: int = Field(..., ge=1, le=5, description="Ocena 1-5")
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewOut(BaseModel):
    id: int
    user_id: int
    product_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# PRODUCTS
# =====================================================
class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    description: Optional[str] = Field(None, max_length=1000)
    brand: str = Field(..., min_length=1, max_length=100)
    stock: int = Field(0, ge=0)
    category_id: Optional[int] = Field(None, gt=0)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    description: Optional[str] = Field(None, max_length=1000)
    brand: Optional[str] = Field(None, min_length=1, max_length=100)
    stock: Optional[int] = Field(None, ge=0)
    category_id: Optional[int] = Field(None, gt=0)


class StockUpdate(BaseModel):
    stock: int = Field(..., ge=0)


class ProductOut(BaseModel):
    id: int
    name: str
    price: Decimal
    description: str
    brand: str
    stock: int
    category_id: Optional[int] = None
    review_ids: List[int] = []

    model_config = ConfigDict(from_attributes=True)


class TopProductOut(BaseModel):
    id: int
    name: str
    price: Decimal
    brand: str
    review_count: int
    reviews: List[ReviewOut]


# =====================================================
# CART
# =====================================================
class CreateCartIn(BaseModel):
    """Schema dla tworzenia koszyka. Bez user_id koszyk dostaje zalogowany uzytkownik."""

    user_id: Optional[int] = Field(None, gt=0, description="ID użytkownika (musi być > 0)")


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(..., gt=0, le=MAX_ITEM_QUANTITY, description="Ilość produktu (musi być > 0)")

    @field_validator("quantity", mode="before")
    @classmethod
    def _integer_quantity(cls, v):
        #odrzuc 2.5 i "2", bool tez nie jest iloscia
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError("quantity must be a positive integer")
        return v


class CartItemOut(BaseModel):
    """Pozycja koszyka do wyswietlenia, tylko nazwa produktu."""

    product_id: int
    name: Optional[str] = None
    quantity: int


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    cart_id: int
    user_id: int
    items: List[CartItemOut]


class CartTotalItemOut(BaseModel):
    product_id: int
    name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class CartTotalOut(BaseModel):
    cart_id: int
    user_id: int
    items: List[CartTotalItemOut]
    total: Decimal


# =====================================================
# ORDERS
# =====================================================
class OrderCreate(BaseModel):
    """Schema dla tworzenia zamówienia z koszyka uzytkownika."""

    user_id: Optional[int] = Field(None, gt=0, description="ID użytkownika (musi być > 0)")
    payment_method: str = Field(..., min_length=1, max_length=50)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderItemOut(BaseModel):
    product_id: int
    product_name: str
    unit_price: Decimal
    quantity: int
    subtotal: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderUserOut(BaseModel):
    name: str
    email: str


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: int
    user_id: int
    status: OrderStatus
    items: List[OrderItemOut]
    total: Decimal
    payment_method: str
    created_at: datetime
    user: Optional[OrderUserOut] = None

    model_config = ConfigDict(from_attributes=True)


class OrderStatOut(BaseModel):
    status: OrderStatus
    count: int
