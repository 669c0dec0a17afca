from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.data.database import Base
from app.domain.enums import Role


def _now():
    return datetime.now(timezone.utc)


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=False)
    role = Column(String(10), nullable=False, default=Role.CLIENT.value)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    addresses = relationship(
        "AddressModel",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="AddressModel.id",
    )


class AddressModel(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    street = Column(String(200), nullable=False)
    postal_code = Column(String(20), nullable=False)
    number = Column(String(20), nullable=False)

    user = relationship("UserModel", back_populates="addresses")
