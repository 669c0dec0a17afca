# app/services/authorization.py
from app.domain.enums import Role
from app.domain.errors import ForbiddenError
from app.domain.schemas import TokenClaims


def is_admin(identity: TokenClaims) -> bool:
    return identity.role == Role.ADMIN


def ensure_owner_or_admin(identity: TokenClaims, owner_id: int) -> None:
    """Wlasciciel zasobu albo administrator, inaczej 403."""
    if identity.id != owner_id and not is_admin(identity):
        raise ForbiddenError("Access denied")
