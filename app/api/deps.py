# app/api/deps.py
from typing import Optional

from fastapi import Depends, Header, Request
from pydantic import ValidationError as PydanticValidationError

from app.domain.errors import ForbiddenError, UnauthorizedError
from app.domain.schemas import TokenClaims
from app.services.authorization import is_admin
from app.services.token_service import TokenService

_token_service = TokenService()


def get_token_service() -> TokenService:
    return _token_service


def _decode_identity(authorization: Optional[str], tokens: TokenService) -> Optional[TokenClaims]:
    token = tokens.extract_bearer(authorization)
    if not token:
        return None
    claims = tokens.verify(token)
    if not claims:
        return None
    try:
        return TokenClaims.model_validate(claims)
    except PydanticValidationError:
        return None


def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """Basic gate: dowolny poprawny token, inaczej 401."""
    identity = _decode_identity(authorization, tokens)
    if identity is None:
        raise UnauthorizedError()
    request.state.user = identity
    return identity


def get_optional_user(
    authorization: Optional[str] = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[TokenClaims]:
    return _decode_identity(authorization, tokens)


def require_admin(identity: TokenClaims = Depends(get_current_user)) -> TokenClaims:
    """Elevated gate: brak tokena 401, token bez roli ADMIN 403."""
    if not is_admin(identity):
        raise ForbiddenError("Administrator role required")
    return identity
