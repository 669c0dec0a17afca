# app/services/token_service.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt
from jose.exceptions import JOSEError

from app.utils.settings import JWT_SECRET, JWT_ALGORITHM, TOKEN_EXPIRATION_MINUTES


class TokenService:
    def __init__(
        self,
        secret: str | None = None,
        algorithm: str | None = None,
        expires_minutes: int | None = None,
    ):
        self.secret = secret or JWT_SECRET
        self.algorithm = algorithm or JWT_ALGORITHM
        self.expires = timedelta(minutes=expires_minutes or TOKEN_EXPIRATION_MINUTES)

    def issue(self, claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        to_encode = claims.copy()
        to_encode["exp"] = datetime.now(timezone.utc) + (expires_delta or self.expires)
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Zwraca claims albo None. Zly format, wygasniecie i zly podpis
        daja ten sam wynik, wywolujacy nie wie ktory check nie przeszedl.
        """
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JOSEError:
            return None

    @staticmethod
    def extract_bearer(header_value: Optional[str]) -> Optional[str]:
        if not header_value or not isinstance(header_value, str):
            return None
        parts = header_value.split()
        if len(parts) != 2 or parts[0] != "Bearer":
            return None
        return parts[1]
