# app/services/password_service.py
from passlib.context import CryptContext

from app.utils.settings import BCRYPT_ROUNDS


class PasswordHasher:
    """
    Hashowanie hasel bcryptem (sol w kazdym hashu, koszt z BCRYPT_ROUNDS).
    Porownanie w passlib jest w stalym czasie.
    """

    def __init__(self, rounds: int | None = None):
        self.context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds or BCRYPT_ROUNDS,
        )

    def hash(self, plaintext: str) -> str:
        return self.context.hash(plaintext)

    def verify(self, plaintext: str, digest: str) -> bool:
        try:
            return self.context.verify(plaintext, digest)
        except (ValueError, TypeError):
            #uszkodzony hash w bazie traktujemy jak zle haslo
            return False
