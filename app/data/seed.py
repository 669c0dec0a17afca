# app/data/seed.py
from app.data.database import SessionLocal
from app.services.user_service import UserService
from app.utils.settings import ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_NAME
from app.utils.logging import get_logger

logger = get_logger(__name__)


def seed_admin(email: str | None = None, password: str | None = None, name: str | None = None):
    """Zaklada konto administratora z konfiguracji, tylko jesli go jeszcze nie ma."""
    email = email or ADMIN_EMAIL
    password = password or ADMIN_PASSWORD
    if not email or not password:
        logger.info("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin seed")
        return None

    db = SessionLocal()
    try:
        return UserService(db).ensure_seed_admin(email, password, name or ADMIN_NAME)
    finally:
        db.close()
