# app/services/user_service.py
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.user import UserModel, AddressModel
from app.domain.enums import Role
from app.domain.errors import ConflictError, NotFoundError, UnauthorizedError, ForbiddenError
from app.domain.schemas import TokenClaims, UserCreate, UserUpdate, UserRead, LoginOut
from app.repos.cart_repo import CartRepo
from app.repos.user_repo import UserRepo
from app.services.password_service import PasswordHasher
from app.services.token_service import TokenService
from app.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(
        self,
        db: Session,
        hasher: PasswordHasher | None = None,
        tokens: TokenService | None = None,
    ):
        self.repo = UserRepo(db)
        self.cart_repo = CartRepo(db)
        self.hasher = hasher or PasswordHasher()
        self.tokens = tokens or TokenService()

    def _get_or_404(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    #commands
    def create_user(self, payload: UserCreate, actor: TokenClaims | None = None) -> UserRead:
        """
        Rejestracja. Rola ADMIN tylko gdy tworzy ja zalogowany administrator,
        w kazdym innym przypadku konto dostaje CLIENT.
        """
        if self.repo.get_user_by_email(payload.email):
            raise ConflictError("Email is already registered")

        role = Role.CLIENT
        if actor is not None and actor.role == Role.ADMIN:
            role = payload.role

        user = UserModel(
            name=payload.name,
            email=payload.email,
            password_hash=self.hasher.hash(payload.password),
            phone=payload.phone,
            role=role.value,
            addresses=[AddressModel(**a.model_dump()) for a in payload.addresses],
        )
        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("Email is already registered")

        logger.info(f"User {created.id} registered with role {created.role}")
        return UserRead.model_validate(created)

    def update_user(self, user_id: int, payload: UserUpdate, actor: TokenClaims) -> UserRead:
        user = self._get_or_404(user_id)
        data = payload.model_dump(exclude_unset=True)

        if "role" in data and data["role"] is not None and actor.role != Role.ADMIN:
            raise ForbiddenError("Only administrators can change roles")

        if data.get("email") and data["email"] != user.email:
            if self.repo.get_user_by_email(data["email"]):
                raise ConflictError("Email is already registered")
            user.email = data["email"]
        if data.get("name"):
            user.name = data["name"]
        if data.get("phone"):
            user.phone = data["phone"]
        if data.get("password"):
            user.password_hash = self.hasher.hash(data["password"])
        if data.get("role") is not None:
            user.role = Role(data["role"]).value
        if payload.addresses is not None:
            user.addresses = [AddressModel(**a.model_dump()) for a in payload.addresses]

        try:
            updated = self.repo.save(user)
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("Email is already registered")

        logger.info(f"User {user_id} updated")
        return UserRead.model_validate(updated)

    def delete_user(self, user_id: int) -> None:
        user = self._get_or_404(user_id)
        cart = self.cart_repo.get_cart_by_user(user_id)
        if cart:
            self.cart_repo.delete_cart(cart, commit=False)
        self.repo.delete_user(user)
        logger.info(f"User {user_id} deleted")

    def login(self, email: str, password: str) -> LoginOut:
        user = self.repo.get_user_by_email(email)
        #ten sam komunikat dla nieznanego emaila i zlego hasla
        if not user or not self.hasher.verify(password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")

        token = self.tokens.issue(
            {"id": user.id, "name": user.name, "email": user.email, "role": user.role}
        )
        logger.info(f"User {user.id} logged in")
        return LoginOut(access_token=token, user=UserRead.model_validate(user))

    def ensure_seed_admin(self, email: str, password: str, name: str) -> UserRead:
        existing = self.repo.get_user_by_email(email)
        if existing:
            return UserRead.model_validate(existing)
        admin = UserModel(
            name=name,
            email=email,
            password_hash=self.hasher.hash(password),
            phone="000000000",
            role=Role.ADMIN.value,
        )
        created = self.repo.create_user(admin)
        logger.info(f"Seeded admin account {created.id}")
        return UserRead.model_validate(created)

    #query
    def get_user(self, user_id: int) -> UserRead:
        return UserRead.model_validate(self._get_or_404(user_id))

    def list_users(self) -> List[UserRead]:
        return [UserRead.model_validate(u) for u in self.repo.list_users()]
