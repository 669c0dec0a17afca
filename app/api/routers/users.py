from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_optional_user, require_admin
from app.data.database import get_db
from app.domain.errors import ForbiddenError
from app.domain.schemas import (
    TokenClaims,
    UserCreate,
    UserUpdate,
    UserRead,
    LoginIn,
    LoginOut,
    LogoutIn,
    MessageOut,
)
from app.services.authorization import ensure_owner_or_admin
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def get_service(db: Session):
    return UserService(db)


@router.post("", response_model=UserRead, status_code=201)
def create_user(
    payload: UserCreate,
    actor: Optional[TokenClaims] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    return get_service(db).create_user(payload, actor)


@router.post("/login", response_model=LoginOut)
def login(payload: LoginIn, response: Response, db: Session = Depends(get_db)):
    result = get_service(db).login(payload.email, payload.password)
    response.headers["Authorization"] = f"Bearer {result.access_token}"
    return result


@router.post("/logout", response_model=MessageOut)
def logout(
    payload: LogoutIn,
    response: Response,
    identity: TokenClaims = Depends(get_current_user),
):
    #tokeny sa bezstanowe, klient po prostu je porzuca
    if identity.email != payload.email:
        raise ForbiddenError("Access denied")
    response.headers["Authorization"] = ""
    return MessageOut(message="Logged out")


@router.get("", response_model=List[UserRead])
def list_users(_: TokenClaims = Depends(require_admin), db: Session = Depends(get_db)):
    return get_service(db).list_users()


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ensure_owner_or_admin(identity, user_id)
    return get_service(db).get_user(user_id)


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    payload: UserUpdate,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ensure_owner_or_admin(identity, user_id)
    return get_service(db).update_user(user_id, payload, identity)


@router.delete("/{user_id}", response_model=MessageOut)
def delete_user(
    user_id: int,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ensure_owner_or_admin(identity, user_id)
    get_service(db).delete_user(user_id)
    return MessageOut(message="User deleted")
