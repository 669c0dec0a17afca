from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_admin
from app.data.database import get_db
from app.domain.schemas import TokenClaims, ReviewCreate, ReviewUpdate, ReviewOut, MessageOut
from app.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


def get_service(db: Session):
    return ReviewService(db)


@router.post("", response_model=ReviewOut, status_code=201)
def create_review(
    payload: ReviewCreate,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).create_review(payload, identity)


@router.get("", response_model=List[ReviewOut])
def list_reviews(_: TokenClaims = Depends(require_admin), db: Session = Depends(get_db)):
    return get_service(db).list_reviews()


@router.get("/{review_id}", response_model=ReviewOut)
def get_review(review_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_review(review_id)


@router.put("/{review_id}", response_model=ReviewOut)
def update_review(
    review_id: int,
    payload: ReviewUpdate,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).update_review(review_id, payload, identity)


@router.delete("/{review_id}", response_model=MessageOut)
def delete_review(
    review_id: int,
    identity: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_service(db).delete_review(review_id, identity)
    return MessageOut(message="Review deleted")
