# app/services/review_service.py
from typing import List

from sqlalchemy.orm import Session

from app.data.models.review import ReviewModel
from app.domain.errors import NotFoundError
from app.domain.schemas import TokenClaims, ReviewCreate, ReviewUpdate, ReviewOut
from app.repos.product_repo import ProductRepo
from app.repos.review_repo import ReviewRepo
from app.services.authorization import ensure_owner_or_admin
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ReviewService:
    """
    Recenzje produktow. Jeden uzytkownik moze dodac kilka recenzji
    tego samego produktu, nie ma tu ograniczenia unikalnosci.
    """

    def __init__(self, db: Session):
        self.repo = ReviewRepo(db)
        self.product_repo = ProductRepo(db)

    def _get_or_404(self, review_id: int) -> ReviewModel:
        review = self.repo.get_review(review_id)
        if not review:
            raise NotFoundError("Review not found")
        return review

    def create_review(self, payload: ReviewCreate, author: TokenClaims) -> ReviewOut:
        if not self.product_repo.get_product(payload.product_id):
            raise NotFoundError("Product not found")

        review = ReviewModel(
            user_id=author.id,
            product_id=payload.product_id,
            rating=payload.rating,
            comment=payload.comment,
        )
        created = self.repo.create_review(review)
        logger.info(f"Review {created.id} added to product {payload.product_id} by user {author.id}")
        return ReviewOut.model_validate(created)

    def update_review(self, review_id: int, payload: ReviewUpdate, actor: TokenClaims) -> ReviewOut:
        review = self._get_or_404(review_id)
        ensure_owner_or_admin(actor, review.user_id)

        if payload.rating is not None:
            review.rating = payload.rating
        if payload.comment is not None:
            review.comment = payload.comment
        return ReviewOut.model_validate(self.repo.save(review))

    def delete_review(self, review_id: int, actor: TokenClaims) -> None:
        review = self._get_or_404(review_id)
        ensure_owner_or_admin(actor, review.user_id)
        self.repo.delete_review(review)
        logger.info(f"Review {review_id} deleted")

    def get_review(self, review_id: int) -> ReviewOut:
        return ReviewOut.model_validate(self._get_or_404(review_id))

    def list_reviews(self) -> List[ReviewOut]:
        return [ReviewOut.model_validate(r) for r in self.repo.list_reviews()]
