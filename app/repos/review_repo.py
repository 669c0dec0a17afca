from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.review import ReviewModel


class ReviewRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_review(self, review_id: int) -> ReviewModel | None:
        return self.db.get(ReviewModel, review_id)

    def list_reviews(self) -> List[ReviewModel]:
        return list(self.db.execute(select(ReviewModel).order_by(ReviewModel.id)).scalars().all())

    def create_review(self, review: ReviewModel) -> ReviewModel:
        self.db.add(review)
        self.db.commit()
        self.db.refresh(review)
        return review

    def save(self, review: ReviewModel) -> ReviewModel:
        self.db.commit()
        self.db.refresh(review)
        return review

    def delete_review(self, review: ReviewModel) -> None:
        self.db.delete(review)
        self.db.commit()
