"""Recommender that ranks books by peer-review scoring."""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from readcircle.domain.experience import classify_experience
from readcircle.domain.models import Book, Review, User, UserBook
from readcircle.domain.scoring import ReviewSnapshot, calculate_recommendation_score
from readcircle.ports.recommender import RecommendationPage, RecommenderPort, ScoredBook

logger = logging.getLogger(__name__)


async def get_user_experience_years(session: AsyncSession, user_id: UUID) -> float:
    """Load a user's experience. Raises 404 for unknown users."""
    result = await session.execute(
        select(User.experience_years).where(User.id == user_id)
    )
    row = result.one_or_none()
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return row.experience_years or 0.0


class ReviewScoringRecommender(RecommenderPort):
    """
    Rank every reviewed book for a reader.

    Books the reader already reviewed or shelved are left out. Each remaining
    book is scored from its reviews; books scoring zero are dropped, the rest
    are sorted by score (highest first) and paginated.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _book_ids(self, model: type[Review] | type[UserBook], user_id: UUID) -> set[UUID]:
        result = await self._session.execute(
            select(model.book_id).where(model.user_id == user_id)
        )
        return set(result.scalars().all())

    async def recommend(
        self,
        user_id: UUID,
        limit: int = 6,
        offset: int = 0,
    ) -> RecommendationPage:
        experience_years = await get_user_experience_years(self._session, user_id)
        user_level = classify_experience(experience_years)
        logger.info(
            "Recommending for user %s: %.1f years (%s)",
            user_id,
            experience_years,
            user_level.label,
        )

        reviewed_ids = await self._book_ids(Review, user_id)
        shelved_ids = await self._book_ids(UserBook, user_id)

        result = await self._session.execute(
            select(Review, Book)
            .join(Book, Review.book_id == Book.id)
            .order_by(Book.created_at, Book.id, Review.created_at)
        )

        excluded_ids = reviewed_ids | shelved_ids
        candidates: dict[UUID, tuple[Book, list[ReviewSnapshot]]] = {}
        for review, book in result.all():
            if book.id in excluded_ids:
                continue
            candidates.setdefault(book.id, (book, []))[1].append(review.to_snapshot())

        scored: list[ScoredBook] = []
        for book_id, (book, snapshots) in candidates.items():
            score = calculate_recommendation_score(book_id, snapshots, experience_years)
            if score is not None and score.score > 0:
                scored.append(ScoredBook(book=book, score=score))

        scored.sort(key=lambda item: item.score.score, reverse=True)
        page = scored[offset : offset + limit]

        logger.info(
            "Recommendations for user %s: %d candidates, %d scored, %d returned "
            "(excluded %d reviewed, %d shelved)",
            user_id,
            len(candidates),
            len(scored),
            len(page),
            len(reviewed_ids),
            len(shelved_ids),
        )
        return RecommendationPage(
            user_level=user_level,
            items=page,
            total_candidates=len(candidates),
            excluded_reviewed=len(reviewed_ids),
            excluded_shelved=len(shelved_ids),
        )
