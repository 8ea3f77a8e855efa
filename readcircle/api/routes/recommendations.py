"""Recommendation routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from readcircle.adapters.recommender.review_scoring import (
    ReviewScoringRecommender,
    get_user_experience_years,
)
from readcircle.api.schemas import (
    BookScoreResponse,
    ExcludedBooks,
    RecommendationItem,
    RecommendationsResponse,
)
from readcircle.config import settings
from readcircle.database import get_session
from readcircle.domain.experience import classify_experience
from readcircle.domain.scoring import calculate_recommendation_score
from readcircle.services.review import ReviewService

router = APIRouter(tags=["Recommendations"])


@router.get("/recommendations", response_model=RecommendationsResponse)
async def get_recommendations(
    user_id: UUID,
    limit: int = Query(
        settings.recommendation_default_limit,
        ge=1,
        le=settings.recommendation_max_limit,
    ),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> RecommendationsResponse:
    """Get books ranked for the user from peer reviews."""
    recommender = ReviewScoringRecommender(session)
    page = await recommender.recommend(user_id, limit=limit, offset=offset)

    return RecommendationsResponse(
        recommendations=[
            RecommendationItem.from_score(item.book, item.score) for item in page.items
        ],
        user_experience_level=page.user_level.label,
        total_books=page.total_candidates,
        has_eligible_books=page.has_eligible_books,
        excluded_books=ExcludedBooks(
            reviewed_count=page.excluded_reviewed,
            bookshelf_count=page.excluded_shelved,
        ),
    )


@router.get("/books/{book_id}/recommendation", response_model=BookScoreResponse)
async def get_book_recommendation(
    book_id: UUID,
    user_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> BookScoreResponse:
    """Score a single book for the user."""
    service = ReviewService(session)
    await service.get_book(book_id)
    experience_years = await get_user_experience_years(session, user_id)
    user_level = classify_experience(experience_years)

    reviews = await service.get_reviews_for_book(book_id)
    score = calculate_recommendation_score(
        book_id, [r.to_snapshot() for r in reviews], experience_years
    )
    if score is None:
        return BookScoreResponse(
            book_id=book_id,
            user_experience_level=user_level.label,
            scoreable=False,
        )

    return BookScoreResponse(
        book_id=book_id,
        user_experience_level=user_level.label,
        scoreable=True,
        score=score.score,
        reasons=list(score.reasons),
        avg_difficulty=score.avg_difficulty,
        review_count=score.review_count,
        experience_level_match=score.experience_level_match_count,
    )
