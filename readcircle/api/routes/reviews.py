"""Review routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from readcircle.api.schemas import ReviewCreateRequest, ReviewResponse
from readcircle.database import get_session
from readcircle.services.review import ReviewService

router = APIRouter(prefix="/books/{book_id}/reviews", tags=["Reviews"])


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    book_id: UUID,
    data: ReviewCreateRequest,
    session: AsyncSession = Depends(get_session),
) -> ReviewResponse:
    review = await ReviewService(session).create_review(book_id, data)
    return ReviewResponse.model_validate(review)


@router.get("", response_model=list[ReviewResponse])
async def list_reviews(
    book_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> list[ReviewResponse]:
    service = ReviewService(session)
    await service.get_book(book_id)
    reviews = await service.get_reviews_for_book(book_id)
    return [ReviewResponse.model_validate(r) for r in reviews]
