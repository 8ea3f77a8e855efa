"""Review submission service."""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from readcircle.api.schemas import ReviewCreateRequest
from readcircle.domain.models import Book, Review, User

logger = logging.getLogger(__name__)


class ReviewService:
    """Handles review creation and lookup."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_book(self, book_id: UUID) -> Book:
        """Fetch a book or raise 404."""
        result = await self._session.execute(select(Book).where(Book.id == book_id))
        book = result.scalar_one_or_none()
        if not book:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Book not found",
            )
        return book

    async def create_review(self, book_id: UUID, data: ReviewCreateRequest) -> Review:
        """
        Submit a review for a book.

        The reviewer's current experience is copied onto the review, so later
        profile changes do not rewrite how past reviews are weighed.
        Raises 404 for an unknown user or book, 409 if the user already
        reviewed this book.
        """
        await self.get_book(book_id)

        user_result = await self._session.execute(
            select(User).where(User.id == data.user_id)
        )
        user = user_result.scalar_one_or_none()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )

        existing = await self._session.execute(
            select(Review.id).where(
                Review.book_id == book_id,
                Review.user_id == data.user_id,
            )
        )
        if existing.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="You have already reviewed this book",
            )

        review = Review(
            user_id=data.user_id,
            book_id=book_id,
            difficulty=data.difficulty,
            experience_years=user.experience_years or 0.0,
            comment=data.comment,
            display_type=data.display_type,
        )
        self._session.add(review)
        await self._session.flush()
        await self._session.refresh(review)
        logger.info(
            "Review %s created: book=%s user=%s difficulty=%d",
            review.id,
            book_id,
            data.user_id,
            data.difficulty,
        )
        return review

    async def get_reviews_for_book(self, book_id: UUID) -> list[Review]:
        """Retrieve all reviews for a specific book, newest first."""
        result = await self._session.execute(
            select(Review)
            .where(Review.book_id == book_id)
            .order_by(Review.created_at.desc())
        )
        return list(result.scalars().all())
