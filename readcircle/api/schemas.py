"""Pydantic request/response schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from readcircle.domain.models import Book
from readcircle.domain.scoring import RecommendationScore

ExperienceLabel = Literal["beginner", "intermediate", "expert"]


# ── Books ──────────────────────────────────────────


class BookSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    isbn: str | None = None
    title: str
    author: str
    language: str
    categories: list[str] = []
    img_url: str
    description: str | None = None


# ── Reviews ────────────────────────────────────────


class ReviewCreateRequest(BaseModel):
    user_id: UUID
    difficulty: int = Field(..., ge=1, le=5, description="1 = easiest, 5 = hardest")
    comment: str = Field("", max_length=5000)
    display_type: Literal["anon", "user", "custom"] = "user"


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    book_id: UUID
    difficulty: int
    experience_years: float
    comment: str
    display_type: str
    created_at: datetime


# ── Recommendations ────────────────────────────────


class RecommendationItem(BaseModel):
    book: BookSummary
    score: float
    reasons: list[str]
    avg_difficulty: float
    review_count: int
    experience_level_match: int

    @classmethod
    def from_score(cls, book: Book, score: RecommendationScore) -> "RecommendationItem":
        return cls(
            book=BookSummary.model_validate(book),
            score=score.score,
            reasons=list(score.reasons),
            avg_difficulty=score.avg_difficulty,
            review_count=score.review_count,
            experience_level_match=score.experience_level_match_count,
        )


class ExcludedBooks(BaseModel):
    reviewed_count: int
    bookshelf_count: int


class RecommendationsResponse(BaseModel):
    recommendations: list[RecommendationItem]
    user_experience_level: ExperienceLabel
    total_books: int
    has_eligible_books: bool
    excluded_books: ExcludedBooks


class BookScoreResponse(BaseModel):
    book_id: UUID
    user_experience_level: ExperienceLabel
    scoreable: bool
    score: float | None = None
    reasons: list[str] = []
    avg_difficulty: float | None = None
    review_count: int = 0
    experience_level_match: int = 0
