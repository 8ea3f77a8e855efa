"""Recommender port — abstract interface for the recommendation listing."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from uuid import UUID

from readcircle.domain.experience import ExperienceLevel
from readcircle.domain.models import Book
from readcircle.domain.scoring import RecommendationScore


@dataclass
class ScoredBook:
    """A candidate book with its score for the requesting reader."""

    book: Book
    score: RecommendationScore


@dataclass
class RecommendationPage:
    """One page of ranked recommendations plus listing statistics."""

    user_level: ExperienceLevel
    items: list[ScoredBook] = field(default_factory=list)
    total_candidates: int = 0
    excluded_reviewed: int = 0
    excluded_shelved: int = 0

    @property
    def has_eligible_books(self) -> bool:
        return self.total_candidates > 0


class RecommenderPort(ABC):
    """Abstraction for the book recommendation engine."""

    @abstractmethod
    async def recommend(
        self,
        user_id: UUID,
        limit: int = 6,
        offset: int = 0,
    ) -> RecommendationPage:
        """Return ranked book recommendations for a user."""
        ...
