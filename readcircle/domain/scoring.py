"""
Personalized book recommendation scoring.

Turns the peer reviews of one book into a 0-100 relevance score for a reader,
plus short reasons to show next to it. Everything here is pure and holds no
state, so callers may score many books concurrently.

The score is a weighted sum of four sub-scores, each in [0, 100]:

  experience match   share of reviews written at the reader's own level
  difficulty fit     how well the average difficulty fits the reader's range
  positive rate      share of near-level reviews that found the book manageable
  review volume      how many reviews back the numbers, saturating at 10
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Hashable, Sequence

from readcircle.domain.experience import (
    ExperienceLevel,
    classify_experience,
    optimal_difficulty_range,
)

logger = logging.getLogger(__name__)


# ── Scoring Constants ────────────────────────────────────────────

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5

WEIGHT_EXPERIENCE_MATCH = 0.4
WEIGHT_DIFFICULTY_FIT = 0.3
WEIGHT_POSITIVE_RATE = 0.2
WEIGHT_REVIEW_COUNT = 0.1

# Points lost per unit of difficulty below the reader's range.
TOO_EASY_PENALTY: dict[ExperienceLevel, float] = {
    ExperienceLevel.BEGINNER: 20,
    ExperienceLevel.INTERMEDIATE: 25,
    ExperienceLevel.EXPERT: 35,
}
# Points lost per unit of difficulty above the reader's range.
TOO_HARD_PENALTY: dict[ExperienceLevel, float] = {
    ExperienceLevel.BEGINNER: 60,
    ExperienceLevel.INTERMEDIATE: 45,
    ExperienceLevel.EXPERT: 30,
}
TOO_EASY_FLOOR = 10.0
TOO_HARD_FLOOR = 5.0

# A review is "positive" when the reviewer rated the difficulty at or below this.
POSITIVE_DIFFICULTY_MAX = 3
REVIEW_COUNT_SATURATION = 10

SAME_LEVEL_REASON_MIN = 3
POSITIVE_RATE_REASON_MIN = 0.7
REVIEW_COUNT_REASON_MIN = 5

REASON_SAME_LEVEL = "Matches reviewers at your experience level"
REASON_DIFFICULTY_FIT = "Difficulty level is appropriate for you"
REASON_POSITIVE_RATE = "Highly rated by similar readers"
REASON_REVIEW_COUNT = "Backed by a substantial number of reviews"
REASON_FALLBACK = "A recommended pick"


# ── Records ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class ReviewSnapshot:
    """Read-only view of one review, as the scorer needs it."""

    book_id: Hashable
    difficulty: int
    experience_years: float
    created_at: datetime | None = None


@dataclass(frozen=True)
class RecommendationScore:
    """Score for one book, relative to one reader."""

    book_id: Hashable
    score: float
    reasons: tuple[str, ...]
    avg_difficulty: float
    review_count: int
    experience_level_match_count: int


# ── Helpers ──────────────────────────────────────────────────────

def round_half_up(value: float, digits: int) -> float:
    """Round like a calculator does: halves go away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _sanitize(review: ReviewSnapshot) -> ReviewSnapshot:
    """Clamp out-of-contract values so one bad record cannot sink a batch."""
    difficulty = min(MAX_DIFFICULTY, max(MIN_DIFFICULTY, review.difficulty))
    years = max(0.0, review.experience_years)
    if difficulty == review.difficulty and years == review.experience_years:
        return review
    logger.warning(
        "Clamping review for book %s: difficulty %s -> %s, experience_years %s -> %s",
        review.book_id,
        review.difficulty,
        difficulty,
        review.experience_years,
        years,
    )
    return ReviewSnapshot(
        book_id=review.book_id,
        difficulty=difficulty,
        experience_years=years,
        created_at=review.created_at,
    )


def _positive_fraction(reviews: Sequence[ReviewSnapshot]) -> float:
    if not reviews:
        return 0.0
    positive = sum(1 for r in reviews if r.difficulty <= POSITIVE_DIFFICULTY_MAX)
    return positive / len(reviews)


def _in_range(value: float, difficulty_range: tuple[float, float]) -> bool:
    low, high = difficulty_range
    return low <= value <= high


# ── Sub-scores ───────────────────────────────────────────────────

def experience_match_score(same_level_count: int, total_count: int) -> float:
    if total_count == 0:
        return 0.0
    return min(100.0, same_level_count / total_count * 100)


def difficulty_fit_score(avg_difficulty: float, level: ExperienceLevel) -> float:
    """
    Score how well an average difficulty suits a reader.

    Inside the level's range the fit is perfect. Outside it, points are lost
    linearly with distance. Experts lose more for books that are too easy,
    beginners for books that are too hard. The floor keeps a mismatch alone
    from zeroing a book.
    """
    low, high = optimal_difficulty_range(level)
    if low <= avg_difficulty <= high:
        return 100.0
    if avg_difficulty < low:
        distance = low - avg_difficulty
        return max(TOO_EASY_FLOOR, 100 - distance * TOO_EASY_PENALTY[level])
    distance = avg_difficulty - high
    return max(TOO_HARD_FLOOR, 100 - distance * TOO_HARD_PENALTY[level])


def positive_rate_score(adjacent_level_reviews: Sequence[ReviewSnapshot]) -> float:
    return _positive_fraction(adjacent_level_reviews) * 100


def review_count_score(review_count: int) -> float:
    return min(100.0, review_count / REVIEW_COUNT_SATURATION * 100)


# ── Reasons ──────────────────────────────────────────────────────

def generate_reasons(
    same_level_count: int,
    avg_difficulty: float,
    difficulty_range: tuple[float, float],
    adjacent_level_reviews: Sequence[ReviewSnapshot],
    total_review_count: int,
) -> list[str]:
    """
    Build display reasons in a fixed order.

    Clients usually show only the first two, so the order matters.
    """
    reasons: list[str] = []
    if same_level_count >= SAME_LEVEL_REASON_MIN:
        reasons.append(REASON_SAME_LEVEL)
    if _in_range(avg_difficulty, difficulty_range):
        reasons.append(REASON_DIFFICULTY_FIT)
    if (
        adjacent_level_reviews
        and _positive_fraction(adjacent_level_reviews) >= POSITIVE_RATE_REASON_MIN
    ):
        reasons.append(REASON_POSITIVE_RATE)
    if total_review_count >= REVIEW_COUNT_REASON_MIN:
        reasons.append(REASON_REVIEW_COUNT)
    if not reasons:
        reasons.append(REASON_FALLBACK)
    return reasons


# ── Calculator ───────────────────────────────────────────────────

def calculate_recommendation_score(
    book_id: Hashable,
    reviews: Sequence[ReviewSnapshot],
    user_experience_years: float,
) -> RecommendationScore | None:
    """
    Score one book for a reader.

    Args:
        book_id: Identifier echoed back on the result.
        reviews: All reviews for that book.
        user_experience_years: The reader's years of experience.

    Returns:
        A RecommendationScore, or None when the book has no reviews.
        None means "not enough information", not "irrelevant".
    """
    if not reviews:
        return None

    reviews = [_sanitize(r) for r in reviews]
    user_level = classify_experience(max(0.0, user_experience_years))

    same_level: list[ReviewSnapshot] = []
    adjacent_level: list[ReviewSnapshot] = []
    for review in reviews:
        reviewer_level = classify_experience(review.experience_years)
        if reviewer_level == user_level:
            same_level.append(review)
        if reviewer_level.distance(user_level) <= 1:
            adjacent_level.append(review)

    total = len(reviews)
    avg_difficulty = sum(r.difficulty for r in reviews) / total
    difficulty_range = optimal_difficulty_range(user_level)

    weighted = (
        WEIGHT_EXPERIENCE_MATCH * experience_match_score(len(same_level), total)
        + WEIGHT_DIFFICULTY_FIT * difficulty_fit_score(avg_difficulty, user_level)
        + WEIGHT_POSITIVE_RATE * positive_rate_score(adjacent_level)
        + WEIGHT_REVIEW_COUNT * review_count_score(total)
    )

    reasons = generate_reasons(
        len(same_level), avg_difficulty, difficulty_range, adjacent_level, total
    )

    result = RecommendationScore(
        book_id=book_id,
        score=round_half_up(weighted, 2),
        reasons=tuple(reasons),
        avg_difficulty=round_half_up(avg_difficulty, 1),
        review_count=total,
        experience_level_match_count=len(same_level),
    )
    logger.debug(
        "Scored book %s for %s reader: %.2f (%d reviews, %d same level)",
        book_id,
        user_level.label,
        result.score,
        total,
        len(same_level),
    )
    return result
