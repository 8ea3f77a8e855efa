"""Reader experience levels and the difficulty range each level is comfortable with."""

from enum import IntEnum


class ExperienceLevel(IntEnum):
    """Ordered experience buckets. The integer value is the adjacency index."""

    BEGINNER = 0
    INTERMEDIATE = 1
    EXPERT = 2

    @property
    def label(self) -> str:
        return self.name.lower()

    def distance(self, other: "ExperienceLevel") -> int:
        """Number of ordinal steps between two levels."""
        return abs(int(self) - int(other))


# Upper bounds are inclusive: 2 years is still a beginner, 4 still intermediate.
BEGINNER_MAX_YEARS = 2
INTERMEDIATE_MAX_YEARS = 4

# Ranges overlap so one average difficulty is judged independently per level.
OPTIMAL_DIFFICULTY_RANGES: dict[ExperienceLevel, tuple[float, float]] = {
    ExperienceLevel.BEGINNER: (1.0, 2.5),
    ExperienceLevel.INTERMEDIATE: (2.0, 4.0),
    ExperienceLevel.EXPERT: (3.0, 5.0),
}


def classify_experience(experience_years: float) -> ExperienceLevel:
    """Map years of experience to an experience level."""
    if experience_years <= BEGINNER_MAX_YEARS:
        return ExperienceLevel.BEGINNER
    if experience_years <= INTERMEDIATE_MAX_YEARS:
        return ExperienceLevel.INTERMEDIATE
    return ExperienceLevel.EXPERT


def optimal_difficulty_range(level: ExperienceLevel) -> tuple[float, float]:
    """Return the inclusive (min, max) difficulty a reader at this level enjoys."""
    return OPTIMAL_DIFFICULTY_RANGES[level]
