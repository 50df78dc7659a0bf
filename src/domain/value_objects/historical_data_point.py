"""Historical vote value objects — Domain layer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class HistoricalDataPoint:
    """Aggregated votes of one party in one election year.

    ``region`` is the state code (e.g. "SP") when the row is scoped to a
    state, otherwise None.
    """

    year: int
    party: str
    total_votes: int
    region: str | None = None
    position: str | None = None
    candidate_count: int = 0


@dataclass(frozen=True)
class HistoricalVoteShare:
    """A party's votes and percentage share for one year."""

    year: int
    votes: int
    share: float
