"""Grouping and share normalisation of historical vote rows."""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from src.domain.value_objects.historical_data_point import (
    HistoricalDataPoint,
    HistoricalVoteShare,
)


class HistoricalDataAggregator:
    """Pure transformations over flat historical vote rows.

    Every method returns a read-only mapping of tuples; the input is never
    modified.
    """

    @staticmethod
    def group_by_party(
        points: Iterable[HistoricalDataPoint],
    ) -> Mapping[str, tuple[HistoricalDataPoint, ...]]:
        """Group rows by party, each group ordered by year.

        Args:
            points: Historical rows

        Returns:
            party -> rows ascending by year
        """
        groups: dict[str, list[HistoricalDataPoint]] = defaultdict(list)
        for point in points:
            groups[point.party].append(point)
        return MappingProxyType(
            {
                party: tuple(sorted(rows, key=lambda p: p.year))
                for party, rows in groups.items()
            }
        )

    @staticmethod
    def group_by_region(
        points: Iterable[HistoricalDataPoint],
    ) -> Mapping[str, tuple[HistoricalDataPoint, ...]]:
        """Group rows by region, skipping rows without one."""
        groups: dict[str, list[HistoricalDataPoint]] = defaultdict(list)
        for point in points:
            if not point.region:
                continue
            groups[point.region].append(point)
        return MappingProxyType({k: tuple(v) for k, v in groups.items()})

    @staticmethod
    def total_votes_by_year(
        points: Iterable[HistoricalDataPoint],
    ) -> Mapping[int, int]:
        """Sum votes per year across every party in the input."""
        totals: dict[int, int] = defaultdict(int)
        for point in points:
            totals[point.year] += point.total_votes
        return MappingProxyType(dict(totals))

    @classmethod
    def vote_shares(
        cls, points: Iterable[HistoricalDataPoint]
    ) -> Mapping[str, tuple[HistoricalVoteShare, ...]]:
        """Compute each party's yearly share of the votes cast that year.

        share = party votes / year total * 100, or 0 when the year total is 0.

        Args:
            points: Historical rows

        Returns:
            party -> yearly shares ascending by year
        """
        rows = list(points)
        year_totals = cls.total_votes_by_year(rows)
        shares: dict[str, tuple[HistoricalVoteShare, ...]] = {}
        for party, party_rows in cls.group_by_party(rows).items():
            shares[party] = tuple(
                HistoricalVoteShare(
                    year=row.year,
                    votes=row.total_votes,
                    share=(
                        row.total_votes / year_totals[row.year] * 100
                        if year_totals[row.year]
                        else 0.0
                    ),
                )
                for row in party_rows
            )
        return MappingProxyType(shares)
