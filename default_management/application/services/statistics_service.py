"""Statistics service - year-over-year aggregation per customer dimension."""

from typing import Dict, Iterable, List, Optional

import structlog

from default_management.domain.entities import (
    ApplicationStatus,
    DimensionCount,
    DimensionStatistic,
    StatisticsDimension,
)
from default_management.domain.interfaces import UnitOfWorkFactory

logger = structlog.get_logger(__name__)

GROWTH_RATE_PRECISION = 4


def calculate_growth_rate(current: int, previous: int) -> Optional[float]:
    """
    Year-over-year growth ratio.

    With no prior-year count the current count itself is reported, so
    0 -> 5 reads as 5.0 (500%). Undefined (None) when both years are zero.
    """
    if previous > 0:
        rate = (current - previous) / previous
    elif current > 0:
        rate = float(current)
    else:
        return None

    return round(rate, GROWTH_RATE_PRECISION)


def build_dimension_statistics(
    current: Iterable[DimensionCount],
    previous: Iterable[DimensionCount],
    include_historical: bool = False,
) -> List[DimensionStatistic]:
    """
    Combine two years of counts into per-dimension statistics.

    Args:
        current: Counts for the requested year
        previous: Counts for the year before
        include_historical: Also report dimensions only seen in the prior year

    Returns:
        Statistics sorted by count descending, then dimension name
    """
    current_counts: Dict[str, int] = {row.dimension: row.count for row in current}
    previous_counts: Dict[str, int] = {row.dimension: row.count for row in previous}

    dimensions = set(current_counts)
    if include_historical:
        dimensions |= set(previous_counts)

    total = sum(current_counts.values())

    stats = []
    for dimension in dimensions:
        count = current_counts.get(dimension, 0)
        stats.append(
            DimensionStatistic(
                dimension=dimension,
                count=count,
                percentage=count / total if total > 0 else 0.0,
                growth_rate=calculate_growth_rate(count, previous_counts.get(dimension, 0)),
            )
        )

    stats.sort(key=lambda s: (-s.count, s.dimension))
    return stats


class StatisticsService:
    """
    Application service for default and rebirth statistics.

    Counts for Approved applications are dated by approval time, counts
    for Reborn applications by rebirth approval time.
    """

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory):
        self._uow_factory = unit_of_work_factory

    async def get_statistics_by_dimension(
        self,
        year: int,
        dimension: StatisticsDimension,
        status: ApplicationStatus,
        include_historical: bool = False,
    ) -> List[DimensionStatistic]:
        async with self._uow_factory() as uow:
            current = await uow.statistics.get_counts_by_dimension(year, dimension, status)
            previous = await uow.statistics.get_counts_by_dimension(year - 1, dimension, status)

        stats = build_dimension_statistics(current, previous, include_historical)

        logger.debug(
            "statistics_computed",
            year=year,
            dimension=dimension.value,
            status=status.value,
            rows=len(stats),
        )
        return stats
