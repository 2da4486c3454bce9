"""Statistics value objects."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class StatisticsDimension(str, Enum):
    """Customer attribute that applications are grouped by."""

    INDUSTRY = "industry"
    REGION = "region"


@dataclass(frozen=True)
class DimensionCount:
    """Number of applications for one dimension value within a year."""

    dimension: str
    count: int


@dataclass(frozen=True)
class DimensionStatistic:
    """
    Aggregated figures for one dimension value.

    Attributes:
        dimension: The industry or region name
        count: Current-year count
        percentage: Share of the current-year total (0.0-1.0)
        growth_rate: Year-over-year growth ratio, None when undefined
    """

    dimension: str
    count: int
    percentage: float
    growth_rate: Optional[float]
