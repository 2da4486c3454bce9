"""
Unit tests for the statistics calculations.

These tests verify:
1. Growth rate rules, including the zero prior-year cases
2. Share of the current-year total
3. Ordering and the include-historical merge
"""

import pytest

from default_management.application.services.statistics_service import (
    build_dimension_statistics,
    calculate_growth_rate,
)
from default_management.domain.entities import DimensionCount


def counts(**values) -> list:
    return [DimensionCount(dimension=k, count=v) for k, v in values.items()]


# =============================================================================
# Growth Rate
# =============================================================================

class TestGrowthRate:

    def test_growth_from_zero_reports_current_count(self):
        assert calculate_growth_rate(5, 0) == 5.0

    def test_growth_is_undefined_when_both_years_are_zero(self):
        assert calculate_growth_rate(0, 0) is None

    def test_doubling_is_one(self):
        assert calculate_growth_rate(10, 5) == 1.0

    def test_decline_is_negative(self):
        assert calculate_growth_rate(0, 4) == -1.0
        assert calculate_growth_rate(3, 4) == -0.25

    def test_rounded_to_four_decimals(self):
        assert calculate_growth_rate(1, 3) == pytest.approx(-0.6667)
        assert calculate_growth_rate(4, 3) == pytest.approx(0.3333)

    def test_no_change_is_zero(self):
        assert calculate_growth_rate(7, 7) == 0.0


# =============================================================================
# Dimension Statistics
# =============================================================================

class TestBuildDimensionStatistics:

    def test_percentage_of_current_year_total(self):
        stats = build_dimension_statistics(
            counts(Finance=3, Retail=1),
            counts(Finance=1),
        )

        by_dim = {s.dimension: s for s in stats}
        assert by_dim["Finance"].percentage == pytest.approx(0.75)
        assert by_dim["Retail"].percentage == pytest.approx(0.25)
        assert by_dim["Finance"].growth_rate == 2.0
        assert by_dim["Retail"].growth_rate == 1.0

    def test_sorted_by_count_then_name(self):
        stats = build_dimension_statistics(
            counts(Retail=2, Energy=5, Finance=2),
            [],
        )

        assert [s.dimension for s in stats] == ["Energy", "Finance", "Retail"]

    def test_prior_year_only_dimensions_are_hidden_by_default(self):
        stats = build_dimension_statistics(
            counts(Finance=2),
            counts(Finance=1, Mining=4),
        )

        assert [s.dimension for s in stats] == ["Finance"]

    def test_include_historical_merges_prior_year_dimensions(self):
        stats = build_dimension_statistics(
            counts(Finance=2),
            counts(Finance=1, Mining=4),
            include_historical=True,
        )

        by_dim = {s.dimension: s for s in stats}
        assert [s.dimension for s in stats] == ["Finance", "Mining"]
        assert by_dim["Mining"].count == 0
        assert by_dim["Mining"].percentage == 0.0
        assert by_dim["Mining"].growth_rate == -1.0

    def test_empty_current_year(self):
        assert build_dimension_statistics([], counts(Finance=1)) == []

    def test_zero_total_gives_zero_percentage(self):
        stats = build_dimension_statistics(
            [],
            counts(Finance=1),
            include_historical=True,
        )

        assert stats[0].percentage == 0.0
