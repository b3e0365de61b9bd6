"""
Tests for the Granularity enum and its hierarchy.
"""
import pytest

from perinotes.core.exceptions import ConfigurationError
from perinotes.periods.granularity import Granularity, children, parents, parse_granularities


class TestGranularity:
    """Tests for Granularity parsing and ordering."""

    def test_parse_is_case_insensitive(self):
        assert Granularity.parse(" Weekly ") is Granularity.WEEKLY
        assert Granularity.parse(Granularity.DAILY) is Granularity.DAILY

    def test_parse_unknown_raises(self):
        with pytest.raises(ConfigurationError, match="fortnightly"):
            Granularity.parse("fortnightly")

    def test_specificity(self):
        assert Granularity.DAILY.is_more_specific_than(Granularity.WEEKLY)
        assert not Granularity.YEARLY.is_more_specific_than(Granularity.QUARTERLY)

    def test_parents_nearest_first(self):
        assert parents(Granularity.WEEKLY) == [
            Granularity.MONTHLY,
            Granularity.QUARTERLY,
            Granularity.YEARLY,
        ]
        assert parents(Granularity.YEARLY) == []

    def test_children_largest_first(self):
        assert children(Granularity.MONTHLY) == [Granularity.WEEKLY, Granularity.DAILY]

    def test_parse_granularities_orders_and_dedups(self):
        assert parse_granularities(["daily", "yearly", "DAILY"]) == [
            Granularity.YEARLY,
            Granularity.DAILY,
        ]
