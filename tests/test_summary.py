"""
Tests for opportunity summaries.
"""

from engine.models import PointBalance, SweetSpot
from engine.opportunities import get_award_opportunities
from engine.summary import get_opportunity_summary


def _opportunities(catalog_factory, balance):
    catalog = catalog_factory(sweet_spots=[
        SweetSpot("a", "A", "aeroplan", "NA", "Asia", "business", 10000, 500),
        SweetSpot("b", "B", "aeroplan", "NA", "Asia", "business", 20000, 2000),
        SweetSpot("c", "C", "aeroplan", "NA", "Asia", "business", 40000, 3000),
        SweetSpot("d", "D", "aeroplan", "NA", "Asia", "business", 100000, 9000),
    ])
    return get_award_opportunities([PointBalance("aeroplan", balance)], catalog=catalog)


class TestOpportunitySummary:

    def test_counts_and_value(self, catalog_factory):
        opportunities = _opportunities(catalog_factory, 32000)

        summary = get_opportunity_summary(opportunities)

        assert summary.total == 4
        assert summary.affordable == 2
        assert summary.almost_affordable == 1  # 32000 / 40000 = 80%
        assert summary.total_potential_value == 2500
        assert summary.best_value.sweet_spot.id == "b"
        assert summary.closest_to_affording.sweet_spot.id == "c"

    def test_consistency(self, catalog_factory):
        opportunities = _opportunities(catalog_factory, 32000)

        summary = get_opportunity_summary(opportunities)

        unaffordable = sum(1 for o in opportunities if not o.can_afford)
        assert summary.affordable + unaffordable == summary.total
        assert summary.total_potential_value == sum(
            o.estimated_value for o in opportunities if o.can_afford
        )

    def test_threshold_is_configurable(self, catalog_factory):
        opportunities = _opportunities(catalog_factory, 32000)

        summary = get_opportunity_summary(opportunities, {"almost_affordable_percent": 30})

        assert summary.almost_affordable == 2

    def test_empty(self):
        summary = get_opportunity_summary([])

        assert summary.total == 0
        assert summary.affordable == 0
        assert summary.total_potential_value == 0
        assert summary.best_value is None
        assert summary.closest_to_affording is None

    def test_nothing_affordable(self, catalog_factory):
        summary = get_opportunity_summary(_opportunities(catalog_factory, 100))

        assert summary.best_value is None
        assert summary.closest_to_affording.sweet_spot.id == "a"
