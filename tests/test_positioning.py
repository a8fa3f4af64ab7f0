"""
Tests for positioning flight suggestions.
"""

import pytest

from engine.catalog import load_default_catalog
from engine.models import PointBalance, SweetSpot
from engine.opportunities import get_award_opportunities
from engine.positioning import get_positioning_options, resolve_region


@pytest.fixture
def affordable_asia(catalog):
    return get_award_opportunities([PointBalance("chase-ur", 80000)], "Asia", catalog)


class TestResolveRegion:

    def test_country_resolves_to_region(self, catalog):
        assert resolve_region("japan", catalog).id == "asia"

    def test_region_name_resolves(self, catalog):
        assert resolve_region("Europe", catalog).id == "europe"

    def test_unknown_and_empty(self, catalog):
        assert resolve_region("Atlantis", catalog) is None
        assert resolve_region("  ", catalog) is None


class TestPositioningOptions:

    def test_home_is_best_hub_suppresses(self, catalog, affordable_asia):
        """LAX is already a best hub for Asia."""
        assert get_positioning_options("LAX", affordable_asia, "Asia", catalog) == []

    def test_home_airport_is_normalised(self, catalog, affordable_asia):
        assert get_positioning_options(" lax ", affordable_asia, "Japan", catalog) == []

    def test_boston_to_asia(self, catalog, affordable_asia):
        """
        BOS is not an Asia hub. The $3500 award minus the $350 BOS->LAX fare
        is worth $3150. SFO is not in the hub table and is skipped.
        """
        # Act
        options = get_positioning_options("BOS", affordable_asia, "Asia", catalog)

        # Assert
        assert len(options) == 1
        option = options[0]
        assert option.alternate_origin == "LAX"
        assert option.alternate_origin_city == "Los Angeles"
        assert option.estimated_positioning_cost == 350
        assert option.total_value == 3150
        assert option.award_opportunity is affordable_asia[0]
        assert "Los Angeles has better award availability for Asia" in option.reasoning

    def test_unknown_destination_or_empty_home(self, catalog, affordable_asia):
        assert get_positioning_options("BOS", affordable_asia, "Atlantis", catalog) == []
        assert get_positioning_options("", affordable_asia, "Asia", catalog) == []

    def test_only_affordable_opportunities(self, catalog):
        opportunities = get_award_opportunities([PointBalance("chase-ur", 1000)], "Asia", catalog)

        assert get_positioning_options("BOS", opportunities, "Asia", catalog) == []

    def test_missing_cost_uses_default(self, catalog_factory):
        catalog = catalog_factory(positioning_costs={})
        opportunities = get_award_opportunities([PointBalance("chase-ur", 80000)], "Asia", catalog)

        options = get_positioning_options("PDX", opportunities, "Asia", catalog)

        assert options[0].estimated_positioning_cost == 250
        assert options[0].total_value == 3250

    def test_config_overrides_default_cost(self, catalog_factory):
        catalog = catalog_factory(positioning_costs={})
        opportunities = get_award_opportunities([PointBalance("chase-ur", 80000)], "Asia", catalog)

        options = get_positioning_options(
            "PDX", opportunities, "Asia", catalog, config={"default_positioning_cost": 90}
        )

        assert options[0].estimated_positioning_cost == 90
        assert options[0].total_value == 3410

    def test_cost_lookup_is_symmetric(self, catalog_factory):
        catalog = catalog_factory(positioning_costs={"LAX": {"BOS": 375}})
        opportunities = get_award_opportunities([PointBalance("chase-ur", 80000)], "Asia", catalog)

        options = get_positioning_options("BOS", opportunities, "Asia", catalog)

        assert options[0].estimated_positioning_cost == 375

    def test_capped_and_sorted_by_total_value(self, catalog_factory):
        spots = [
            SweetSpot(f"spot-{i}", f"Spot {i}", "aeroplan", "NA", "Asia", "business", 10000, 1000 + i * 100)
            for i in range(4)
        ]
        catalog = catalog_factory(
            sweet_spots=spots,
            best_hubs={"asia": ("LAX", "JFK")},
            positioning_costs={"BOS": {"LAX": 350, "JFK": 100}},
        )
        opportunities = get_award_opportunities([PointBalance("chase-ur", 80000)], "Asia", catalog)

        options = get_positioning_options("BOS", opportunities, "Asia", catalog)

        assert len(options) == 4
        totals = [o.total_value for o in options]
        assert totals == sorted(totals, reverse=True)
        # only the top three opportunities are considered
        assert {o.award_opportunity.sweet_spot.id for o in options} <= {"spot-3", "spot-2", "spot-1"}
        assert options[0].alternate_origin == "JFK"
        assert options[0].total_value == 1300 - 100

    def test_default_catalog_skips_unknown_hub(self):
        """North America's last best hub (DEN) has no hub entry."""
        catalog = load_default_catalog()
        opportunities = get_award_opportunities(
            [PointBalance("united-mileageplus", 20000)], "United States", catalog
        )

        options = get_positioning_options("BOS", opportunities, "United States", catalog)

        assert options
        assert {o.alternate_origin for o in options} <= {"ORD", "DFW"}
