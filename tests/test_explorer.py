"""
Tests for the explore pipeline and its cache key.
"""

from engine.explorer import explore, explore_fingerprint
from engine.models import PointBalance


class TestExplore:

    def test_empty_balances(self, catalog):
        result = explore([], "Asia", "BOS", catalog)

        assert result.opportunities == []
        assert result.positioning_options == []
        assert result.summary.total == 0
        assert result.destination == "Asia"
        assert result.home_airport == "BOS"

    def test_full_pipeline(self, catalog):
        """
        Chase points reach the Aeroplan Asia award; from Boston a positioning
        flight to LAX is suggested.
        """
        # Act
        result = explore([PointBalance("chase-ur", 80000)], " Japan ", "bos", catalog)

        # Assert
        assert result.destination == "Japan"
        assert result.home_airport == "BOS"
        assert [o.sweet_spot.id for o in result.opportunities] == ["aeroplan-asia"]
        assert result.summary.affordable == 1
        assert result.summary.total_potential_value == 3500
        assert [p.total_value for p in result.positioning_options] == [3150]

    def test_positioning_needs_destination_and_home(self, catalog):
        balances = [PointBalance("chase-ur", 80000)]

        assert explore(balances, None, "BOS", catalog).positioning_options == []
        assert explore(balances, "Asia", None, catalog).positioning_options == []

    def test_is_deterministic(self, catalog):
        balances = [PointBalance("chase-ur", 80000), PointBalance("avios", 3000)]

        first = explore(balances, "Asia", "BOS", catalog)
        second = explore(balances, "Asia", "BOS", catalog)

        assert first == second


class TestExploreFingerprint:

    def test_same_inputs_same_key(self, catalog):
        balances = [PointBalance("chase-ur", 80000)]

        assert explore_fingerprint(balances, "Asia", "bos", catalog) == explore_fingerprint(
            balances, " asia ", "BOS ", catalog
        )

    def test_balance_change_changes_key(self, catalog):
        before = explore_fingerprint([PointBalance("chase-ur", 80000)], "Asia", "BOS", catalog)
        after = explore_fingerprint([PointBalance("chase-ur", 80001)], "Asia", "BOS", catalog)

        assert before != after

    def test_order_and_config_are_part_of_key(self, catalog):
        a = [PointBalance("chase-ur", 1), PointBalance("amex-mr", 1)]
        b = list(reversed(a))

        assert explore_fingerprint(a, catalog=catalog) != explore_fingerprint(b, catalog=catalog)
        assert explore_fingerprint(a, catalog=catalog) != explore_fingerprint(
            a, catalog=catalog, config={"transfer_overrides_direct": False}
        )

    def test_last_updated_is_ignored(self, catalog):
        assert explore_fingerprint(
            [PointBalance("chase-ur", 5, "2024-01-01T00:00:00")], catalog=catalog
        ) == explore_fingerprint([PointBalance("chase-ur", 5, "2025-06-01T00:00:00")], catalog=catalog)
