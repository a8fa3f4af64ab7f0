"""
Shared fixtures for engine tests.
"""

import pytest

from engine.catalog import Catalog
from engine.models import (
    AIRLINE,
    CREDIT_CARD,
    DestinationRegion,
    HubAirport,
    LoyaltyProgram,
    SweetSpot,
)


def make_catalog(sweet_spots=None, programs=None, hubs=None, positioning_costs=None, best_hubs=None):
    """Small catalog with two cards, three airlines and two regions."""
    if programs is None:
        programs = [
            LoyaltyProgram("aeroplan", "Air Canada Aeroplan", AIRLINE, 1.5, ("chase-ur", "amex-mr")),
            LoyaltyProgram("avios", "British Airways Avios", AIRLINE, 1.5, ("chase-ur",)),
            LoyaltyProgram("qantas", "Qantas Frequent Flyer", AIRLINE, 1.4, ()),
            LoyaltyProgram("chase-ur", "Chase Ultimate Rewards", CREDIT_CARD, 1.5,
                           ("aeroplan", "avios", "ghost-airline")),
            LoyaltyProgram("amex-mr", "Amex Membership Rewards", CREDIT_CARD, 1.6, ("aeroplan",)),
        ]
    if sweet_spots is None:
        sweet_spots = [
            SweetSpot("aeroplan-asia", "ANA Business via Aeroplan", "aeroplan",
                      "North America", "Asia", "business", 70000, 3500),
        ]
    regions = [
        DestinationRegion("asia", "Asia", ("Japan", "Thailand"), ("NRT", "BKK")),
        DestinationRegion("europe", "Europe", ("France", "Spain"), ("CDG", "MAD")),
    ]
    if hubs is None:
        hubs = [HubAirport("LAX", "Los Angeles", "West Coast"), HubAirport("JFK", "New York", "Northeast")]
    if positioning_costs is None:
        positioning_costs = {"BOS": {"LAX": 350, "JFK": 100}}
    if best_hubs is None:
        best_hubs = {"asia": ("LAX", "SFO", "SEA", "JFK"), "europe": ("JFK", "BOS")}
    return Catalog.build(
        programs=programs,
        sweet_spots=sweet_spots,
        regions=regions,
        hubs=hubs,
        positioning_costs=positioning_costs,
        best_hubs=best_hubs,
        version="test",
    )


@pytest.fixture
def catalog():
    return make_catalog()


@pytest.fixture
def catalog_factory():
    return make_catalog
