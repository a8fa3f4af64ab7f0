"""
Explore pipeline.
Orchestrates resolver -> matcher -> positioning -> summary for one snapshot
of balances, destination and home airport.
"""

import hashlib
import json
from typing import List, Optional

from engine.catalog import Catalog, load_default_catalog
from engine.models import ExploreResult, PointBalance
from engine.opportunities import get_award_opportunities, normalize_destination
from engine.positioning import get_positioning_options
from engine.summary import get_opportunity_summary


def normalize_home_airport(home_airport: Optional[str]) -> str:
    return (home_airport or "").strip().upper()


def explore(
    balances: List[PointBalance],
    destination: Optional[str] = None,
    home_airport: Optional[str] = None,
    catalog: Optional[Catalog] = None,
    config: dict = None,
) -> ExploreResult:
    """
    Evaluate what the balances can book.

    Positioning suggestions are only computed when both a destination and a
    home airport are given. No balances yields an empty result.

    Args:
        balances: List of PointBalance objects
        destination: Optional free-text region or country
        home_airport: Optional IATA code of the user's home airport
        catalog: Reference catalog (default catalog if not provided)
        config: Optional config dict (uses defaults if not provided)

    Returns:
        ExploreResult with opportunities, positioning options and summary
    """
    if catalog is None:
        catalog = load_default_catalog()

    destination = normalize_destination(destination)
    home = normalize_home_airport(home_airport)

    if not balances:
        return ExploreResult(
            opportunities=[],
            positioning_options=[],
            summary=get_opportunity_summary([], config),
            destination=destination,
            home_airport=home,
        )

    opportunities = get_award_opportunities(balances, destination, catalog, config)

    if home and destination:
        positioning = get_positioning_options(home, opportunities, destination, catalog, config)
    else:
        positioning = []

    return ExploreResult(
        opportunities=opportunities,
        positioning_options=positioning,
        summary=get_opportunity_summary(opportunities, config),
        destination=destination,
        home_airport=home,
    )


def explore_fingerprint(
    balances: List[PointBalance],
    destination: Optional[str] = None,
    home_airport: Optional[str] = None,
    catalog: Optional[Catalog] = None,
    config: dict = None,
) -> str:
    """
    Stable hash of the exact explore inputs.

    Balance order is part of the key: the resolver breaks ties by first seen.
    """
    if catalog is None:
        catalog = load_default_catalog()

    payload = {
        "balances": [[b.program_id, b.balance] for b in balances],
        "destination": normalize_destination(destination).lower(),
        "home_airport": normalize_home_airport(home_airport),
        "catalog": catalog.version,
        "config": sorted((config or {}).items()),
    }
    encoded = json.dumps(payload, sort_keys=True, default=str).encode()
    return hashlib.sha256(encoded).hexdigest()
