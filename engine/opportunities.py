"""
Award opportunity matching and valuation.
Joins accessible programs against the sweet-spot catalog, applies the
destination filter and ranks the results.
"""

import math
from typing import List, Optional

from engine.access import resolve_accessible_programs
from engine.catalog import Catalog, load_default_catalog
from engine.models import (
    SOURCE_TRANSFER,
    WILDCARD_REGION,
    AwardOpportunity,
    DestinationOption,
    PointBalance,
    SweetSpot,
)


def normalize_destination(destination_filter: Optional[str]) -> str:
    return (destination_filter or "").strip()


def percentage_owned(user_balance: int, points_required: int) -> int:
    """Share of the required points already held, rounded half up and capped at 100.

    Rounds the float ratio, so 57 of 200 (28.499...) gives 28.
    """
    if points_required <= 0:
        return 100
    return min(100, math.floor(user_balance / points_required * 100 + 0.5))


def matches_destination(sweet_spot: SweetSpot, destination_filter: str, catalog: Catalog) -> bool:
    """
    Check a sweet spot against a free-text destination.

    A spot matches when the filter is a substring of its destination region,
    or of a country belonging to the region the spot flies to. Spots in the
    wildcard region match every filter.
    """
    lowered = destination_filter.lower()
    spot_region = sweet_spot.destination_region.lower()

    if sweet_spot.destination_region == WILDCARD_REGION:
        return True

    if lowered in spot_region:
        return True

    for region in catalog.regions:
        if region.name.lower() != spot_region:
            continue
        if any(lowered in country.lower() for country in region.countries):
            return True
    return False


def _sort_key(opportunity: AwardOpportunity) -> tuple:
    if opportunity.can_afford:
        return (0, -opportunity.sweet_spot.exact_cpp)
    return (1, -opportunity.percentage_owned)


def get_award_opportunities(
    balances: List[PointBalance],
    destination_filter: Optional[str] = None,
    catalog: Optional[Catalog] = None,
    config: dict = None,
) -> List[AwardOpportunity]:
    """
    Find the sweet spots the user can reach and value them.

    Sort order:
    - affordable before unaffordable
    - affordable by unrounded cpp, best first
    - unaffordable by percentage_owned, closest first
    Ties keep catalog order.

    Args:
        balances: List of PointBalance objects
        destination_filter: Optional free-text region or country
        catalog: Reference catalog (default catalog if not provided)
        config: Optional config dict passed to the resolver

    Returns:
        Sorted list of AwardOpportunity (empty when nothing matches)
    """
    if catalog is None:
        catalog = load_default_catalog()

    destination = normalize_destination(destination_filter)
    accessible = {
        ap.program_id: ap
        for ap in resolve_accessible_programs(balances, catalog, config)
    }

    opportunities: List[AwardOpportunity] = []
    for sweet_spot in catalog.sweet_spots:
        if destination and not matches_destination(sweet_spot, destination, catalog):
            continue

        accessible_program = accessible.get(sweet_spot.program_id)
        if accessible_program is None:
            continue

        user_balance = accessible_program.balance
        points_required = sweet_spot.points_required
        can_afford = user_balance >= points_required

        opportunities.append(
            AwardOpportunity(
                id=f"opp-{sweet_spot.id}",
                sweet_spot=sweet_spot,
                program=accessible_program.program,
                user_balance=user_balance,
                points_required=points_required,
                can_afford=can_afford,
                points_shortfall=0 if can_afford else points_required - user_balance,
                percentage_owned=percentage_owned(user_balance, points_required),
                estimated_value=sweet_spot.typical_cash_price,
                transfer_source=(
                    accessible_program.transfer_from
                    if accessible_program.source == SOURCE_TRANSFER
                    else None
                ),
            )
        )

    return sorted(opportunities, key=_sort_key)


def get_available_destinations(
    balances: List[PointBalance],
    catalog: Optional[Catalog] = None,
    config: dict = None,
) -> List[str]:
    """Sorted destination regions the balances can reach, excluding the wildcard."""
    if catalog is None:
        catalog = load_default_catalog()

    reachable = {ap.program_id for ap in resolve_accessible_programs(balances, catalog, config)}
    destinations = {
        spot.destination_region
        for spot in catalog.sweet_spots
        if spot.program_id in reachable and spot.destination_region != WILDCARD_REGION
    }
    return sorted(destinations)


def get_all_destination_options(
    catalog: Optional[Catalog] = None,
    countries_per_region: int = 5,
) -> List[DestinationOption]:
    """Each region followed by its most popular countries, for a dropdown."""
    if catalog is None:
        catalog = load_default_catalog()

    options: List[DestinationOption] = []
    for region in catalog.regions:
        options.append(DestinationOption(value=region.name, label=region.name, type="region"))
        for country in region.countries[:countries_per_region]:
            options.append(
                DestinationOption(value=country, label=f"{country} ({region.name})", type="country")
            )
    return options
