"""
Positioning flight suggestions.

When the home airport is not one of the best departure hubs for the target
region, suggest flying to a hub first and redeeming points from there.
Costs are flat USD estimates from the catalog, not live fares.
"""

from typing import List, Optional

from engine.catalog import DEFAULT_CONFIG, Catalog, load_default_catalog
from engine.models import AwardOpportunity, DestinationRegion, PositioningOption


def resolve_region(destination_filter: str, catalog: Catalog) -> Optional[DestinationRegion]:
    """First region whose name or one of whose countries contains the filter."""
    lowered = destination_filter.strip().lower()
    if not lowered:
        return None
    for region in catalog.regions:
        if lowered in region.name.lower():
            return region
        if any(lowered in country.lower() for country in region.countries):
            return region
    return None


def get_positioning_options(
    home_airport: str,
    opportunities: List[AwardOpportunity],
    destination_filter: str,
    catalog: Optional[Catalog] = None,
    config: dict = None,
) -> List[PositioningOption]:
    """
    Suggest alternate departure hubs for the best affordable opportunities.

    Rules:
    - Empty home airport, empty filter or unknown region: no suggestions
    - Home airport already among the region's best hubs: no suggestions
    - Top N affordable opportunities x first M known best hubs
    - Sorted by total value (award value minus positioning fare), capped

    Args:
        home_airport: IATA code of the user's home airport
        opportunities: Output of get_award_opportunities (already ranked)
        destination_filter: Free-text region or country
        catalog: Reference catalog (default catalog if not provided)
        config: Optional config dict (uses defaults if not provided)

    Returns:
        List of PositioningOption, best total value first
    """
    if catalog is None:
        catalog = load_default_catalog()
    # an explicit default_positioning_cost overrides the catalog's own estimate
    default_cost = (config or {}).get("default_positioning_cost")
    if config is None:
        config = DEFAULT_CONFIG

    top_opportunities = config.get("positioning_top_opportunities", 3)
    hubs_per_opportunity = config.get("positioning_hubs_per_opportunity", 2)
    max_options = config.get("positioning_max_options", 4)

    home = (home_airport or "").strip().upper()
    if not home:
        return []

    region = resolve_region(destination_filter or "", catalog)
    if region is None:
        return []

    best_hubs = catalog.best_hubs_for_region(region.id)
    if home in best_hubs:
        return []

    affordable = [opp for opp in opportunities if opp.can_afford][:top_opportunities]

    options: List[PositioningOption] = []
    for opportunity in affordable:
        for hub_code in best_hubs[:hubs_per_opportunity]:
            hub = catalog.hub(hub_code)
            if hub is None:
                continue

            positioning_cost = catalog.positioning_cost(home, hub_code, default_cost)
            options.append(
                PositioningOption(
                    id=f"pos-{opportunity.id}-{hub_code}",
                    alternate_origin=hub_code,
                    alternate_origin_city=hub.city,
                    award_opportunity=opportunity,
                    estimated_positioning_cost=positioning_cost,
                    total_value=opportunity.estimated_value - positioning_cost,
                    reasoning=(
                        f"{hub.city} has better award availability for "
                        f"{opportunity.sweet_spot.destination_region}. Fly there for "
                        f"~${positioning_cost:,.0f}, then use your points for the main flight."
                    ),
                )
            )

    options.sort(key=lambda o: o.total_value, reverse=True)
    return options[:max_options]
