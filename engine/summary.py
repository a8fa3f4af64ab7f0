"""
Top-line counts over an opportunity list, for display.
"""

from typing import List

from engine.catalog import DEFAULT_CONFIG
from engine.models import AwardOpportunity, OpportunitySummary


def get_opportunity_summary(opportunities: List[AwardOpportunity], config: dict = None) -> OpportunitySummary:
    """
    Reduce opportunities to summary counts.

    - affordable: can_afford
    - almost_affordable: not affordable, percentage_owned >= threshold (75)
    - total_potential_value: sum of affordable estimated values
    - best_value: affordable with the highest unrounded cpp
    - closest_to_affording: unaffordable with the highest percentage_owned

    Ties go to the earlier opportunity.
    """
    if config is None:
        config = DEFAULT_CONFIG
    threshold = config.get("almost_affordable_percent", 75)

    affordable = [o for o in opportunities if o.can_afford]
    unaffordable = [o for o in opportunities if not o.can_afford]

    best_value = max(affordable, key=lambda o: o.sweet_spot.exact_cpp) if affordable else None
    closest = max(unaffordable, key=lambda o: o.percentage_owned) if unaffordable else None

    return OpportunitySummary(
        total=len(opportunities),
        affordable=len(affordable),
        almost_affordable=sum(1 for o in unaffordable if o.percentage_owned >= threshold),
        total_potential_value=sum(o.estimated_value for o in affordable),
        best_value=best_value,
        closest_to_affording=closest,
    )
