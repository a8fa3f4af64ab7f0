"""
Award Opportunity Engine.
Pure functions over point balances and the reference catalog.
"""

from engine.access import resolve_accessible_programs
from engine.catalog import DEFAULT_CONFIG, Catalog, load_default_catalog
from engine.explorer import explore, explore_fingerprint
from engine.opportunities import get_award_opportunities
from engine.positioning import get_positioning_options
from engine.summary import get_opportunity_summary

__all__ = [
    "DEFAULT_CONFIG",
    "Catalog",
    "load_default_catalog",
    "resolve_accessible_programs",
    "get_award_opportunities",
    "get_positioning_options",
    "get_opportunity_summary",
    "explore",
    "explore_fingerprint",
]
