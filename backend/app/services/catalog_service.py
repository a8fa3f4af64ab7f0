from typing import Any, Dict, List, Optional

from app.services.errors import ServiceError
from engine.catalog import Catalog
from engine.models import LoyaltyProgram, SweetSpot
from engine.opportunities import get_all_destination_options

SWEET_SPOT_SORTS = {
    "value": (lambda s: s.value_cpp, True),
    "points-low": (lambda s: s.points_required, False),
    "points-high": (lambda s: s.points_required, True),
}


def program_to_dict(program: LoyaltyProgram) -> Dict[str, Any]:
    return {
        "id": program.id,
        "name": program.name,
        "type": program.type,
        "base_value_cpp": program.base_value_cpp,
        "transfer_partners": list(program.transfer_partners),
        "alliance": program.alliance,
        "award_booking_url": program.award_booking_url,
    }


def sweet_spot_to_dict(spot: SweetSpot) -> Dict[str, Any]:
    return {
        "id": spot.id,
        "title": spot.title,
        "program_id": spot.program_id,
        "origin_region": spot.origin_region,
        "destination_region": spot.destination_region,
        "cabin_class": spot.cabin_class,
        "points_required": spot.points_required,
        "typical_cash_price": spot.typical_cash_price,
        "value_cpp": spot.value_cpp,
        "description": spot.description,
        "booking_tips": spot.booking_tips,
    }


class CatalogService:
    """Read-only browsing over the reference catalog."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def list_programs(self, program_type: Optional[str] = None) -> List[Dict[str, Any]]:
        return [
            program_to_dict(p)
            for p in self.catalog.programs.values()
            if program_type is None or p.type == program_type
        ]

    def get_transfer_partners(self, program_id: str) -> List[Dict[str, Any]]:
        if self.catalog.get_program(program_id) is None:
            raise ServiceError(
                404,
                "NOT_FOUND",
                f"Unknown loyalty program '{program_id}'.",
                {"program_id": program_id},
            )
        return [program_to_dict(p) for p in self.catalog.transfer_partners(program_id)]

    def search_sweet_spots(
        self,
        query: Optional[str] = None,
        cabin: Optional[str] = None,
        region: Optional[str] = None,
        sort: str = "value",
    ) -> List[Dict[str, Any]]:
        """
        Filter and sort sweet spots for browsing.

        - query: substring of title, description, origin or destination region
        - cabin: exact cabin class
        - region: substring of the destination region
        - sort: 'value' (cpp, best first), 'points-low' or 'points-high'
        """
        if sort not in SWEET_SPOT_SORTS:
            raise ServiceError(
                400,
                "VALIDATION_ERROR",
                f"Unsupported sort '{sort}'.",
                {"field": "sort", "allowed": sorted(SWEET_SPOT_SORTS)},
            )

        spots = list(self.catalog.sweet_spots)

        q = (query or "").strip().lower()
        if q:
            spots = [
                s for s in spots
                if q in s.title.lower()
                or q in s.description.lower()
                or q in s.origin_region.lower()
                or q in s.destination_region.lower()
            ]

        if cabin:
            spots = [s for s in spots if s.cabin_class == cabin]

        if region:
            lowered = region.strip().lower()
            spots = [s for s in spots if lowered in s.destination_region.lower()]

        key, reverse = SWEET_SPOT_SORTS[sort]
        spots.sort(key=key, reverse=reverse)
        return [sweet_spot_to_dict(s) for s in spots]

    def list_regions(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": r.id,
                "name": r.name,
                "countries": list(r.countries),
                "airports": list(r.airports),
                "best_hubs": list(self.catalog.best_hubs_for_region(r.id)),
            }
            for r in self.catalog.regions
        ]

    def search_destinations(self, query: Optional[str] = None) -> List[Dict[str, str]]:
        """Destination suggestions; an empty query returns the full option list."""
        if not (query or "").strip():
            return [
                {"value": o.value, "label": o.label, "type": o.type}
                for o in get_all_destination_options(self.catalog)
            ]

        results = []
        for kind, value, region in self.catalog.search_destinations(query):
            label = value if kind == "region" else f"{value} ({region.name})"
            results.append({"value": value, "label": label, "type": kind})
        return results
