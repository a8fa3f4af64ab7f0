"""
Explore Service - runs the award engine for API callers.

Results are cached in-process, keyed on a fingerprint of the exact inputs
(balances, destination, home airport, catalog version, config). A balance
change therefore always produces a new key; stale entries simply age out.
"""

import logging
import os
import threading
from collections import OrderedDict
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.explore_preference import ExplorePreference
from app.services.balance_service import BalanceService
from app.services.errors import ServiceError
from engine.booking import booking_links_for_opportunity, build_award_search_url
from engine.catalog import Catalog
from engine.explorer import explore, explore_fingerprint, normalize_home_airport
from engine.models import ExploreResult, PointBalance
from engine.opportunities import get_available_destinations, normalize_destination

logger = logging.getLogger(__name__)


_default_cache_size = 256
try:
    EXPLORE_CACHE_SIZE = int(os.getenv("EXPLORE_CACHE_SIZE", str(_default_cache_size)))
except (TypeError, ValueError):
    logger.warning(
        "Invalid EXPLORE_CACHE_SIZE value; falling back to default %s",
        _default_cache_size,
    )
    EXPLORE_CACHE_SIZE = _default_cache_size


class ExploreResultCache:
    """Bounded LRU map of fingerprint -> ExploreResult, safe across worker threads."""

    def __init__(self, max_size: int = EXPLORE_CACHE_SIZE):
        self.max_size = max(0, max_size)
        self._entries: "OrderedDict[str, ExploreResult]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[ExploreResult]:
        with self._lock:
            result = self._entries.get(key)
            if result is not None:
                self._entries.move_to_end(key)
            return result

    def put(self, key: str, result: ExploreResult) -> None:
        if self.max_size == 0:
            return
        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


explore_cache = ExploreResultCache()


class ExploreService:
    """
    Pattern: constructor injection for the session, catalog and cache.

    Usage:
        service = ExploreService(db, catalog)
        payload = service.explore_for_user("42", destination="Japan", home_airport="BOS")
    """

    def __init__(
        self,
        db: Optional[Session],
        catalog: Catalog,
        cache: Optional[ExploreResultCache] = None,
        config: Optional[dict] = None,
    ):
        self.db = db
        self.catalog = catalog
        self.cache = cache if cache is not None else explore_cache
        self.config = config

    def run(
        self,
        balances: List[PointBalance],
        destination: Optional[str] = None,
        home_airport: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Explore a balance snapshot, reusing a cached result for identical inputs."""
        key = explore_fingerprint(balances, destination, home_airport, self.catalog, self.config)

        result = self.cache.get(key)
        if result is None:
            logger.debug("Explore cache miss %s", key[:12])
            result = explore(balances, destination, home_airport, self.catalog, self.config)
            self.cache.put(key, result)
        else:
            logger.debug("Explore cache hit %s", key[:12])

        payload = asdict(result)
        payload["available_destinations"] = get_available_destinations(balances, self.catalog, self.config)
        payload["fingerprint"] = key
        return payload

    def evaluate(self, balances: List[Dict[str, Any]], destination=None, home_airport=None) -> Dict[str, Any]:
        """Stateless explore over request-supplied balances."""
        snapshot = [PointBalance(program_id=b["program_id"], balance=b["balance"]) for b in balances]
        return self.run(snapshot, destination, home_airport)

    def explore_for_user(
        self,
        user_id: str,
        destination: Optional[str] = None,
        home_airport: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Explore with the user's stored balances.

        Omitted filters fall back to the user's last destination and home
        airport; supplied filters (even empty ones) replace them.
        """
        if self.db is None:
            raise ServiceError(500, "INTERNAL_ERROR", "Explore service has no database session.", {})

        preference = self.db.get(ExplorePreference, user_id)
        if destination is None and preference is not None:
            destination = preference.last_destination
        if home_airport is None and preference is not None:
            home_airport = preference.home_airport

        self._save_preference(user_id, preference, destination, home_airport)

        balances = BalanceService(self.db, self.catalog).get_point_balances(user_id)
        return self.run(balances, destination, home_airport)

    def _save_preference(
        self,
        user_id: str,
        preference: Optional[ExplorePreference],
        destination: Optional[str],
        home_airport: Optional[str],
    ) -> None:
        destination = normalize_destination(destination) or None
        home = normalize_home_airport(home_airport) or None

        if preference is None:
            if destination is None and home is None:
                return
            preference = ExplorePreference(user_id=user_id)
            self.db.add(preference)
        elif preference.last_destination == destination and preference.home_airport == home:
            return

        preference.last_destination = destination
        preference.home_airport = home
        self.db.commit()
        logger.info("Saved explore preferences for user %s", user_id)

    def booking_link(
        self,
        program_id: str,
        origin: str = "",
        destination: str = "",
        cabin: str = "business",
    ) -> Dict[str, Any]:
        url = build_award_search_url(program_id, origin, destination, cabin=cabin, catalog=self.catalog)
        if url is None:
            raise ServiceError(
                404,
                "NOT_FOUND",
                f"Unknown loyalty program '{program_id}'.",
                {"program_id": program_id},
            )
        return {"program_id": program_id, "url": url}

    def booking_links(self, balances: List[PointBalance], opportunity_id: str, origin: str = "", destination: str = "") -> List[Dict[str, Any]]:
        """Booking and transfer links for one opportunity of a balance snapshot."""
        result = explore(balances, None, None, self.catalog, self.config)
        opportunity = next((o for o in result.opportunities if o.id == opportunity_id), None)
        if opportunity is None:
            raise ServiceError(
                404,
                "NOT_FOUND",
                f"Opportunity '{opportunity_id}' is not reachable with these balances.",
                {"opportunity_id": opportunity_id},
            )
        return booking_links_for_opportunity(opportunity, origin, destination, catalog=self.catalog)
