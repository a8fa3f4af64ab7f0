"""Explore routes.

Route handlers shape errors; the engine work and caching live in
app.services.explore_service.
"""

import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies.security import require_user_id_header
from app.dependencies.services import get_balance_service, get_explore_service
from app.schemas.explore_schemas import BookingLink, BookingLinkResponse, ExploreRequest, ExploreResponse
from app.services.balance_service import BalanceService
from app.services.errors import ServiceError
from app.services.explore_service import ExploreService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/explore",
    tags=["explore"]
)


@router.get("", response_model=ExploreResponse)
def explore_stored_balances(
    destination: Optional[str] = Query(None, max_length=128),
    home_airport: Optional[str] = Query(None, max_length=8),
    user_id: str = Depends(require_user_id_header),
    service: ExploreService = Depends(get_explore_service),
) -> Dict[str, Any]:
    """
    Explore with the caller's stored balances.

    Omitted query parameters reuse the caller's last destination and home
    airport.
    """
    try:
        return service.explore_for_user(user_id, destination, home_airport)
    except ServiceError as exc:
        raise exc.to_http_exception()


@router.post("/evaluate", response_model=ExploreResponse)
def evaluate(
    payload: ExploreRequest,
    service: ExploreService = Depends(get_explore_service),
) -> Dict[str, Any]:
    """Stateless explore over balances supplied in the body."""
    balances = [b.model_dump() for b in payload.balances]
    return service.evaluate(balances, payload.destination, payload.home_airport)


@router.get("/booking-link", response_model=BookingLinkResponse)
def booking_link(
    program_id: str = Query(..., min_length=1),
    origin: str = Query("", max_length=8),
    destination: str = Query("", max_length=8),
    cabin: Literal["economy", "premium_economy", "business", "first"] = Query("business"),
    service: ExploreService = Depends(get_explore_service),
) -> Dict[str, Any]:
    try:
        return service.booking_link(program_id, origin, destination, cabin)
    except ServiceError as exc:
        raise exc.to_http_exception()


@router.get("/opportunities/{opportunity_id}/booking-links", response_model=List[BookingLink])
def opportunity_booking_links(
    opportunity_id: str,
    origin: str = Query("", max_length=8),
    destination: str = Query("", max_length=8),
    user_id: str = Depends(require_user_id_header),
    balances: BalanceService = Depends(get_balance_service),
    service: ExploreService = Depends(get_explore_service),
) -> List[Dict[str, Any]]:
    """Search link for the booking program plus the transfer step, if any."""
    try:
        return service.booking_links(balances.get_point_balances(user_id), opportunity_id, origin, destination)
    except ServiceError as exc:
        raise exc.to_http_exception()
