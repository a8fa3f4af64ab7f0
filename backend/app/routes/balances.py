"""Point balance routes.

- GET    /api/v1/balances
- POST   /api/v1/balances
- PUT    /api/v1/balances/{program_id}
- DELETE /api/v1/balances/{program_id}

All routes act on the caller named by the x-user-id header.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status

from app.dependencies.security import require_user_id_header
from app.dependencies.services import get_balance_service
from app.models.point_balance import (
    PointBalanceCreate,
    PointBalanceListResponse,
    PointBalanceResponse,
    PointBalanceUpdate,
)
from app.services.balance_service import BalanceService
from app.services.errors import ServiceError

router = APIRouter(
    prefix="/api/v1/balances",
    tags=["balances"]
)


@router.get("", response_model=PointBalanceListResponse)
def list_balances(
    user_id: str = Depends(require_user_id_header),
    service: BalanceService = Depends(get_balance_service),
) -> Dict[str, Any]:
    balances = service.list_balances(user_id)
    return {"balances": balances, "total_points": sum(b["balance"] for b in balances)}


@router.post("", status_code=status.HTTP_201_CREATED, response_model=PointBalanceResponse)
def add_balance(
    payload: PointBalanceCreate,
    user_id: str = Depends(require_user_id_header),
    service: BalanceService = Depends(get_balance_service),
) -> Dict[str, Any]:
    """
    Validation:
    - program_id must exist in the catalog (404)
    - program_id must not already have a balance (409)
    """
    try:
        return service.add_balance(user_id, payload.program_id, payload.balance)
    except ServiceError as exc:
        raise exc.to_http_exception()


@router.put("/{program_id}", response_model=PointBalanceResponse)
def update_balance(
    program_id: str,
    payload: PointBalanceUpdate,
    user_id: str = Depends(require_user_id_header),
    service: BalanceService = Depends(get_balance_service),
) -> Dict[str, Any]:
    try:
        return service.update_balance(user_id, program_id, payload.balance)
    except ServiceError as exc:
        raise exc.to_http_exception()


@router.delete("/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_balance(
    program_id: str,
    user_id: str = Depends(require_user_id_header),
    service: BalanceService = Depends(get_balance_service),
) -> Response:
    try:
        service.remove_balance(user_id, program_id)
    except ServiceError as exc:
        raise exc.to_http_exception()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
