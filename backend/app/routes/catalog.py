from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies.services import get_catalog_service
from app.services.catalog_service import CatalogService
from app.services.errors import ServiceError

router = APIRouter(
    prefix="/api/v1/catalog",
    tags=["catalog"]
)


@router.get("/programs")
def list_programs(
    type: Optional[Literal["airline", "credit_card"]] = Query(None),
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, List[Dict[str, Any]]]:
    return {"programs": service.list_programs(type)}


@router.get("/programs/{program_id}/partners")
def list_transfer_partners(
    program_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, Any]:
    try:
        partners = service.get_transfer_partners(program_id)
    except ServiceError as exc:
        raise exc.to_http_exception()
    return {"program_id": program_id, "partners": partners}


@router.get("/sweet-spots")
def list_sweet_spots(
    q: Optional[str] = Query(None, max_length=100),
    cabin: Optional[Literal["economy", "premium_economy", "business", "first"]] = Query(None),
    region: Optional[str] = Query(None, max_length=64),
    sort: str = Query("value"),
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, Any]:
    try:
        spots = service.search_sweet_spots(q, cabin, region, sort)
    except ServiceError as exc:
        raise exc.to_http_exception()
    return {"sweet_spots": spots, "count": len(spots)}


@router.get("/regions")
def list_regions(service: CatalogService = Depends(get_catalog_service)) -> Dict[str, Any]:
    return {"regions": service.list_regions()}


@router.get("/destinations")
def search_destinations(
    q: Optional[str] = Query(None, max_length=64),
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, Any]:
    return {"destinations": service.search_destinations(q)}
