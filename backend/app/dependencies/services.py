from fastapi import Depends
from sqlalchemy.orm import Session

from app.dependencies.db import get_db
from app.services.advisor_service import AdvisorService
from app.services.balance_service import BalanceService
from app.services.catalog_service import CatalogService
from app.services.explore_service import ExploreService
from engine.catalog import Catalog, load_default_catalog


def get_catalog() -> Catalog:
    # Overridden in tests with fixture catalogs.
    return load_default_catalog()

def get_catalog_service(catalog: Catalog = Depends(get_catalog)) -> CatalogService:
    return CatalogService(catalog)

def get_balance_service(db: Session = Depends(get_db), catalog: Catalog = Depends(get_catalog)) -> BalanceService:
    return BalanceService(db, catalog)

def get_explore_service(db: Session = Depends(get_db), catalog: Catalog = Depends(get_catalog)) -> ExploreService:
    return ExploreService(db, catalog)

def get_advisor_service(catalog: Catalog = Depends(get_catalog)) -> AdvisorService:
    return AdvisorService(catalog)
