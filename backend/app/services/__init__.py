from .advisor_service import AdvisorService
from .balance_service import BalanceService
from .catalog_service import CatalogService
from .errors import ServiceError
from .explore_service import ExploreResultCache, ExploreService, explore_cache

__all__ = [
    "AdvisorService",
    "BalanceService",
    "CatalogService",
    "ExploreResultCache",
    "ExploreService",
    "ServiceError",
    "explore_cache",
]
