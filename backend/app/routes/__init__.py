from .advisor import router as advisor_router
from .balances import router as balances_router
from .catalog import router as catalog_router
from .explore import router as explore_router

__all__ = [
    "advisor_router",
    "balances_router",
    "catalog_router",
    "explore_router",
]
