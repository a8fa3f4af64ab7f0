from .explore_preference import ExplorePreference
from .point_balance import (
    PointBalanceCreate,
    PointBalanceListResponse,
    PointBalanceRecord,
    PointBalanceResponse,
    PointBalanceUpdate,
)

__all__ = [
    "ExplorePreference",
    "PointBalanceRecord",
    "PointBalanceCreate",
    "PointBalanceUpdate",
    "PointBalanceResponse",
    "PointBalanceListResponse",
]
