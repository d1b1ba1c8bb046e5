from .tags import router as tags_router
from .partners import router as partners_router
from .sales import router as sales_router
from .wallet import router as wallet_router
from .dashboard import router as dashboard_router

__all__ = [
    "tags_router",
    "partners_router",
    "sales_router",
    "wallet_router",
    "dashboard_router",
]
