from .backend_client import BackendClient, Endpoint
from .dashboard_service import DashboardLoader, DashboardService
from .errors import ServiceError
from .partner_service import PartnerService
from .sale_service import SaleService
from .tag_service import TagService
from .wallet_service import WalletService

__all__ = [
    "BackendClient",
    "Endpoint",
    "DashboardLoader",
    "DashboardService",
    "ServiceError",
    "PartnerService",
    "SaleService",
    "TagService",
    "WalletService",
]
