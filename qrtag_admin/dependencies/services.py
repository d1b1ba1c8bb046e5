from typing import Iterator, Optional

from fastapi import Depends

from qrtag_admin.dependencies.security import get_auth_token
from qrtag_admin.services.backend_client import BackendClient
from qrtag_admin.services.dashboard_service import DashboardService
from qrtag_admin.services.partner_service import PartnerService
from qrtag_admin.services.sale_service import SaleService
from qrtag_admin.services.tag_service import TagService
from qrtag_admin.services.wallet_service import WalletService


def get_backend_client(token: Optional[str] = Depends(get_auth_token)) -> Iterator[BackendClient]:
    # One upstream session per request, closed once the response is sent.
    client = BackendClient(token=token)
    try:
        yield client
    finally:
        client.close()


def get_tag_service(client: BackendClient = Depends(get_backend_client)) -> TagService:
    return TagService(client)


def get_partner_service(client: BackendClient = Depends(get_backend_client)) -> PartnerService:
    return PartnerService(client)


def get_sale_service(client: BackendClient = Depends(get_backend_client)) -> SaleService:
    return SaleService(client)


def get_wallet_service(client: BackendClient = Depends(get_backend_client)) -> WalletService:
    return WalletService(client)


def get_dashboard_service(client: BackendClient = Depends(get_backend_client)) -> DashboardService:
    return DashboardService(client)
