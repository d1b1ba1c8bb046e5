from typing import Any, Dict

from fastapi import APIRouter, Depends

from qrtag_admin.dependencies.services import get_dashboard_service
from qrtag_admin.services.dashboard_service import DashboardService

router = APIRouter(
    prefix="/api/v1/dashboard",
    tags=["dashboard"]
)


@router.get("/summary")
def dashboard_summary(service: DashboardService = Depends(get_dashboard_service)) -> Dict[str, Any]:
    """
    Admin dashboard summary.

    Never fails: sections the upstream API does not provide (or the whole
    summary, when the call fails) are filled from built-in figures.
    """
    return service.get_admin_dashboard_summary()
