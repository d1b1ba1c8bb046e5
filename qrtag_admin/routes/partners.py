from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Response

from qrtag_admin.dependencies.services import get_partner_service
from qrtag_admin.models.partner import AffiliatePartnerFilters, AffiliatePartnerForm, AffiliatePartnerUpdate
from qrtag_admin.models.tag import TagListFilters
from qrtag_admin.services.errors import ServiceError, to_http_exception
from qrtag_admin.services.partner_service import PartnerService

router = APIRouter(
    prefix="/api/v1/affiliate-partners",
    tags=["affiliate-partners"]
)


@router.get("")
def list_partners(
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: Optional[int] = Query(default=None, ge=1),
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    service: PartnerService = Depends(get_partner_service),
) -> Dict[str, Any]:
    """
    Affiliate partners with their lifetime stats.

    Query parameters:
    - status: active | inactive | suspended | all
    - search, page, limit
    """
    filters = AffiliatePartnerFilters(status=status, search=search, page=page, limit=limit)
    try:
        return service.get_affiliate_partners(filters)
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.post("", status_code=201)
def create_partner(payload: AffiliatePartnerForm, service: PartnerService = Depends(get_partner_service)) -> Dict[str, Any]:
    """
    Create an affiliate partner account.

    Validation (rejected with 400 before anything is sent upstream):
    - name required, email valid, phone 10 digits
    - password at least 6 characters
    - commissionRate between 0 and 100
    """
    try:
        return {"partner": service.create_affiliate_partner(payload)}
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.get("/stats")
def partner_stats(
    partner_id: Optional[str] = Query(default=None, alias="partnerId"),
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    service: PartnerService = Depends(get_partner_service),
) -> Dict[str, Any]:
    try:
        return service.get_affiliate_partner_stats(partner_id, start_date, end_date)
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.get("/{partner_id}")
def get_partner(partner_id: str, service: PartnerService = Depends(get_partner_service)) -> Dict[str, Any]:
    try:
        return {"partner": service.get_affiliate_partner_by_id(partner_id)}
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.patch("/{partner_id}")
def update_partner(
    partner_id: str,
    payload: AffiliatePartnerUpdate,
    service: PartnerService = Depends(get_partner_service),
) -> Dict[str, Any]:
    """
    Update an affiliate partner.

    Only provided fields are sent; a blank password keeps the current one.
    """
    try:
        return {"partner": service.update_affiliate_partner(partner_id, payload)}
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.delete("/{partner_id}", status_code=204)
def delete_partner(partner_id: str, service: PartnerService = Depends(get_partner_service)) -> Response:
    try:
        service.delete_affiliate_partner(partner_id)
    except ServiceError as exc:
        raise to_http_exception(exc)
    return Response(status_code=204)


@router.get("/{partner_id}/tags")
def partner_tags(
    partner_id: str,
    status: Optional[str] = None,
    batch_name: Optional[str] = Query(default=None, alias="batchName"),
    search: Optional[str] = None,
    page: Optional[int] = Query(default=None, ge=1),
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    service: PartnerService = Depends(get_partner_service),
) -> Dict[str, Any]:
    """Tags assigned to a partner."""
    filters = TagListFilters(status=status, batch_name=batch_name, search=search, page=page, limit=limit)
    try:
        return service.get_partner_assigned_tags(partner_id, filters)
    except ServiceError as exc:
        raise to_http_exception(exc)
