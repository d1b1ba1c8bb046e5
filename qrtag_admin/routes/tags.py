from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import Field

from qrtag_admin.dependencies.services import get_tag_service
from qrtag_admin.models.common import PHONE_PATTERN
from qrtag_admin.models.tag import (
    ConfirmActivationForm,
    GenerateBulkRequest,
    RequestOtpForm,
    TagListFilters,
    UpdateTagStatusRequest,
)
from qrtag_admin.services.errors import ServiceError, to_http_exception
from qrtag_admin.services.tag_service import TagService

router = APIRouter(
    prefix="/api/v1/tags",
    tags=["tags"]
)


class ActivationConfirmRequest(ConfirmActivationForm):
    """Confirm step body; the phone the OTP was sent to travels with it."""
    phone: str = Field(pattern=PHONE_PATTERN)


@router.get("")
def list_tags(
    status: Optional[str] = None,
    batch_name: Optional[str] = Query(default=None, alias="batchName"),
    search: Optional[str] = None,
    page: Optional[int] = Query(default=None, ge=1),
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    service: TagService = Depends(get_tag_service),
) -> Dict[str, Any]:
    """
    Paginated admin tag list.

    Query parameters:
    - status: generated | assigned | activated | archived | all
    - batchName, search, page, limit

    Returns:
    - tags: normalized tag rows
    - pagination: total, page, pages, limit
    """
    filters = TagListFilters(status=status, batch_name=batch_name, search=search, page=page, limit=limit)
    try:
        return service.get_admin_tags(filters)
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.get("/assignable-users")
def list_assignable_users(service: TagService = Depends(get_tag_service)) -> Dict[str, Any]:
    """Admins, support admins, super admins and affiliates a tag can be assigned to."""
    try:
        return service.get_user_list_for_assignment()
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.post("/generate-bulk", status_code=201)
def generate_bulk(payload: GenerateBulkRequest, service: TagService = Depends(get_tag_service)) -> Dict[str, Any]:
    """
    Generate a batch of QR tags.

    Request body:
    {
        "count": 50,
        "batchName": "Nov-Batch",
        "assignedTo": "<affiliate id>",
        "qrConfig": {"margin": 1, "scale": 8, "darkColor": "#000000", "lightColor": "#ffffff"}
    }
    """
    try:
        return service.generate_bulk_tags(payload)
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.patch("/{short_code}/status")
def update_status(
    short_code: str,
    payload: UpdateTagStatusRequest,
    service: TagService = Depends(get_tag_service),
) -> Dict[str, Any]:
    try:
        return {"tag": service.update_tag_status(short_code, payload.status)}
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.get("/verify/{short_code}")
def verify_tag(short_code: str, service: TagService = Depends(get_tag_service)) -> Dict[str, Any]:
    """
    Look up a tag by short code.

    Returns the flattened tag with owner contact fields, or 404 when the
    upstream record has no id.
    """
    try:
        result = service.verify_tag_by_short_code(short_code)
    except ServiceError as exc:
        raise to_http_exception(exc)
    return {"tag": result.as_dict()}


@router.post("/{short_code}/activation/otp")
def request_activation_otp(
    short_code: str,
    payload: RequestOtpForm,
    service: TagService = Depends(get_tag_service),
) -> Dict[str, Any]:
    """Step one of activation: send an OTP to the owner's phone."""
    try:
        return service.request_activation_otp(short_code, payload.phone)
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.post("/{short_code}/activation/confirm")
def confirm_activation(
    short_code: str,
    payload: ActivationConfirmRequest,
    service: TagService = Depends(get_tag_service),
) -> Dict[str, Any]:
    """Step two of activation: verify the OTP and register owner and vehicle."""
    try:
        return service.confirm_tag_activation(payload.to_request(short_code, payload.phone))
    except ServiceError as exc:
        raise to_http_exception(exc)
