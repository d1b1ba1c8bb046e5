from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Response

from qrtag_admin.dependencies.security import get_current_user
from qrtag_admin.dependencies.services import get_sale_service, get_tag_service
from qrtag_admin.models.sale import SaleForm, SaleUpdate, TagSaleFilters
from qrtag_admin.models.user import CurrentUser
from qrtag_admin.services.errors import ServiceError, to_http_exception, validation_error
from qrtag_admin.services.sale_service import SaleService
from qrtag_admin.services.tag_service import TagService
from qrtag_admin.workflows.sale_form import SaleFormController


router = APIRouter(
    prefix="/api/v1/sales",
    tags=["sales"]
)


@router.get("")
def list_sales(
    sale_type: Optional[str] = Query(default=None, alias="saleType"),
    payment_status: Optional[str] = Query(default=None, alias="paymentStatus"),
    varification_status: Optional[str] = Query(default=None, alias="varificationStatus"),
    sales_person_role: Optional[str] = Query(default=None, alias="salesPersonRole"),
    affiliate_partner_id: Optional[str] = Query(default=None, alias="affiliatePartnerId"),
    search: Optional[str] = None,
    page: Optional[int] = Query(default=None, ge=1),
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    service: SaleService = Depends(get_sale_service),
) -> Dict[str, Any]:
    """Paginated tag sales. Filters set to "all" or left empty are not sent upstream."""
    filters = TagSaleFilters(
        sale_type=sale_type,
        payment_status=payment_status,
        varification_status=varification_status,
        sales_person_role=sales_person_role,
        affiliate_partner_id=affiliate_partner_id,
        search=search,
        page=page,
        limit=limit,
        start_date=start_date,
        end_date=end_date,
    )
    try:
        return service.get_tag_sales(filters)
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.post("", status_code=201)
def create_sale(
    payload: SaleForm,
    sale_service: SaleService = Depends(get_sale_service),
    tag_service: TagService = Depends(get_tag_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> Dict[str, Any]:
    """
    Record a tag sale.

    The tag short code is verified first; the verified tag id is what gets
    sold, and the owner (and sales person, when not given) are taken from
    the verified tag unless the body provides them.

    Validation:
    - tagShortCode must verify
    - an owner must be known, from the body or the verified tag
    - totalSaleAmount > 0, other amounts >= 0
    """
    controller = SaleFormController(sale_service, tag_service, current_user=current_user)
    try:
        if controller.verifier.verify(payload.tag_short_code) is None:
            raise validation_error(
                controller.verifier.error or "Please verify the tag short code before creating a sale",
                field="tagShortCode",
            )
        return {"sale": controller.create(payload)}
    except ServiceError as exc:
        raise to_http_exception(exc)
    finally:
        controller.dispose()


@router.get("/{sale_id}")
def get_sale(sale_id: str, service: SaleService = Depends(get_sale_service)) -> Dict[str, Any]:
    try:
        return {"sale": service.get_tag_sale_by_id(sale_id)}
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.patch("/{sale_id}")
def update_sale(
    sale_id: str,
    payload: SaleUpdate,
    service: SaleService = Depends(get_sale_service),
) -> Dict[str, Any]:
    """Update a sale; only provided fields are sent upstream."""
    try:
        return {"sale": service.update_tag_sale(sale_id, payload.to_changes())}
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.delete("/{sale_id}", status_code=204)
def delete_sale(sale_id: str, service: SaleService = Depends(get_sale_service)) -> Response:
    try:
        service.delete_tag_sale(sale_id)
    except ServiceError as exc:
        raise to_http_exception(exc)
    return Response(status_code=204)
