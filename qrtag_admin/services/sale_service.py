import logging
from typing import Any, Dict, Optional, Tuple

from qrtag_admin.config import ApiConfig
from qrtag_admin.models.sale import SalesPersonRole, TagSaleFilters
from qrtag_admin.services.backend_client import BackendClient, Endpoint
from qrtag_admin.services.errors import invalid_response, not_found, validation_error
from qrtag_admin.services.normalizers import extract_entity_id, normalize_sale, unwrap_data
from qrtag_admin.services.params import build_pagination, sanitize_params

logger = logging.getLogger(__name__)

AFFILIATE_COMMISSION_RATE = 0.10
OWNER_COMMISSION_RATE = 0.04

# Amount fields are sent whenever present, including zero
_AMOUNT_FIELDS = (
    "totalSaleAmount",
    "commisionAmountOfSalesPerson",
    "commisionAmountOfOwner",
    "castAmountOfProductAndServices",
)


def suggest_commissions(total_sale_amount: float, sales_person_role: Optional[str]) -> Tuple[float, float]:
    """Return (sales person commission, owner commission) pre-filled on the sale form."""
    total = total_sale_amount or 0
    if sales_person_role == SalesPersonRole.Affiliate.value:
        return total * AFFILIATE_COMMISSION_RATE, total * OWNER_COMMISSION_RATE
    return 0, total * OWNER_COMMISSION_RATE


class SaleService:
    """Tag sales: list, detail, create, update and delete."""

    def __init__(self, client: BackendClient) -> None:
        self.client = client

    def get_tag_sales(self, filters: Optional[TagSaleFilters] = None) -> Dict[str, Any]:
        filters = filters or TagSaleFilters()
        params = sanitize_params(
            {
                "saleType": filters.sale_type,
                "paymentStatus": filters.payment_status,
                "varificationStatus": filters.varification_status,
                "salesPersonRole": filters.sales_person_role,
                "affiliatePartnerId": filters.affiliate_partner_id,
                "search": filters.search,
                "page": filters.page,
                "limit": filters.limit,
                "startDate": filters.start_date,
                "endDate": filters.end_date,
            }
        )

        data = self.client.get(Endpoint.QR_SALE_LIST, params).data
        if not isinstance(data, dict):
            logger.warning("No data received from sale list API")
            return {
                "sales": [],
                "pagination": {"total": 0, "page": filters.page or 1, "limit": filters.limit or ApiConfig.DEFAULT_PAGE_SIZE},
            }

        rows = data["items"] if isinstance(data.get("items"), list) else []
        sales = [normalize_sale(row) if isinstance(row, dict) else row for row in rows]
        return {
            "sales": sales,
            "pagination": build_pagination(data, len(sales), filters.page, filters.limit, ApiConfig.DEFAULT_PAGE_SIZE),
        }

    def get_tag_sale_by_id(self, sale_id: str) -> Dict[str, Any]:
        if not sale_id:
            raise validation_error("Sale ID is required", field="saleId")

        raw = unwrap_data(self.client.get(f"{Endpoint.QR_SALE_DETAIL}/{sale_id}").data)
        if not isinstance(raw, dict) or not raw:
            raise not_found("Sale not found", saleId=sale_id)
        return normalize_sale(raw)

    def create_tag_sale(self, sale: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a sale from a TagSale-shaped record.

        `tag`, `SalesPerson` and `owner` may be ids or embedded objects; they are
        sent as tagId / salesPersonId / ownerId.
        """
        payload: Dict[str, Any] = {
            "tagId": extract_entity_id(sale.get("tag")),
            "salesPersonId": extract_entity_id(sale.get("SalesPerson")),
            "ownerId": extract_entity_id(sale.get("owner")),
            "saleDate": sale.get("saleDate"),
            "saleType": sale.get("saleType"),
            "totalSaleAmount": sale.get("totalSaleAmount"),
            "commisionAmountOfSalesPerson": sale.get("commisionAmountOfSalesPerson"),
            "commisionAmountOfOwner": sale.get("commisionAmountOfOwner"),
            "castAmountOfProductAndServices": sale.get("castAmountOfProductAndServices"),
            "paymentStatus": sale.get("paymentStatus"),
            "varificationStatus": sale.get("varificationStatus"),
        }
        if isinstance(sale.get("message"), list) and sale["message"]:
            payload["message"] = sale["message"]
        if sale.get("paymentImageOrScreenShot"):
            payload["paymentImageOrScreenShot"] = sale["paymentImageOrScreenShot"]

        data = self.client.post(Endpoint.QR_SALE_CREATE, payload).data
        created = normalize_sale(unwrap_data(data) if isinstance(data, dict) else {})
        logger.info("Created sale %s for tag %s", created.get("_id"), payload["tagId"])
        return created

    def update_tag_sale(self, sale_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        if not sale_id:
            raise validation_error("Sale ID is required", field="saleId")

        payload: Dict[str, Any] = {}
        for source, target in (("tag", "tagId"), ("SalesPerson", "salesPersonId"), ("owner", "ownerId")):
            entity_id = extract_entity_id(changes.get(source))
            if entity_id:
                payload[target] = entity_id
        for key in ("saleDate", "saleType", "paymentStatus", "varificationStatus", "paymentImageOrScreenShot"):
            if changes.get(key):
                payload[key] = changes[key]
        for key in _AMOUNT_FIELDS:
            if changes.get(key) is not None:
                payload[key] = changes[key]
        if changes.get("message"):
            payload["message"] = changes["message"]

        raw = unwrap_data(self.client.put(f"{Endpoint.QR_SALE_UPDATE}/{sale_id}", payload).data)
        if not isinstance(raw, dict):
            raise invalid_response("Invalid response from sale update API", saleId=sale_id)
        return normalize_sale(raw)

    def delete_tag_sale(self, sale_id: str) -> None:
        if not sale_id:
            raise validation_error("Sale ID is required", field="saleId")
        self.client.delete(f"{Endpoint.QR_SALE_DELETE}/{sale_id}")
        logger.info("Deleted sale %s", sale_id)
