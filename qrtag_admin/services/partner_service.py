import logging
import math
from typing import Any, Dict, Optional

from qrtag_admin.config import ApiConfig
from qrtag_admin.models.partner import AffiliatePartnerFilters, AffiliatePartnerForm, AffiliatePartnerUpdate
from qrtag_admin.models.tag import TagListFilters
from qrtag_admin.services.backend_client import BackendClient, Endpoint
from qrtag_admin.services.errors import not_found, validation_error
from qrtag_admin.services.normalizers import normalize_assigned_tag, normalize_partner, unwrap_data
from qrtag_admin.services.params import as_number, build_pagination, sanitize_params

logger = logging.getLogger(__name__)


def _items(data: Any) -> list:
    if isinstance(data, dict) and isinstance(data.get("items"), list):
        return data["items"]
    return []


class PartnerService:
    """Affiliate partners: list with stats, CRUD, stats and assigned tags."""

    def __init__(self, client: BackendClient) -> None:
        self.client = client

    def get_affiliate_partners(self, filters: Optional[AffiliatePartnerFilters] = None) -> Dict[str, Any]:
        filters = filters or AffiliatePartnerFilters()
        # upstream expects ACTIVE / INACTIVE / SUSPENDED
        status = filters.status.upper() if filters.status and filters.status != "all" else None
        params = sanitize_params(
            {
                "status": status,
                "search": filters.search,
                "page": filters.page,
                "limit": filters.limit,
            }
        )

        data = self.client.get(Endpoint.AFFILIATE_LIST_WITH_STATS, params).data
        if not isinstance(data, dict):
            logger.warning("No data received from affiliate list API")
            return {
                "partners": [],
                "pagination": {"total": 0, "page": filters.page or 1, "limit": filters.limit or ApiConfig.DEFAULT_PAGE_SIZE},
            }

        partners = [normalize_partner(row) if isinstance(row, dict) else row for row in _items(data)]
        return {
            "partners": partners,
            "pagination": build_pagination(data, len(partners), filters.page, filters.limit, ApiConfig.DEFAULT_PAGE_SIZE),
        }

    def get_affiliate_partner_by_id(self, partner_id: str) -> Dict[str, Any]:
        if not partner_id:
            raise validation_error("Partner ID is required", field="partnerId")

        # No single-partner endpoint upstream; look it up in the full list
        data = self.client.get(Endpoint.AFFILIATE_LIST_WITH_STATS, {}).data
        for row in _items(data):
            if isinstance(row, dict) and row.get("_id") == partner_id:
                return normalize_partner(row)
        raise not_found("Partner not found", partnerId=partner_id)

    def create_affiliate_partner(self, form: AffiliatePartnerForm) -> Dict[str, Any]:
        data = self.client.post(Endpoint.CREATE_AFFILIATE_USER, form.to_request()).data
        partner = normalize_partner(unwrap_data(data) if isinstance(data, dict) else {})
        logger.info("Created affiliate partner %s", partner.get("_id") or form.email)
        return partner

    def update_affiliate_partner(self, partner_id: str, form: AffiliatePartnerUpdate) -> Dict[str, Any]:
        if not partner_id:
            raise validation_error("Partner ID is required", field="partnerId")

        data = self.client.put(f"{Endpoint.AFFILIATE_USER}/{partner_id}", form.to_request()).data
        return normalize_partner(unwrap_data(data) if isinstance(data, dict) else {"_id": partner_id})

    def delete_affiliate_partner(self, partner_id: str) -> None:
        if not partner_id:
            raise validation_error("Partner ID is required", field="partnerId")
        self.client.delete(f"{Endpoint.AFFILIATE_USER}/{partner_id}")
        logger.info("Deleted affiliate partner %s", partner_id)

    def get_affiliate_partner_stats(
        self,
        partner_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = sanitize_params({"partnerId": partner_id, "startDate": start_date, "endDate": end_date})
        data = unwrap_data(self.client.get(Endpoint.AFFILIATE_PARTNER_STATS, params).data)
        if not isinstance(data, dict):
            return {"recentActivations": [], "monthlyStats": []}
        return {
            "totalPartners": data.get("totalPartners"),
            "activePartners": data.get("activePartners"),
            "totalCardsActivated": data.get("totalCardsActivated"),
            "totalSales": data.get("totalSales"),
            "totalRevenue": data.get("totalRevenue"),
            "recentActivations": data.get("recentActivations") or [],
            "monthlyStats": data.get("monthlyStats") or [],
        }

    def get_partner_assigned_tags(
        self, partner_id: str, filters: Optional[TagListFilters] = None
    ) -> Dict[str, Any]:
        if not partner_id:
            raise validation_error("Partner ID is required", field="partnerId")

        filters = filters or TagListFilters()
        params = sanitize_params(
            {
                "status": filters.status,
                "search": filters.search,
                "page": filters.page,
                "limit": filters.limit,
                "batchName": filters.batch_name,
            }
        )
        data = self.client.get(f"{Endpoint.AFFILIATE_ASSIGNED_TAGS}/{partner_id}", params).data
        data = data if isinstance(data, dict) else {}
        tags = [normalize_assigned_tag(row) if isinstance(row, dict) else row for row in _items(data)]

        total = as_number(data.get("total"))
        if total is None:
            total = len(tags)
        limit = as_number(data.get("limit")) or filters.limit or ApiConfig.DEFAULT_PAGE_SIZE
        pages = as_number(data.get("pages"))
        if pages is None:
            pages = math.ceil(total / limit) if total > 0 else 1

        return {
            "tags": tags,
            "pagination": {
                "total": total,
                "page": data.get("page") or filters.page or 1,
                "pages": pages,
                "limit": limit,
            },
        }
