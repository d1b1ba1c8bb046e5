import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from qrtag_admin.config import ApiConfig
from qrtag_admin.models.tag import GenerateBulkRequest, TagListFilters, TagStatus, TagVerifyResult
from qrtag_admin.services.backend_client import BackendClient, Endpoint
from qrtag_admin.services.errors import invalid_response, not_found, validation_error
from qrtag_admin.services.normalizers import normalize_tag_item, normalize_verify_result, unwrap_data
from qrtag_admin.services.params import sanitize_params

logger = logging.getLogger(__name__)


def _normalize_rows(rows: List[Any]) -> List[Any]:
    return [normalize_tag_item(row) if isinstance(row, dict) else row for row in rows]


class TagService:
    """QR tags: listing, bulk generation, status, verification and activation."""

    def __init__(self, client: BackendClient) -> None:
        self.client = client

    def get_admin_tags(self, filters: Optional[TagListFilters] = None) -> Dict[str, Any]:
        filters = filters or TagListFilters()
        limit = filters.limit or ApiConfig.DEFAULT_PAGE_SIZE
        params = sanitize_params(
            {
                "status": filters.status,
                "batchName": filters.batch_name,
                "search": filters.search,
                "page": filters.page,
                "limit": filters.limit,
            }
        )

        data = self.client.get(Endpoint.ADMIN_TAGS, params).data
        if not isinstance(data, dict):
            logger.warning("No data received from tag list API")
            return {"tags": [], "pagination": {"total": 0, "page": filters.page or 1, "limit": limit}}

        # Current backend returns `items`; older builds returned `tags`
        if isinstance(data.get("items"), list):
            rows = data["items"]
        elif isinstance(data.get("tags"), list):
            rows = data["tags"]
        else:
            rows = []

        pagination = data.get("pagination")
        if not isinstance(pagination, dict):
            pagination = {
                "total": data.get("total"),
                "page": data.get("page") or filters.page or 1,
                "pages": data.get("pages"),
                "limit": limit,
            }

        return {"tags": _normalize_rows(rows), "pagination": pagination}

    def update_tag_status(self, short_code: str, status: str) -> Dict[str, Any]:
        if not short_code:
            raise validation_error("Tag short code is required", field="shortCode")
        if status not in {s.value for s in TagStatus}:
            raise validation_error(f"Invalid status '{status}'", field="status")

        data = self.client.patch(f"{Endpoint.ADMIN_TAGS}/{short_code}/status", {"status": status}).data
        if isinstance(data, dict) and data:
            return normalize_tag_item(data)
        return {}

    def generate_bulk_tags(self, request: GenerateBulkRequest) -> Dict[str, Any]:
        if not request.count or request.count < 1:
            raise validation_error("Count must be a positive number", field="count")

        data = self.client.post(Endpoint.QR_GENERATE_BULK, request.to_payload()).data
        if isinstance(data, list):
            rows, data = data, {}
        elif isinstance(data, dict):
            if isinstance(data.get("items"), list):
                rows = data["items"]
            elif isinstance(data.get("tags"), list):
                rows = data["tags"]
            else:
                rows = []
        else:
            logger.warning("No data received from generate-bulk API")
            return {"tags": []}

        tags = _normalize_rows(rows)
        logger.info("Generated %s tags in batch %s", len(tags), data.get("batchName") or request.batch_name)
        return {
            "tags": tags,
            "batchName": data.get("batchName") or request.batch_name,
            "totalGenerated": data.get("totalGenerated") or len(tags),
            "createdAt": data.get("createdAt") or datetime.now(timezone.utc).isoformat(),
        }

    def request_activation_otp(self, short_code: str, phone: str) -> Dict[str, Any]:
        if not short_code or not phone:
            raise validation_error("Short code and phone are required")

        response = self.client.post(
            Endpoint.ACTIVATE_TAG_REQUEST_OTP,
            {"shortCode": short_code, "phone": phone},
        )
        data = response.data if isinstance(response.data, dict) else {}
        if response.message and "message" not in data:
            data = {**data, "message": response.message}
        return data

    def confirm_tag_activation(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        required = ("shortCode", "otp", "fullName", "phone")
        if any(not payload.get(key) for key in required):
            raise validation_error("Short code, OTP, full name, and phone are required")

        response = self.client.post(Endpoint.ACTIVATE_TAG_CONFIRM, payload)
        data = response.data if isinstance(response.data, dict) else {}
        if response.message and "message" not in data:
            data = {**data, "message": response.message}
        logger.info("Tag %s activated", payload["shortCode"])
        return data

    def verify_tag_by_short_code(self, short_code: str) -> TagVerifyResult:
        if not short_code:
            raise validation_error("Tag short code is required", field="shortCode")

        data = self.client.get(f"{Endpoint.QR_TAG_VERIFY}/{quote(short_code, safe='')}").data
        raw = unwrap_data(data)
        if not isinstance(raw, dict):
            raise invalid_response("Invalid response from tag verification API")

        result = normalize_verify_result(raw)
        if not result.id:
            raise not_found("Tag ID missing in verification response", shortCode=short_code)
        return result

    def get_user_list_for_assignment(self) -> Dict[str, Any]:
        data = self.client.get(Endpoint.USER_LIST_FOR_ASSIGNMENT).data
        if isinstance(data, dict) and isinstance(data.get("users"), list):
            return {"users": data["users"]}
        return {"users": []}
