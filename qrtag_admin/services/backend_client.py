"""
HTTP client for the upstream QR platform API.

Every call goes through `BackendClient.request`, which
- builds the URL from the configured base URL and a relative endpoint,
- attaches the JSON content type, the caller's Authorization header and the
  optional admin API key,
- unwraps `{data, message, error}` envelopes (bodies without a `data` key are
  returned as-is),
- turns HTTP failures and envelope errors into `ServiceError`.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from qrtag_admin.config import ApiConfig
from qrtag_admin.services.errors import ServiceError

logger = logging.getLogger(__name__)


# Upstream endpoints, relative to ApiConfig.BASE_URL
class Endpoint:
    ADMIN_DASHBOARD_SUMMARY = "admin/dashboard/summary"
    ADMIN_TAGS = "admin/tags"
    QR_GENERATE_BULK = "qr/generate-bulk"
    ACTIVATE_TAG_REQUEST_OTP = "activate-tag/request-otp"
    ACTIVATE_TAG_CONFIRM = "activate-tag/confirm"
    QR_TAG_VERIFY = "qr/tagVarify"

    AFFILIATE_PARTNER_STATS = "affiliate-partners/stats"
    AFFILIATE_LIST_WITH_STATS = "user/affiliate-list-with-stats"
    CREATE_AFFILIATE_USER = "user/create-affiliate-user"
    AFFILIATE_USER = "user/affiliate"
    AFFILIATE_ASSIGNED_TAGS = "user/tag-assign-to-affiliate"
    USER_LIST_FOR_ASSIGNMENT = "user/list-of-admin-support-admin-super-admin-affiliate-list"

    QR_SALE_LIST = "qr/saleList"
    QR_SALE_CREATE = "qr/saleCreate"
    QR_SALE_DETAIL = "qr/saleDetail"
    QR_SALE_UPDATE = "qr/saleUpdate"
    QR_SALE_DELETE = "qr/saleDelete"

    WALLET_ME = "v1/wallet/me"
    WALLET_WITHDRAW = "v1/wallet/withdraw"
    WALLET_USER = "v1/wallet"
    WALLET_TRANSACTION = "v1/wallet/transaction"
    WALLET_MANUAL_CREDIT = "v1/wallet/manual-credit"


_DEFAULT_STATUS_MESSAGES = {
    401: "Error 401: Unauthorized",
    404: "Error 404: Not Found",
}


@dataclass
class ApiResponse:
    data: Any = None
    message: Optional[str] = None


class BackendClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        admin_api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or ApiConfig.BASE_URL).rstrip("/")
        self.token = token
        self.admin_api_key = ApiConfig.ADMIN_API_KEY if admin_api_key is None else admin_api_key
        self.timeout = timeout or ApiConfig.TIMEOUT_SECONDS
        self.session = session or requests.Session()

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = self.token
        if self.admin_api_key:
            headers["X-Admin-Api-Key"] = self.admin_api_key
        return headers

    def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
    ) -> ApiResponse:
        logger.debug("%s %s params=%s", method, endpoint, params)
        try:
            response = self.session.request(
                method,
                self._url(endpoint),
                params=params or None,
                json=body,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, endpoint, exc)
            raise ServiceError(502, "UPSTREAM_ERROR", str(exc) or "An unexpected error occurred", {"endpoint": endpoint})

        payload = _decode(response)

        if not response.ok:
            message = _message_from(payload) or _DEFAULT_STATUS_MESSAGES.get(response.status_code) \
                or response.reason or "An unexpected error occurred"
            logger.warning("%s %s returned %s: %s", method, endpoint, response.status_code, message)
            raise ServiceError(response.status_code, "UPSTREAM_ERROR", message, {"endpoint": endpoint})

        if isinstance(payload, dict) and "data" in payload:
            error = payload.get("error")
            if error:
                raise ServiceError(
                    400,
                    "UPSTREAM_ERROR",
                    error if isinstance(error, str) else str(error),
                    {"endpoint": endpoint},
                )
            return ApiResponse(data=payload.get("data"), message=payload.get("message"))

        return ApiResponse(data=payload)

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, body: Any) -> ApiResponse:
        return self.request("POST", endpoint, body=body)

    def put(self, endpoint: str, body: Any) -> ApiResponse:
        return self.request("PUT", endpoint, body=body)

    def patch(self, endpoint: str, body: Any) -> ApiResponse:
        return self.request("PATCH", endpoint, body=body)

    def delete(self, endpoint: str, body: Any = None) -> ApiResponse:
        return self.request("DELETE", endpoint, body=body)

    def close(self) -> None:
        self.session.close()


def _decode(response: requests.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _message_from(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error")
        if isinstance(message, str) and message:
            return message
    return None
