"""
Normalization of upstream JSON into the records the dashboard renders.

The upstream API is loosely typed: field names drift between endpoints
(`companyName` vs `company`, `commissionPercentage` vs `commissionRate`,
`_id` vs `id` vs `tagId`) and nested objects may be missing. The mappers here
never raise. Missing values become None and are shown as a placeholder by
the formatting helpers.
"""

from typing import Any, Dict, Optional

from qrtag_admin.models.tag import TagStatus, TagVerifyResult

Record = Dict[str, Any]


def _as_dict(value: Any) -> Optional[Record]:
    return value if isinstance(value, dict) else None


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def unwrap_data(payload: Any) -> Any:
    """Return `payload["data"]` when the body is a nested `{data: {...}}` envelope."""
    if isinstance(payload, dict):
        inner = payload.get("data")
        if inner:
            return inner
    return payload


def extract_entity_id(value: Any) -> str:
    """Id of a reference that is either a bare id string or an embedded `{_id: ...}` object."""
    if not value:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and value.get("_id"):
        return str(value["_id"])
    return ""


def normalize_owner(raw: Any) -> Optional[Record]:
    owner = _as_dict(raw)
    if owner is None:
        return None
    return {
        "id": _first(owner.get("_id"), owner.get("id")),
        "fullName": owner.get("fullName"),
        "email": owner.get("email"),
        "phone": owner.get("phone"),
        "city": owner.get("city"),
        "preferences": owner.get("preferences"),
        "vehicle": owner.get("vehicle"),
        "isActive": owner.get("isActive"),
        "createdAt": owner.get("createdAt"),
        "updatedAt": owner.get("updatedAt"),
    }


def normalize_tag_item(raw: Record) -> Record:
    # Output always carries "owner"; seeing it means the item is already normalized.
    if "owner" in raw:
        return raw

    activation = _as_dict(raw.get("activation")) or {}
    owner_assigned = normalize_owner(raw.get("ownerAssignedTo"))

    return {
        "tagId": _first(raw.get("tagId"), raw.get("_id")),
        "_id": _first(raw.get("_id"), raw.get("id")),
        "shortCode": raw.get("shortCode"),
        "shortUrl": raw.get("shortUrl"),
        "qrUrl": raw.get("qrUrl"),
        "status": raw.get("status") or TagStatus.Generated.value,
        "batchName": raw.get("batchName"),
        "metadata": raw.get("metadata") or {},
        "owner": owner_assigned,
        "assignedTo": raw.get("assignedTo") or None,
        "ownerAssignedTo": owner_assigned,
        "createdAt": raw.get("createdAt"),
        "updatedAt": raw.get("updatedAt"),
        "activatedAt": _first(
            activation.get("activatedAt"),
            raw.get("activatedAt"),
            activation.get("verifiedAt"),
        ),
    }


def normalize_assigned_tag(raw: Record) -> Record:
    """Tag row from the partner assigned-tags endpoint, which prefers `tagId` over `_id`."""
    owner_assigned = normalize_owner(raw.get("ownerAssignedTo"))
    return {
        "_id": _first(raw.get("_id"), raw.get("tagId")),
        "tagId": _first(raw.get("tagId"), raw.get("_id")),
        "shortCode": raw.get("shortCode"),
        "shortUrl": raw.get("shortUrl"),
        "qrUrl": raw.get("qrUrl"),
        "status": raw.get("status") or TagStatus.Generated.value,
        "batchName": raw.get("batchName"),
        "assignedTo": raw.get("assignedTo"),
        "ownerAssignedTo": owner_assigned,
        "createdAt": raw.get("createdAt"),
        "updatedAt": raw.get("updatedAt"),
        "activatedAt": raw.get("activatedAt"),
    }


def normalize_verify_result(raw: Record) -> TagVerifyResult:
    """Flatten the tag-verify payload. An empty id is kept; the caller decides."""
    return TagVerifyResult(
        id=raw.get("_id") or "",
        short_code=raw.get("shortCode") or "",
        short_url=raw.get("shortUrl"),
        qr_url=raw.get("qrUrl"),
        status=raw.get("status"),
        batch_name=raw.get("batchName"),
        assigned_to=raw.get("assignedTo"),
        owner_id=raw.get("ownerId"),
        owner_full_name=raw.get("fullName"),
        owner_phone=raw.get("phone"),
        owner_email=raw.get("email"),
        vehicle_number=raw.get("vehicleNumber"),
        vehicle_type=raw.get("vehicleType"),
        created_at=raw.get("createdAt"),
        updated_at=raw.get("updatedAt"),
    )


def _partner_status(raw: Record) -> str:
    status = raw.get("status")
    if isinstance(status, str) and status:
        return status.lower()
    return "active" if raw.get("isActive") else "inactive"


def normalize_partner(raw: Record) -> Record:
    company = _first(raw.get("companyName"), raw.get("company"))
    commission = _first(raw.get("commissionPercentage"), raw.get("commissionRate"))
    cards_activated = _first(raw.get("cardsActivated"), raw.get("totalCardsActivated"))
    sales_amount = _first(raw.get("totalSalesAmount"), raw.get("totalRevenue"))

    return {
        "_id": raw.get("_id"),
        "partnerId": raw.get("partnerId"),
        "name": raw.get("name") or "",
        "email": raw.get("email") or "",
        "phone": raw.get("phone") or "",
        "companyName": company,
        "company": company,
        "address": raw.get("address"),
        "city": raw.get("city"),
        "state": raw.get("state"),
        "pincode": raw.get("pincode"),
        "commissionPercentage": commission,
        "commissionRate": commission,
        "isActive": raw.get("isActive"),
        "status": _partner_status(raw),
        "createdAt": raw.get("createdAt"),
        "updatedAt": raw.get("updatedAt"),
        "cardsActivated": cards_activated,
        "totalCardsActivated": cards_activated,
        "totalSalesAmount": sales_amount,
        "totalSales": sales_amount,
        "totalRevenue": sales_amount,
        "totalCommissionEarned": raw.get("totalCommissionEarned"),
        "totalCost": raw.get("totalCost"),
        "totalOwnerCommission": raw.get("totalOwnerCommission"),
    }


SALE_FIELDS = (
    "_id",
    "tag",
    "SalesPerson",
    "owner",
    "saleDate",
    "saleType",
    "salesPersonRole",
    "totalSaleAmount",
    "commisionAmountOfSalesPerson",
    "commisionAmountOfOwner",
    "castAmountOfProductAndServices",
    "paymentStatus",
    "varificationStatus",
    "message",
    "createdBy",
    "updatedBy",
    "createdAt",
    "updatedAt",
)


def normalize_sale(raw: Record) -> Record:
    sale = {name: raw.get(name) for name in SALE_FIELDS}
    image = raw.get("paymentImageOrScreenShot")
    sale["paymentImageOrScreenShot"] = image if isinstance(image, str) else None
    return sale


TRANSACTION_FIELDS = (
    "_id",
    "user",
    "sale",
    "type",
    "amount",
    "status",
    "description",
    "notes",
    "balanceSnapshot",
    "meta",
    "createdBy",
    "approvedBy",
    "approvedAt",
    "createdAt",
    "updatedAt",
)


def normalize_transaction(raw: Record) -> Record:
    return {name: raw.get(name) for name in TRANSACTION_FIELDS}


def normalize_wallet_response(raw: Record) -> Record:
    summary = _as_dict(raw.get("summary"))
    rows = raw.get("transactions")
    transactions = [
        normalize_transaction(row) for row in rows if isinstance(row, dict)
    ] if isinstance(rows, list) else []
    return {
        "summary": summary,
        "transactions": transactions,
        "pagination": _as_dict(raw.get("pagination")),
    }
