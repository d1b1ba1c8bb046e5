import math
from typing import Any, Dict, Optional

ALL = "all"


def sanitize_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """Drop filter values the upstream API treats as "no filter": None, "" and "all"."""
    return {
        key: value
        for key, value in params.items()
        if value is not None and value != "" and value != ALL
    }


def as_number(value: Any) -> Optional[float]:
    """Numeric upstream value, or None. Numeric strings such as "42" are accepted."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() else number
    return None


def build_pagination(
    data: Dict[str, Any],
    row_count: int,
    page: Optional[int],
    limit: Optional[int],
    default_limit: int = 10,
) -> Dict[str, Any]:
    """Pagination block for list payloads that keep total/page/pages at the root."""
    resolved_limit = limit or default_limit
    total = as_number(data.get("total"))
    if total is None:
        total = row_count
    pages = as_number(data.get("pages"))
    if pages is None:
        pages = math.ceil(total / resolved_limit) if resolved_limit else 0
    return {
        "total": total,
        "page": data.get("page") or page or 1,
        "pages": pages,
        "limit": resolved_limit,
    }
