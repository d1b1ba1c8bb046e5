"""Display helpers shared by the CLI and the dashboard payloads."""

from datetime import datetime
from typing import Any, Optional, Union

EMPTY = "—"
DATE_TIME_FORMAT = "%d %b %Y, %H:%M"


def display(value: Any) -> str:
    """Render a normalized field, using a dash for missing values."""
    if value is None or value == "":
        return EMPTY
    return str(value)


def _group_indian(digits: str) -> str:
    # 12345678 -> 1,23,45,678
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_count(value: Optional[Union[int, float]]) -> str:
    return _group_indian(str(int(value or 0)))


def format_currency(value: Any) -> str:
    """Rupee amount with Indian digit grouping; non-numbers render as ₹0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "₹0"
    sign = "-" if value < 0 else ""
    amount = round(abs(value), 2)
    whole = int(amount)
    cents = round((amount - whole) * 100)
    text = _group_indian(str(whole))
    if cents:
        text = f"{text}.{cents:02d}".rstrip("0")
    return f"{sign}₹{text}"


def format_date_time(value: Optional[Union[str, datetime]]) -> str:
    if not value:
        return EMPTY
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value.strftime(DATE_TIME_FORMAT)
