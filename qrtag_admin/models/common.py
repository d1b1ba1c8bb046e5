from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

PHONE_PATTERN = r"^[0-9]{10}$"
OTP_PATTERN = r"^[0-9]{6}$"
PINCODE_PATTERN = r"^[0-9]{6}$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class ApiModel(BaseModel):
    """Form/request model: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ListFilters(ApiModel):
    search: Optional[str] = None
    page: Optional[int] = Field(default=None, ge=1)
    limit: Optional[int] = Field(default=None, ge=1, le=500)


def validation_message(exc: ValidationError) -> str:
    """First human readable message of a pydantic validation error."""
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    message = errors[0].get("msg", "Invalid input")
    # pydantic prefixes messages raised from validators
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return message
