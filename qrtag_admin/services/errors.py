from dataclasses import dataclass, field
from typing import Any, Dict

from fastapi import HTTPException


@dataclass
class ServiceError(Exception):
    """Consistent service-layer exception with HTTP-friendly metadata."""

    status_code: int
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message

    def to_payload(self) -> Dict[str, Any]:
        return error_payload(self.code, self.message, self.details)


def error_payload(code: str, message: str, details: Dict[str, Any] | None = None) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
        }
    }


def validation_error(message: str, **details: Any) -> ServiceError:
    return ServiceError(400, "VALIDATION_ERROR", message, details)


def not_found(message: str, **details: Any) -> ServiceError:
    return ServiceError(404, "NOT_FOUND", message, details)


def invalid_response(message: str, **details: Any) -> ServiceError:
    return ServiceError(502, "INVALID_RESPONSE", message, details)


def to_http_exception(exc: ServiceError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.to_payload())
