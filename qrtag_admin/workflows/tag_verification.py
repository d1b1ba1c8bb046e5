"""
Short-code verification used by the sale forms.

Typing a tag short code triggers a lookup once the input settles. A verified
tag autofills the owner and sales person fields of the form.
"""

import logging
from typing import Any, Callable, Dict, Optional

from qrtag_admin.config import ApiConfig
from qrtag_admin.models.tag import TagVerifyResult
from qrtag_admin.services.errors import ServiceError
from qrtag_admin.services.tag_service import TagService
from qrtag_admin.workflows.debounce import Debouncer

logger = logging.getLogger(__name__)

MIN_SHORT_CODE_LENGTH = 3

FieldSetter = Callable[[Dict[str, Any]], None]


class ShortCodeVerifier:
    def __init__(
        self,
        tag_service: TagService,
        set_fields: Optional[FieldSetter] = None,
        debouncer: Optional[Debouncer] = None,
    ) -> None:
        self.tag_service = tag_service
        self.set_fields = set_fields or (lambda values: None)
        self.debouncer = debouncer or Debouncer(ApiConfig.VERIFY_DEBOUNCE_MS)

        self.verified_tag: Optional[TagVerifyResult] = None
        self.loading = False
        self.error: Optional[str] = None
        self.success: Optional[str] = None

    def on_input(self, value: Optional[str]) -> None:
        """React to a change of the short-code input."""
        trimmed = (value or "").strip()

        if not trimmed:
            self.debouncer.cancel()
            self.verified_tag = None
            self.error = None
            self.success = None
            self.set_fields({"owner": None})
            return

        if self.verified_tag is not None and self.verified_tag.short_code == trimmed:
            self.debouncer.cancel()
            return

        if len(trimmed) < MIN_SHORT_CODE_LENGTH:
            self.debouncer.cancel()
            self.verified_tag = None
            self.success = None
            return

        self.debouncer.call(lambda: self.verify(trimmed))

    def verify(self, short_code: str) -> Optional[TagVerifyResult]:
        """Look the tag up now, bypassing the debounce."""
        if not short_code:
            return None

        self.loading = True
        self.error = None
        try:
            result = self.tag_service.verify_tag_by_short_code(short_code)
        except ServiceError as exc:
            logger.info("Tag %s failed verification: %s", short_code, exc.message)
            self.verified_tag = None
            self.success = None
            self.error = exc.message or "Failed to verify tag"
            self.set_fields({"owner": None})
            return None
        finally:
            self.loading = False

        self.verified_tag = result
        autofill: Dict[str, Any] = {}
        if result.owner_id:
            autofill["owner"] = result.owner_id
        if result.assigned_to:
            autofill["SalesPerson"] = result.assigned_to
        if autofill:
            self.set_fields(autofill)
        self.success = f"Tag {result.short_code} verified successfully"
        return result

    def dispose(self) -> None:
        self.debouncer.cancel()
