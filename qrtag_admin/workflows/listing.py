"""
Filtered, paginated list pages (tags, partners, sales).

Each fetch is stamped with a request token. Only the response carrying the
latest token is applied; anything older is dropped, so a slow response can
never overwrite the rows of a newer filter.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from qrtag_admin.config import ApiConfig
from qrtag_admin.models.common import validation_message
from qrtag_admin.services.errors import ServiceError, validation_error
from qrtag_admin.workflows.debounce import Debouncer
from qrtag_admin.workflows.notifications import Notifier

logger = logging.getLogger(__name__)

Fetcher = Callable[[Dict[str, Any]], Dict[str, Any]]
Deleter = Callable[[str], Any]


class ListController:
    def __init__(
        self,
        fetch: Fetcher,
        rows_key: str,
        filters: Optional[Dict[str, Any]] = None,
        delete: Optional[Deleter] = None,
        notifier: Optional[Notifier] = None,
        debouncer: Optional[Debouncer] = None,
    ) -> None:
        self._fetch = fetch
        self._delete = delete
        self.rows_key = rows_key
        self.notifier = notifier or Notifier()
        self.debouncer = debouncer or Debouncer(ApiConfig.SEARCH_DEBOUNCE_MS)

        self.filters: Dict[str, Any] = {"page": 1, "limit": ApiConfig.DEFAULT_PAGE_SIZE}
        self.filters.update(filters or {})
        self.search_input = ""
        self.rows: List[Any] = []
        self.pagination: Dict[str, Any] = {}
        self.loading = False
        self.error: Optional[str] = None

        self._lock = threading.Lock()
        self._token = 0

    def begin_fetch(self) -> int:
        with self._lock:
            self._token += 1
            self.loading = True
            return self._token

    def apply(self, token: int, result: Dict[str, Any]) -> bool:
        """Store a fetch result. Returns False when `token` is no longer the latest."""
        with self._lock:
            if token != self._token:
                logger.debug("Discarding stale %s response (token %s, latest %s)", self.rows_key, token, self._token)
                return False
            self.rows = list(result.get(self.rows_key) or [])
            self.pagination = dict(result.get("pagination") or {})
            self.error = None
            self.loading = False
            return True

    def fail(self, token: int, exc: ServiceError) -> bool:
        with self._lock:
            if token != self._token:
                return False
            self.error = exc.message or f"Failed to fetch {self.rows_key}"
            self.loading = False
        self.notifier.error(self.error)
        return True

    def fetch(self) -> bool:
        token = self.begin_fetch()
        try:
            result = self._fetch(dict(self.filters))
        except ServiceError as exc:
            self.fail(token, exc)
            return False
        except ValidationError as exc:
            # filters the fetcher rejected, e.g. page 0
            self.fail(token, validation_error(validation_message(exc)))
            return False
        return self.apply(token, result)

    def set_filters(self, **changes: Any) -> bool:
        """Merge filter changes and re-fetch. Page goes back to 1 unless set explicitly."""
        if "page" not in changes:
            changes["page"] = 1
        self.filters.update(changes)
        return self.fetch()

    def set_page(self, page: int, limit: Optional[int] = None) -> bool:
        changes: Dict[str, Any] = {"page": page}
        if limit:
            changes["limit"] = limit
        return self.set_filters(**changes)

    def on_search_input(self, value: str) -> None:
        self.search_input = value
        self.debouncer.call(lambda: self.set_filters(search=value or None))

    def refresh(self) -> bool:
        return self.fetch()

    def delete(self, row_id: str, confirm: Callable[[], bool]) -> bool:
        """Delete a row after `confirm()` returns True, then reload the page."""
        if self._delete is None:
            raise RuntimeError(f"{self.rows_key} list does not support delete")
        if not confirm():
            return False
        try:
            self._delete(row_id)
        except ServiceError as exc:
            self.notifier.error(exc.message or "Failed to delete")
            return False
        self.notifier.success("Deleted successfully")
        self.fetch()
        return True

    def dispose(self) -> None:
        self.debouncer.cancel()
