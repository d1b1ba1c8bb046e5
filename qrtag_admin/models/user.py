from dataclasses import dataclass
from typing import Optional

from qrtag_admin.models.sale import ADMIN_ROLES, SalesPersonRole


@dataclass(frozen=True)
class CurrentUser:
    """The signed-in dashboard user, as stored by the front end."""

    id: Optional[str] = None
    role: Optional[str] = None

    @property
    def is_affiliate(self) -> bool:
        return self.role == SalesPersonRole.Affiliate.value

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES
