import logging
from typing import Any, Dict, Optional

from qrtag_admin.models.sale import SaleForm
from qrtag_admin.models.user import CurrentUser
from qrtag_admin.services.errors import ServiceError, validation_error
from qrtag_admin.services.sale_service import SaleService, suggest_commissions
from qrtag_admin.services.tag_service import TagService
from qrtag_admin.workflows.debounce import Debouncer
from qrtag_admin.workflows.notifications import Notifier
from qrtag_admin.workflows.tag_verification import ShortCodeVerifier

logger = logging.getLogger(__name__)


class SaleFormController:
    """
    Add Sale form state.

    A sale can only be created for a tag resolved through short-code
    verification, and only with an owner id (normally autofilled from the
    verified tag).
    """

    def __init__(
        self,
        sale_service: SaleService,
        tag_service: TagService,
        current_user: Optional[CurrentUser] = None,
        notifier: Optional[Notifier] = None,
        debouncer: Optional[Debouncer] = None,
    ) -> None:
        self.sale_service = sale_service
        self.tag_service = tag_service
        self.current_user = current_user or CurrentUser()
        self.notifier = notifier or Notifier()
        self.values: Dict[str, Any] = {}
        self.sales_persons: list = []
        self.verifier = ShortCodeVerifier(tag_service, set_fields=self.set_fields, debouncer=debouncer)

        if self.current_user.is_affiliate and self.current_user.id:
            self.values["SalesPerson"] = self.current_user.id

    @property
    def verified_tag(self):
        return self.verifier.verified_tag

    def set_fields(self, updates: Dict[str, Any]) -> None:
        self.values.update(updates)

    def load_sales_persons(self) -> None:
        """Admins pick the sales person from the assignable user list."""
        if not self.current_user.is_admin:
            return
        try:
            self.sales_persons = self.tag_service.get_user_list_for_assignment().get("users", [])
        except ServiceError as exc:
            logger.warning("Failed to load sales persons: %s", exc.message)
            self.notifier.error("Failed to load sales persons list")

    def set_short_code(self, value: Optional[str]) -> None:
        self.values["tagShortCode"] = value
        self.verifier.on_input(value)

    def set_amount(self, total_sale_amount: Optional[float], sales_person_role: Optional[str] = None) -> None:
        self.values["totalSaleAmount"] = total_sale_amount
        if sales_person_role is not None:
            self.values["salesPersonRole"] = sales_person_role
        if total_sale_amount:
            person, owner = suggest_commissions(total_sale_amount, self.values.get("salesPersonRole"))
            self.values["commisionAmountOfSalesPerson"] = person
            self.values["commisionAmountOfOwner"] = owner

    def build_sale(self, form: SaleForm) -> Dict[str, Any]:
        verified = self.verifier.verified_tag
        if verified is None or not verified.id:
            raise validation_error("Please verify the tag short code before creating a sale", field="tagShortCode")

        owner = form.owner or self.values.get("owner")
        if not owner:
            raise validation_error("Owner details are missing. Please verify the tag again.", field="owner")

        return {
            "tag": verified.id,
            "SalesPerson": form.sales_person or self.values.get("SalesPerson") or self.current_user.id or "",
            "owner": owner,
            "saleDate": form.sale_date.isoformat(),
            "saleType": form.sale_type,
            "salesPersonRole": form.sales_person_role,
            "totalSaleAmount": form.total_sale_amount,
            "commisionAmountOfSalesPerson": form.commision_amount_of_sales_person,
            "commisionAmountOfOwner": form.commision_amount_of_owner,
            "castAmountOfProductAndServices": form.cast_amount_of_product_and_services,
            "paymentStatus": form.payment_status,
            "varificationStatus": form.varification_status,
            "message": [{"message": form.message}] if form.message else [],
            "paymentImageOrScreenShot": form.payment_image_or_screenshot,
        }

    def create(self, form: SaleForm) -> Dict[str, Any]:
        """Create the sale or raise ServiceError; nothing is sent when the guards fail."""
        return self.sale_service.create_tag_sale(self.build_sale(form))

    def submit(self, form: SaleForm) -> Optional[Dict[str, Any]]:
        try:
            sale = self.create(form)
        except ServiceError as exc:
            self.notifier.error(exc.message or "Failed to create sale")
            return None
        self.notifier.success("Sale created successfully")
        return sale

    def dispose(self) -> None:
        self.verifier.dispose()
