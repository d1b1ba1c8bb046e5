from datetime import datetime
from unittest.mock import MagicMock

import pytest

from qrtag_admin.models.sale import SaleForm
from qrtag_admin.models.tag import TagVerifyResult
from qrtag_admin.models.user import CurrentUser
from qrtag_admin.services.errors import ServiceError
from qrtag_admin.workflows.debounce import Debouncer
from qrtag_admin.workflows.sale_form import SaleFormController


def make_form(**overrides):
    values = {
        "tagShortCode": "abc123",
        "saleDate": datetime(2025, 11, 15, 10, 30),
        "saleType": "offline",
        "salesPersonRole": "Affiliate",
        "totalSaleAmount": 2499,
        "commisionAmountOfSalesPerson": 249.9,
        "commisionAmountOfOwner": 99.96,
    }
    values.update(overrides)
    return SaleForm.model_validate(values)


@pytest.fixture
def services():
    sale_service = MagicMock()
    sale_service.create_tag_sale.return_value = {"_id": "s1"}
    tag_service = MagicMock()
    tag_service.verify_tag_by_short_code.return_value = TagVerifyResult(
        id="t1", short_code="abc123", owner_id="o1", assigned_to="u9"
    )
    return sale_service, tag_service


@pytest.fixture
def controller(services, scheduler):
    sale_service, tag_service = services
    return SaleFormController(
        sale_service,
        tag_service,
        current_user=CurrentUser(id="u1", role="Affiliate"),
        debouncer=Debouncer(600, scheduler),
    )


class TestSaleFormGuards:
    def test_submit_without_verified_tag(self, controller, services):
        sale_service, tag_service = services
        with pytest.raises(ServiceError) as exc_info:
            controller.create(make_form())
        assert exc_info.value.message == "Please verify the tag short code before creating a sale"
        assert exc_info.value.status_code == 400
        sale_service.create_tag_sale.assert_not_called()
        tag_service.verify_tag_by_short_code.assert_not_called()

    def test_submit_without_verified_tag_notifies(self, controller, services):
        assert controller.submit(make_form()) is None
        assert controller.notifier.last.message == "Please verify the tag short code before creating a sale"
        services[0].create_tag_sale.assert_not_called()

    def test_missing_owner(self, controller, services, scheduler):
        _, tag_service = services
        tag_service.verify_tag_by_short_code.return_value = TagVerifyResult(id="t1", short_code="abc123")
        controller.set_short_code("abc123")
        scheduler.flush()
        with pytest.raises(ServiceError) as exc_info:
            controller.create(make_form())
        assert exc_info.value.message == "Owner details are missing. Please verify the tag again."
        services[0].create_tag_sale.assert_not_called()


class TestSaleFormSubmit:
    def test_verified_tag_autofills_and_creates(self, controller, services, scheduler):
        sale_service, _ = services
        controller.set_short_code("abc123")
        scheduler.flush()
        assert controller.values["owner"] == "o1"
        assert controller.values["SalesPerson"] == "u9"

        assert controller.submit(make_form(message="paid by UPI")) == {"_id": "s1"}
        sale = sale_service.create_tag_sale.call_args.args[0]
        assert sale["tag"] == "t1"
        assert sale["owner"] == "o1"
        assert sale["SalesPerson"] == "u9"
        assert sale["saleDate"] == "2025-11-15T10:30:00"
        assert sale["message"] == [{"message": "paid by UPI"}]
        assert sale["paymentStatus"] == "pending"
        assert controller.notifier.last.message == "Sale created successfully"

    def test_form_values_override_autofill(self, controller, services, scheduler):
        controller.set_short_code("abc123")
        scheduler.flush()
        controller.create(make_form(owner="o2", SalesPerson="u2"))
        sale = services[0].create_tag_sale.call_args.args[0]
        assert sale["owner"] == "o2"
        assert sale["SalesPerson"] == "u2"

    def test_affiliate_defaults_to_self(self, services, scheduler):
        sale_service, tag_service = services
        tag_service.verify_tag_by_short_code.return_value = TagVerifyResult(id="t1", short_code="abc123", owner_id="o1")
        controller = SaleFormController(
            sale_service, tag_service, current_user=CurrentUser(id="u1", role="Affiliate"),
            debouncer=Debouncer(600, scheduler),
        )
        controller.set_short_code("abc123")
        scheduler.flush()
        controller.create(make_form())
        assert sale_service.create_tag_sale.call_args.args[0]["SalesPerson"] == "u1"

    def test_upstream_failure_notifies(self, controller, services, scheduler):
        services[0].create_tag_sale.side_effect = ServiceError(400, "UPSTREAM_ERROR", "Tag already sold")
        controller.set_short_code("abc123")
        scheduler.flush()
        assert controller.submit(make_form()) is None
        assert controller.notifier.last.message == "Tag already sold"


class TestSaleFormHelpers:
    def test_commission_suggestion(self, controller):
        controller.set_amount(1000, "Affiliate")
        assert controller.values["commisionAmountOfSalesPerson"] == pytest.approx(100)
        assert controller.values["commisionAmountOfOwner"] == pytest.approx(40)

    def test_sales_persons_only_loaded_for_admins(self, controller, services):
        controller.load_sales_persons()
        services[1].get_user_list_for_assignment.assert_not_called()

    @pytest.mark.parametrize("role", ["Super Admin", "Support Admin", "Admin"])
    def test_sales_persons_for_admin(self, services, role):
        sale_service, tag_service = services
        tag_service.get_user_list_for_assignment.return_value = {"users": [{"_id": "u1"}]}
        controller = SaleFormController(sale_service, tag_service, current_user=CurrentUser(id="a1", role=role))
        controller.load_sales_persons()
        assert controller.sales_persons == [{"_id": "u1"}]

    def test_invalid_amount_rejected_by_form(self):
        with pytest.raises(ValueError):
            make_form(totalSaleAmount=0)
