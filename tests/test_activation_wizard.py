"""Two-step OTP activation wizard."""

from unittest.mock import MagicMock

import pytest

from qrtag_admin.services.errors import ServiceError
from qrtag_admin.workflows.activation import ActivationStep, ActivationWizard


OWNER_VALUES = {"fullName": "Abhilekh Singh", "vehicleNumber": "MH12AB1234", "vehicleType": "car"}


@pytest.fixture
def tag_service():
    service = MagicMock()
    service.request_activation_otp.return_value = {"otp": "123456", "expiresAt": "2025-11-15T14:27:09Z", "message": "OTP sent"}
    service.confirm_tag_activation.return_value = {"message": "Tag activated"}
    return service


class TestRequestOtp:
    def test_invalid_phone_stays_on_first_step(self, tag_service):
        wizard = ActivationWizard(tag_service, "abc123")
        assert wizard.request_otp("12345") is False
        assert wizard.step == ActivationStep.RequestOtp
        assert wizard.notifier.last.message == "Please enter a valid 10-digit phone number"
        tag_service.request_activation_otp.assert_not_called()

    def test_success_moves_to_confirm_and_prefills_otp(self, tag_service):
        wizard = ActivationWizard(tag_service, "abc123")
        assert wizard.request_otp("9876543210") is True
        tag_service.request_activation_otp.assert_called_once_with("abc123", "9876543210")
        assert wizard.step == ActivationStep.ConfirmActivation
        assert wizard.prefilled_otp == "123456"
        assert wizard.expires_at == "2025-11-15T14:27:09Z"
        assert wizard.notifier.last.message == "OTP sent"

    def test_failure_notifies(self, tag_service):
        tag_service.request_activation_otp.side_effect = ServiceError(400, "UPSTREAM_ERROR", "Tag already activated")
        wizard = ActivationWizard(tag_service, "abc123")
        assert wizard.request_otp("9876543210") is False
        assert wizard.step == ActivationStep.RequestOtp
        assert wizard.notifier.last.level == "error"
        assert wizard.loading is False


class TestConfirm:
    def test_requires_otp_step_first(self, tag_service):
        wizard = ActivationWizard(tag_service, "abc123")
        assert wizard.confirm({**OWNER_VALUES, "otp": "123456"}) is False
        tag_service.confirm_tag_activation.assert_not_called()

    def test_uses_prefilled_otp_and_closes(self, tag_service):
        on_success, on_close = MagicMock(), MagicMock()
        wizard = ActivationWizard(tag_service, "abc123", on_success=on_success, on_close=on_close)
        wizard.request_otp("9876543210")

        assert wizard.confirm(OWNER_VALUES) is True
        payload = tag_service.confirm_tag_activation.call_args.args[0]
        assert payload["otp"] == "123456"
        assert payload["shortCode"] == "abc123"
        assert payload["phone"] == "9876543210"
        assert payload["preferences"] == {"sms": True, "whatsapp": True, "call": True}
        on_success.assert_called_once()
        on_close.assert_called_once()
        assert wizard.step == ActivationStep.RequestOtp
        assert wizard.phone is None

    def test_bad_otp_rejected_locally(self, tag_service):
        wizard = ActivationWizard(tag_service, "abc123")
        wizard.request_otp("9876543210")
        assert wizard.confirm({**OWNER_VALUES, "otp": "12ab"}) is False
        assert wizard.notifier.last.message == "OTP must be 6 digits"
        tag_service.confirm_tag_activation.assert_not_called()

    def test_missing_vehicle_type(self, tag_service):
        wizard = ActivationWizard(tag_service, "abc123")
        wizard.request_otp("9876543210")
        assert wizard.confirm({**OWNER_VALUES, "vehicleType": ""}) is False
        assert wizard.notifier.last.message == "Vehicle type is required"

    def test_upstream_failure_stays_on_confirm_step(self, tag_service):
        tag_service.confirm_tag_activation.side_effect = ServiceError(400, "UPSTREAM_ERROR", "Invalid OTP")
        wizard = ActivationWizard(tag_service, "abc123")
        wizard.request_otp("9876543210")
        assert wizard.confirm(OWNER_VALUES) is False
        assert wizard.step == ActivationStep.ConfirmActivation
        assert wizard.notifier.last.message == "Invalid OTP"

    def test_back(self, tag_service):
        wizard = ActivationWizard(tag_service, "abc123")
        wizard.request_otp("9876543210")
        wizard.back()
        assert wizard.step == ActivationStep.RequestOtp
