"""
Two-step tag activation.

Step 0 asks the upstream API to send an OTP to the owner's phone. Step 1
confirms the OTP together with the owner and vehicle details. Some backend
environments echo the OTP in the step-0 response; when they do it is
prefilled into the confirm form. No expiry is enforced here, `expires_at` is
only displayed.
"""

import logging
from enum import IntEnum
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from qrtag_admin.models.common import validation_message
from qrtag_admin.models.tag import ConfirmActivationForm, RequestOtpForm
from qrtag_admin.services.errors import ServiceError
from qrtag_admin.services.tag_service import TagService
from qrtag_admin.workflows.notifications import Notifier

logger = logging.getLogger(__name__)


class ActivationStep(IntEnum):
    RequestOtp = 0
    ConfirmActivation = 1


class ActivationWizard:
    def __init__(
        self,
        tag_service: TagService,
        short_code: str,
        notifier: Optional[Notifier] = None,
        on_success: Optional[Callable[[], None]] = None,
        on_close: Optional[Callable[[], None]] = None,
    ) -> None:
        self.tag_service = tag_service
        self.short_code = short_code
        self.notifier = notifier or Notifier()
        self.on_success = on_success
        self.on_close = on_close

        self.step = ActivationStep.RequestOtp
        self.loading = False
        self.phone: Optional[str] = None
        self.otp_response: Optional[Dict[str, Any]] = None
        self.prefilled_otp: Optional[str] = None

    @property
    def expires_at(self) -> Optional[str]:
        return (self.otp_response or {}).get("expiresAt")

    def request_otp(self, phone: str) -> bool:
        """Step 0. Returns True when the wizard moved on to confirmation."""
        try:
            form = RequestOtpForm(phone=phone)
        except ValidationError as exc:
            self.notifier.error(validation_message(exc))
            return False

        self.loading = True
        try:
            response = self.tag_service.request_activation_otp(self.short_code, form.phone)
        except ServiceError as exc:
            self.notifier.error(exc.message or "Failed to send OTP")
            return False
        finally:
            self.loading = False

        self.phone = form.phone
        self.otp_response = response
        self.notifier.success(response.get("message") or "OTP sent successfully")
        self.step = ActivationStep.ConfirmActivation
        if response.get("otp"):
            self.prefilled_otp = str(response["otp"])
        return True

    def confirm(self, values: Dict[str, Any]) -> bool:
        """Step 1. `values` holds otp, fullName, vehicleNumber, vehicleType and optional extras."""
        if self.step != ActivationStep.ConfirmActivation or not self.phone:
            self.notifier.error("Request an OTP before confirming activation")
            return False

        data = dict(values)
        if not data.get("otp") and self.prefilled_otp:
            data["otp"] = self.prefilled_otp
        try:
            form = ConfirmActivationForm.model_validate(data)
        except ValidationError as exc:
            self.notifier.error(validation_message(exc))
            return False

        self.loading = True
        try:
            response = self.tag_service.confirm_tag_activation(form.to_request(self.short_code, self.phone))
        except ServiceError as exc:
            # stays on the confirm step; the user may go back manually
            self.notifier.error(exc.message or "Failed to activate tag")
            return False
        finally:
            self.loading = False

        self.notifier.success(response.get("message") or "Tag activated successfully")
        if self.on_success:
            self.on_success()
        self.close()
        return True

    def back(self) -> None:
        self.step = ActivationStep.RequestOtp

    def reset(self) -> None:
        self.step = ActivationStep.RequestOtp
        self.phone = None
        self.otp_response = None
        self.prefilled_otp = None
        self.loading = False

    def close(self) -> None:
        self.reset()
        if self.on_close:
            self.on_close()
