"""Short-code verification in the sale forms."""

from unittest.mock import MagicMock

import pytest

from qrtag_admin.models.tag import TagVerifyResult
from qrtag_admin.services.errors import ServiceError, not_found
from qrtag_admin.workflows.debounce import Debouncer
from qrtag_admin.workflows.tag_verification import ShortCodeVerifier


VERIFIED = TagVerifyResult(id="t1", short_code="abc123", owner_id="o1", assigned_to="u9")


@pytest.fixture
def tag_service():
    service = MagicMock()
    service.verify_tag_by_short_code.return_value = VERIFIED
    return service


@pytest.fixture
def fields():
    return {}


@pytest.fixture
def verifier(tag_service, scheduler, fields):
    return ShortCodeVerifier(tag_service, set_fields=fields.update, debouncer=Debouncer(600, scheduler))


class TestShortCodeVerifier:
    def test_verifies_after_debounce(self, verifier, tag_service, scheduler, fields):
        verifier.on_input("abc123")
        tag_service.verify_tag_by_short_code.assert_not_called()
        assert scheduler.timers[0].delay == 0.6

        scheduler.flush()
        tag_service.verify_tag_by_short_code.assert_called_once_with("abc123")
        assert verifier.verified_tag == VERIFIED
        assert verifier.success == "Tag abc123 verified successfully"
        assert fields == {"owner": "o1", "SalesPerson": "u9"}

    def test_only_last_input_is_verified(self, verifier, tag_service, scheduler):
        verifier.on_input("abc")
        verifier.on_input("abc1")
        verifier.on_input("abc12")
        scheduler.flush()
        tag_service.verify_tag_by_short_code.assert_called_once_with("abc12")

    @pytest.mark.parametrize("value", ["a", "ab", " ab "])
    def test_short_input_sends_no_request(self, verifier, tag_service, scheduler, value):
        verifier.on_input(value)
        scheduler.flush()
        tag_service.verify_tag_by_short_code.assert_not_called()
        assert verifier.verified_tag is None

    def test_same_code_as_verified_sends_no_request(self, verifier, tag_service, scheduler):
        verifier.on_input("abc123")
        scheduler.flush()
        verifier.on_input("abc123")
        verifier.on_input(" abc123 ")
        scheduler.flush()
        assert tag_service.verify_tag_by_short_code.call_count == 1

    def test_short_input_cancels_pending_lookup(self, verifier, tag_service, scheduler):
        verifier.on_input("abc1")
        verifier.on_input("ab")
        scheduler.flush()
        tag_service.verify_tag_by_short_code.assert_not_called()

    def test_clearing_input_resets_state(self, verifier, scheduler, fields):
        verifier.on_input("abc123")
        scheduler.flush()
        verifier.on_input("")
        assert verifier.verified_tag is None
        assert verifier.success is None
        assert verifier.error is None
        assert fields["owner"] is None

    def test_failure_sets_error_and_clears_owner(self, verifier, tag_service, scheduler, fields):
        tag_service.verify_tag_by_short_code.side_effect = not_found("Tag ID missing in verification response")
        fields["owner"] = "stale"
        verifier.on_input("zzz999")
        scheduler.flush()
        assert verifier.verified_tag is None
        assert verifier.error == "Tag ID missing in verification response"
        assert fields["owner"] is None
        assert verifier.loading is False

    def test_upstream_error_message(self, verifier, tag_service):
        tag_service.verify_tag_by_short_code.side_effect = ServiceError(404, "UPSTREAM_ERROR", "Error 404: Not Found")
        assert verifier.verify("nope") is None
        assert verifier.error == "Error 404: Not Found"

    def test_dispose_cancels_timer(self, verifier, tag_service, scheduler):
        verifier.on_input("abc123")
        verifier.dispose()
        scheduler.flush()
        tag_service.verify_tag_by_short_code.assert_not_called()


class TestDebouncer:
    def test_pending_flag(self, scheduler):
        debouncer = Debouncer(400, scheduler)
        calls = []
        debouncer.call(lambda: calls.append(1))
        assert debouncer.pending
        scheduler.flush()
        assert calls == [1]
        assert not debouncer.pending

    def test_reschedule_cancels_previous(self, scheduler):
        debouncer = Debouncer(400, scheduler)
        calls = []
        debouncer.call(lambda: calls.append("first"))
        debouncer.call(lambda: calls.append("second"))
        assert scheduler.timers[0].cancelled
        scheduler.flush()
        assert calls == ["second"]
