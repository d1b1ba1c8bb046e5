import pytest
from pydantic import ValidationError

from qrtag_admin.models.wallet import ManualCreditForm, TransactionStatusForm, WithdrawForm
from qrtag_admin.services.backend_client import ApiResponse, Endpoint
from qrtag_admin.services.errors import ServiceError
from qrtag_admin.services.wallet_service import WalletService, available_balance, check_withdrawal


WALLET = {
    "summary": {
        "completedSales": 5000,
        "pendingSales": 1000,
        "totalWithdrawn": 2000,
        "pendingWithdrawals": 500,
        "availableBalance": 2500,
    },
    "transactions": [{"_id": "w1", "type": "credit", "amount": 400, "status": "completed"}],
    "pagination": {"page": 1, "limit": 20, "total": 1},
}


class TestWithdrawRules:
    def test_amount_must_be_positive(self):
        with pytest.raises(ValidationError) as exc_info:
            WithdrawForm(amount=0)
        assert "Withdrawal amount must be greater than zero" in str(exc_info.value)

    def test_amount_above_balance(self):
        with pytest.raises(ServiceError) as exc_info:
            check_withdrawal(WithdrawForm(amount=3000), available_balance(WALLET))
        assert exc_info.value.message == "Withdrawal amount cannot exceed available balance"

    def test_amount_within_balance(self):
        check_withdrawal(WithdrawForm(amount=2500), 2500)

    def test_available_balance_missing_summary(self):
        assert available_balance({"summary": None}) == 0

    def test_string_balance_from_upstream(self):
        wallet = {"summary": {"availableBalance": "2500"}}
        assert available_balance(wallet) == 2500
        check_withdrawal(WithdrawForm(amount=2000), available_balance(wallet))
        with pytest.raises(ServiceError):
            check_withdrawal(WithdrawForm(amount=3000), "2500")

    def test_non_numeric_balance_blocks_withdrawal(self):
        with pytest.raises(ServiceError) as exc_info:
            check_withdrawal(WithdrawForm(amount=10), available_balance({"summary": {"availableBalance": "n/a"}}))
        assert exc_info.value.details["availableBalance"] == 0


class TestWalletService:
    def test_my_wallet(self, client):
        client.get.return_value = ApiResponse(data=WALLET)
        wallet = WalletService(client).get_my_wallet()
        client.get.assert_called_once_with(Endpoint.WALLET_ME, {"page": 1, "limit": 20})
        assert wallet["summary"]["availableBalance"] == 2500
        assert wallet["transactions"][0]["_id"] == "w1"

    def test_user_wallet(self, client):
        client.get.return_value = ApiResponse(data=WALLET)
        WalletService(client).get_user_wallet("u1", page=2, limit=5)
        client.get.assert_called_once_with(f"{Endpoint.WALLET_USER}/u1", {"page": 2, "limit": 5})

    def test_invalid_wallet_response(self, client):
        client.get.return_value = ApiResponse(data=None)
        with pytest.raises(ServiceError) as exc_info:
            WalletService(client).get_my_wallet()
        assert exc_info.value.message == "Invalid wallet response"

    def test_withdraw(self, client):
        client.post.return_value = ApiResponse(data={"_id": "w2", "type": "debit", "amount": 100, "status": "pending"})
        txn = WalletService(client).request_withdrawal(WithdrawForm(amount=100, notes="UPI"))
        client.post.assert_called_once_with(Endpoint.WALLET_WITHDRAW, {"amount": 100, "notes": "UPI"})
        assert txn["status"] == "pending"

    def test_manual_credit(self, client):
        client.post.return_value = ApiResponse(data={"_id": "w3", "type": "credit", "amount": 50})
        form = ManualCreditForm.model_validate({"userId": "u1", "amount": 50, "description": "Bonus"})
        WalletService(client).create_manual_credit(form)
        client.post.assert_called_once_with(
            Endpoint.WALLET_MANUAL_CREDIT, {"userId": "u1", "amount": 50, "description": "Bonus"}
        )

    def test_manual_credit_requires_user(self):
        with pytest.raises(ValidationError):
            ManualCreditForm.model_validate({"userId": " ", "amount": 50})

    def test_update_transaction_status_sends_status_and_notes_only(self, client):
        client.patch.return_value = ApiResponse(data={"_id": "w2", "status": "completed"})
        WalletService(client).update_transaction_status("w2", TransactionStatusForm(status="completed", notes="paid"))
        client.patch.assert_called_once_with(
            f"{Endpoint.WALLET_TRANSACTION}/w2", {"status": "completed", "notes": "paid"}
        )
