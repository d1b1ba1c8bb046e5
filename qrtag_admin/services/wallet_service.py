import logging
from typing import Any, Dict, Optional

from qrtag_admin.config import ApiConfig
from qrtag_admin.models.wallet import ManualCreditForm, TransactionStatusForm, WithdrawForm
from qrtag_admin.services.backend_client import BackendClient, Endpoint
from qrtag_admin.services.errors import invalid_response, validation_error
from qrtag_admin.services.normalizers import normalize_transaction, normalize_wallet_response, unwrap_data
from qrtag_admin.services.params import as_number

logger = logging.getLogger(__name__)


def available_balance(wallet: Dict[str, Any]) -> float:
    summary = wallet.get("summary") or {}
    return as_number(summary.get("availableBalance")) or 0


def check_withdrawal(form: WithdrawForm, balance: Any) -> None:
    """Withdraw dialog rule: the amount may not exceed the available balance."""
    balance = as_number(balance) or 0
    if not balance or form.amount > balance:
        raise validation_error(
            "Withdrawal amount cannot exceed available balance",
            field="amount",
            availableBalance=balance,
        )


class WalletService:
    """
    Commission wallets.

    Transactions form an append-only ledger upstream: after creation only the
    status (and notes) of a transaction can change.
    """

    def __init__(self, client: BackendClient) -> None:
        self.client = client

    def _record(self, data: Any, message: str) -> Dict[str, Any]:
        raw = unwrap_data(data)
        if not isinstance(raw, dict) or not raw:
            raise invalid_response(message)
        return raw

    def get_my_wallet(self, page: int = 1, limit: Optional[int] = None) -> Dict[str, Any]:
        params = {"page": page, "limit": limit or ApiConfig.WALLET_PAGE_SIZE}
        data = self.client.get(Endpoint.WALLET_ME, params).data
        return normalize_wallet_response(self._record(data, "Invalid wallet response"))

    def get_user_wallet(self, user_id: str, page: int = 1, limit: Optional[int] = None) -> Dict[str, Any]:
        if not user_id:
            raise validation_error("User ID is required", field="userId")
        params = {"page": page, "limit": limit or ApiConfig.WALLET_PAGE_SIZE}
        data = self.client.get(f"{Endpoint.WALLET_USER}/{user_id}", params).data
        return normalize_wallet_response(self._record(data, "Invalid wallet response"))

    def request_withdrawal(self, form: WithdrawForm) -> Dict[str, Any]:
        if not form.amount or form.amount <= 0:
            raise validation_error("Withdrawal amount must be greater than zero", field="amount")
        data = self.client.post(Endpoint.WALLET_WITHDRAW, form.to_payload()).data
        transaction = normalize_transaction(self._record(data, "Invalid withdrawal response"))
        logger.info("Withdrawal of %s requested", form.amount)
        return transaction

    def update_transaction_status(self, transaction_id: str, form: TransactionStatusForm) -> Dict[str, Any]:
        if not transaction_id:
            raise validation_error("Transaction ID is required", field="transactionId")
        data = self.client.patch(f"{Endpoint.WALLET_TRANSACTION}/{transaction_id}", form.to_payload()).data
        transaction = normalize_transaction(self._record(data, "Invalid transaction response"))
        logger.info("Transaction %s set to %s", transaction_id, form.status)
        return transaction

    def create_manual_credit(self, form: ManualCreditForm) -> Dict[str, Any]:
        data = self.client.post(Endpoint.WALLET_MANUAL_CREDIT, form.to_payload()).data
        transaction = normalize_transaction(self._record(data, "Invalid credit response"))
        logger.info("Manual credit of %s for user %s", form.amount, form.user_id)
        return transaction
