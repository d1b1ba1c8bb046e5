from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from qrtag_admin.config import ApiConfig
from qrtag_admin.dependencies.services import get_wallet_service
from qrtag_admin.models.wallet import ManualCreditForm, TransactionStatusForm, WithdrawForm
from qrtag_admin.services.errors import ServiceError, to_http_exception
from qrtag_admin.services.wallet_service import WalletService, available_balance, check_withdrawal

router = APIRouter(
    prefix="/api/v1/wallet",
    tags=["wallet"]
)


@router.get("/me")
def get_my_wallet(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=ApiConfig.WALLET_PAGE_SIZE, ge=1, le=500),
    service: WalletService = Depends(get_wallet_service),
) -> Dict[str, Any]:
    """
    Wallet of the signed-in user.

    Returns:
    - summary: completedSales, pendingSales, totalWithdrawn, pendingWithdrawals, availableBalance
    - transactions: newest first, as returned upstream
    - pagination
    """
    try:
        return service.get_my_wallet(page=page, limit=limit)
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.get("/users/{user_id}")
def get_user_wallet(
    user_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=ApiConfig.WALLET_PAGE_SIZE, ge=1, le=500),
    service: WalletService = Depends(get_wallet_service),
) -> Dict[str, Any]:
    try:
        return service.get_user_wallet(user_id, page=page, limit=limit)
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.post("/withdraw", status_code=201)
def request_withdrawal(payload: WithdrawForm, service: WalletService = Depends(get_wallet_service)) -> Dict[str, Any]:
    """
    Request a withdrawal from the signed-in user's wallet.

    The amount must be positive and may not exceed the available balance.
    The transaction is created as pending.
    """
    try:
        wallet = service.get_my_wallet()
        check_withdrawal(payload, available_balance(wallet))
        return {"transaction": service.request_withdrawal(payload)}
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.post("/manual-credit", status_code=201)
def create_manual_credit(payload: ManualCreditForm, service: WalletService = Depends(get_wallet_service)) -> Dict[str, Any]:
    try:
        return {"transaction": service.create_manual_credit(payload)}
    except ServiceError as exc:
        raise to_http_exception(exc)


@router.patch("/transactions/{transaction_id}")
def update_transaction_status(
    transaction_id: str,
    payload: TransactionStatusForm,
    service: WalletService = Depends(get_wallet_service),
) -> Dict[str, Any]:
    """Approve or cancel a transaction. Only status and notes can change."""
    try:
        return {"transaction": service.update_transaction_status(transaction_id, payload)}
    except ServiceError as exc:
        raise to_http_exception(exc)
