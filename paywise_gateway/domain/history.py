"""Payment history rendering and prediction inputs derived from a client's ledger"""

from datetime import date, datetime
from typing import Iterable, Sequence

from paywise_gateway.domain.models import PredictionRequest, SummaryRequest, TransactionRecord, TransactionStatus
from paywise_gateway.utils.date_utils import as_date, days_from_now

NO_HISTORY = "No payment history."

OUTSTANDING_STATUSES = (TransactionStatus.PENDING, TransactionStatus.OVERDUE)


def format_amount(amount: float) -> str:
    """Render integral amounts without a trailing .0"""
    amount = float(amount)
    return str(int(amount)) if amount.is_integer() else str(amount)


def format_transaction_line(txn: TransactionRecord) -> str:
    status = TransactionStatus(txn.status).value
    return (
        f"Date: {as_date(txn.date).isoformat()}, Amount: {format_amount(txn.amount)}, "
        f"Status: {status}, Desc: {txn.description}"
    )


def format_payment_history(transactions: Sequence[TransactionRecord]) -> str:
    """
    Render a client's ledger as the text fed to the AI models.

    Pure function of the transaction sequence: one line per transaction in
    stored order, or the fixed placeholder when there are none.
    """
    if not transactions:
        return NO_HISTORY
    return "\n".join(format_transaction_line(t) for t in transactions)


def outstanding_amount(transactions: Iterable[TransactionRecord]) -> float:
    """Sum of amounts still owed (pending or overdue)"""
    return sum(t.amount for t in transactions if TransactionStatus(t.status) in OUTSTANDING_STATUSES)


def representative_amount(transactions: Iterable[TransactionRecord], default: float) -> float:
    """Outstanding amount, falling back to `default` when nothing is owed"""
    return outstanding_amount(transactions) or default


def describe_client(created_at: date | datetime, email: str, phone: str) -> str:
    return f"Client since {as_date(created_at).isoformat()}. Email: {email}, Phone: {phone}"


def build_prediction_request(
    client,
    default_amount: float,
    due_days: int,
    now: datetime | None = None,
) -> PredictionRequest:
    """
    Assemble the risk prediction input for a client.

    The due date is a placeholder `due_days` ahead of now and is not tied
    to any real payment request.
    """
    return PredictionRequest(
        client_id=client.id,
        payment_history=client.payment_history,
        transaction_amount=representative_amount(client.transactions, default_amount),
        due_date=days_from_now(due_days, now).isoformat(),
        client_details=describe_client(client.created_at, client.email, client.phone),
    )


def build_summary_request(client) -> SummaryRequest:
    return SummaryRequest(client_id=client.id, payment_history=client.payment_history)
