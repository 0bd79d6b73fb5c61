"""Unit tests for payment history rendering and prediction inputs"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from paywise_gateway.domain.history import (
    NO_HISTORY,
    build_prediction_request,
    build_summary_request,
    format_amount,
    format_payment_history,
    outstanding_amount,
    representative_amount,
)
from paywise_gateway.domain.models import TransactionStatus


def make_txn(amount, status, description="Invoice", day=1):
    return SimpleNamespace(
        amount=amount,
        date=datetime(2026, 3, day, 9, 30, tzinfo=timezone.utc),
        status=status,
        description=description,
    )


def make_client(transactions, history=None):
    return SimpleNamespace(
        id="client_1",
        email="ada@example.com",
        phone="+15551234567",
        created_at=datetime(2026, 1, 15, tzinfo=timezone.utc),
        transactions=transactions,
        payment_history=history if history is not None else format_payment_history(transactions),
    )


def test_empty_history_uses_placeholder():
    """Test no transactions renders the fixed placeholder"""
    assert format_payment_history([]) == NO_HISTORY == "No payment history."


def test_history_one_line_per_transaction_in_order():
    """Test rendering keeps stored order and the Date, Amount, Status, Desc layout"""
    transactions = [
        make_txn(250, TransactionStatus.PAID, "Website build", day=2),
        make_txn(99.5, TransactionStatus.FAILED, "Hosting", day=1),
    ]

    history = format_payment_history(transactions)

    assert history.split("\n") == [
        "Date: 2026-03-02, Amount: 250, Status: paid, Desc: Website build",
        "Date: 2026-03-01, Amount: 99.5, Status: failed, Desc: Hosting",
    ]


def test_history_is_a_pure_function_of_transactions():
    """Test identical ledgers render identically"""
    first = [make_txn(10, "pending"), make_txn(20, "overdue")]
    second = [make_txn(10, "pending"), make_txn(20, "overdue")]
    assert format_payment_history(first) == format_payment_history(second)


def test_format_amount_drops_trailing_zero():
    assert format_amount(100.0) == "100"
    assert format_amount(12.75) == "12.75"


def test_outstanding_amount_counts_pending_and_overdue_only():
    """Test paid and failed entries are not owed"""
    transactions = [
        make_txn(100, TransactionStatus.PENDING),
        make_txn(40, TransactionStatus.OVERDUE),
        make_txn(500, TransactionStatus.PAID),
        make_txn(70, TransactionStatus.FAILED),
    ]
    assert outstanding_amount(transactions) == 140


def test_representative_amount_uses_pending_sum():
    """Test a single pending 100 yields 100"""
    assert representative_amount([make_txn(100, TransactionStatus.PENDING)], default=100.0) == 100


def test_representative_amount_defaults_when_nothing_owed():
    """Test fallback applies when no pending/overdue amount exists"""
    assert representative_amount([], default=100.0) == 100.0
    assert representative_amount([make_txn(900, TransactionStatus.PAID)], default=100.0) == 100.0


def test_build_prediction_request():
    """Test prediction input assembly"""
    now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
    client = make_client([make_txn(300, TransactionStatus.OVERDUE)])

    request = build_prediction_request(client, default_amount=100.0, due_days=30, now=now)

    assert request.client_id == "client_1"
    assert request.payment_history == client.payment_history
    assert request.transaction_amount == 300
    assert request.due_date == (now + timedelta(days=30)).isoformat()
    assert request.client_details == "Client since 2026-01-15. Email: ada@example.com, Phone: +15551234567"


def test_build_summary_request():
    client = make_client([], history=NO_HISTORY)
    request = build_summary_request(client)
    assert request.client_id == "client_1"
    assert request.payment_history == NO_HISTORY
