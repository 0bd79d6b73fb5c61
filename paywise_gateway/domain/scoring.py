"""Risk scoring helpers - score bands and the offline heuristic used when no model is configured"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional

from paywise_gateway.domain.models import RiskPrediction, TransactionStatus
from paywise_gateway.domain.history import format_amount

_STATUS_PATTERN = re.compile(r"Status: (\w+)")

RISK_BANDS = ("very_low", "low", "medium", "high", "very_high")


@dataclass
class HistoryFactors:
    """Counts extracted from rendered payment history text"""

    total: int
    paid: int
    failed: int
    overdue: int
    pending: int


def analyze_history(payment_history: str) -> HistoryFactors:
    """
    Count transaction outcomes in rendered history text.

    Works on the text rather than the ledger so the heuristic sees exactly
    what a live model would see. The placeholder text yields all zeros.
    """
    counts: Counter = Counter()
    for match in _STATUS_PATTERN.finditer(payment_history or ""):
        counts[match.group(1)] += 1

    return HistoryFactors(
        total=sum(counts[s.value] for s in TransactionStatus),
        paid=counts[TransactionStatus.PAID.value],
        failed=counts[TransactionStatus.FAILED.value],
        overdue=counts[TransactionStatus.OVERDUE.value],
        pending=counts[TransactionStatus.PENDING.value],
    )


def calculate_heuristic_score(factors: HistoryFactors, transaction_amount: float) -> float:
    """
    Estimate default likelihood from 0.0 (safe) to 100.0 (very likely to default).

    Scoring weights:
    - 50%: Share of failed or overdue entries
    - 20%: Share of entries still pending
    - 15%: Outstanding amount, capped at 1000
    - 15%: Thin file penalty, fading out at 3 entries
    """
    amount_baseline = 1000.0
    thin_file_entries = 3

    if factors.total:
        failure_share = (factors.failed + factors.overdue) / factors.total
        pending_share = factors.pending / factors.total
    else:
        failure_share = 0.0
        pending_share = 0.0

    amount_share = min(max(transaction_amount, 0.0) / amount_baseline, 1.0)
    thin_share = max(thin_file_entries - factors.total, 0) / thin_file_entries

    score = 50 * failure_share + 20 * pending_share + 15 * amount_share + 15 * thin_share
    return round(min(max(score, 0.0), 100.0), 1)


def describe_risk_factors(factors: HistoryFactors, transaction_amount: float) -> str:
    if not factors.total:
        return f"No payment history on record. Outstanding amount considered: {format_amount(transaction_amount)}."

    notes: List[str] = []
    if factors.failed or factors.overdue:
        notes.append(f"{factors.failed} failed and {factors.overdue} overdue of {factors.total} payments")
    else:
        notes.append(f"No failed or overdue payments across {factors.total} entries")
    if factors.pending:
        notes.append(f"{factors.pending} payments still pending")
    if factors.total < 3:
        notes.append("limited history")
    notes.append(f"outstanding amount considered: {format_amount(transaction_amount)}")
    return "; ".join(notes) + "."


def summarize_history(factors: HistoryFactors) -> str:
    if not factors.total:
        return "This client has no payment history yet."

    summary = (
        f"{factors.total} payments on record: {factors.paid} paid, {factors.failed} failed, "
        f"{factors.overdue} overdue, {factors.pending} pending."
    )
    if factors.failed or factors.overdue:
        summary += " Missed payments suggest follow-up before extending further credit."
    elif factors.paid == factors.total:
        summary += " The client has paid every request so far."
    return summary


def heuristic_prediction(payment_history: str, transaction_amount: float) -> RiskPrediction:
    """Offline stand-in for the prediction model"""
    factors = analyze_history(payment_history)
    return RiskPrediction(
        prediction_score=calculate_heuristic_score(factors, transaction_amount),
        risk_factors=describe_risk_factors(factors, transaction_amount),
    )


def clamp_score(score: float) -> float:
    """Force a model score into [0, 100]"""
    return min(max(float(score), 0.0), 100.0)


def risk_band(score: Optional[float]) -> Optional[str]:
    """
    Map prediction score to a dashboard band.

    Bands (upper bounds inclusive):
    - 0 - 20:  very_low
    - 21 - 40: low
    - 41 - 60: medium
    - 61 - 80: high
    - 81+:     very_high

    Returns None for clients that have not been scored yet.
    """
    if score is None:
        return None
    if score <= 20:
        return "very_low"
    elif score <= 40:
        return "low"
    elif score <= 60:
        return "medium"
    elif score <= 80:
        return "high"
    else:
        return "very_high"
