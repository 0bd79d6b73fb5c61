"""Dashboard aggregates over clients and payment requests"""

from datetime import date
from typing import Iterable, Optional

from paywise_gateway.domain.models import PaymentStatus, PortfolioSummary
from paywise_gateway.domain.scoring import RISK_BANDS, risk_band


def build_portfolio_summary(clients: Iterable, payments: Iterable, as_of: date) -> PortfolioSummary:
    """
    Aggregate income, open dues and risk distribution.

    - Income counts paid requests only
    - Dues count requests still awaiting payment (link_sent, pending_link)
    - Unscored clients are reported separately instead of counting as 0
    """
    clients = list(clients)
    payments = list(payments)

    total_income = sum(p.amount for p in payments if PaymentStatus(p.status) is PaymentStatus.PAID)
    open_payments = [p for p in payments if PaymentStatus(p.status).is_open]

    distribution = {band: 0 for band in RISK_BANDS}
    scores = []
    for client in clients:
        band = risk_band(client.prediction_score)
        if band is None:
            continue
        distribution[band] += 1
        scores.append(client.prediction_score)

    average: Optional[float] = round(sum(scores) / len(scores), 1) if scores else None

    return PortfolioSummary(
        total_income=total_income,
        pending_dues=sum(p.amount for p in open_payments),
        pending_count=len(open_payments),
        average_prediction_score=average,
        risk_distribution=distribution,
        unscored_clients=len(clients) - len(scores),
        client_count=len(clients),
        payment_count=len(payments),
        as_of=as_of,
    )
