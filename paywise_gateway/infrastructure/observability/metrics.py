"""Prometheus metrics for payment requests, notifications, AI refreshes and provider latency"""

from typing import Optional

from prometheus_client import Counter, Histogram

from paywise_gateway.domain.models import DispatchOutcome
from paywise_gateway.domain.scoring import risk_band

# Payment request metrics
payment_request_counter = Counter(
    "paywise_payment_requests_total",
    "Payment requests handled",
    ["outcome"],  # created | link_failed
)

notification_counter = Counter(
    "paywise_notifications_total",
    "Payment request notifications by channel",
    ["channel", "outcome"],  # sms | email, sent | failed
)

payment_status_counter = Counter(
    "paywise_payment_status_changes_total",
    "Payment status updates by new status",
    ["status"],
)

# AI metrics
ai_refresh_counter = Counter(
    "paywise_ai_refresh_total",
    "Client AI insight refreshes",
    ["outcome"],  # success | failure
)

risk_band_counter = Counter(
    "paywise_client_risk_band_total",
    "Prediction scores produced by band",
    ["band"],
)

# Provider metrics
provider_latency_histogram = Histogram(
    "provider_call_duration_seconds",
    "External provider call latency",
    ["provider"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_dispatch(outcome: DispatchOutcome) -> None:
    """Record per-channel notification results"""
    for channel, sent in (("sms", outcome.sms_sent), ("email", outcome.email_sent)):
        if sent is None:
            continue
        notification_counter.labels(channel=channel, outcome="sent" if sent else "failed").inc()


def record_ai_refresh(success: bool, prediction_score: Optional[float] = None) -> None:
    ai_refresh_counter.labels(outcome="success" if success else "failure").inc()
    band = risk_band(prediction_score)
    if band is not None:
        risk_band_counter.labels(band=band).inc()
