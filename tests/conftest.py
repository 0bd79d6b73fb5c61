"""Pytest fixtures for testing"""

import pytest
from types import SimpleNamespace
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session

from paywise_gateway.api.dependencies import (
    get_email_client,
    get_insight_client,
    get_payment_link_client,
    get_sms_client,
)
from paywise_gateway.api.main import create_app
from paywise_gateway.config import settings
from paywise_gateway.domain.exceptions import AIProviderError, NotificationError, PaymentLinkError
from paywise_gateway.domain.models import (
    EmailMessage,
    HistorySummary,
    PaymentLink,
    PaymentLinkRequest,
    PredictionRequest,
    RiskPrediction,
    SummaryRequest,
)
from paywise_gateway.infrastructure.database.models import Base
from paywise_gateway.infrastructure.database.session import build_engine, get_db
from paywise_gateway.services.insights import InsightRefresher


class FakeSMSClient:
    """Records messages instead of calling Twilio"""

    def __init__(self):
        self.sent: List[tuple] = []
        self.fail = False

    async def send(self, phone_number: str, message: str) -> None:
        if self.fail:
            raise NotificationError("Twilio error: 503", channel="sms")
        self.sent.append((phone_number, message))


class FakeEmailClient:
    def __init__(self):
        self.sent: List[EmailMessage] = []
        self.fail = False

    async def send(self, message: EmailMessage) -> None:
        if self.fail:
            raise NotificationError("Elastic Email error: 500", channel="email")
        self.sent.append(message)


class FakePaymentLinkClient:
    def __init__(self, url: str = "https://pay.example.test/link/abc"):
        self.url = url
        self.requests: List[PaymentLinkRequest] = []
        self.fail = False

    async def create_link(self, request: PaymentLinkRequest) -> PaymentLink:
        self.requests.append(request)
        if self.fail:
            raise PaymentLinkError("Payment gateway error: 500")
        return PaymentLink(url=self.url)


class FakeInsightClient:
    """Deterministic stand-in for the AI provider"""

    def __init__(self, score: float = 42.0):
        self.score = score
        self.predictions: List[PredictionRequest] = []
        self.summaries: List[SummaryRequest] = []
        self.fail_prediction = False
        self.fail_summary = False

    async def predict(self, request: PredictionRequest) -> RiskPrediction:
        self.predictions.append(request)
        if self.fail_prediction:
            raise AIProviderError("Gemini prediction call failed: quota exceeded")
        return RiskPrediction(prediction_score=self.score, risk_factors="Few late payments")

    async def summarize(self, request: SummaryRequest) -> HistorySummary:
        self.summaries.append(request)
        if self.fail_summary:
            raise AIProviderError("Gemini summary call failed: quota exceeded")
        return HistorySummary(summary="Pays reliably")


@pytest.fixture(autouse=True)
def offline_providers(monkeypatch):
    """Never let a test reach a real provider, whatever the environment holds"""
    for name in (
        "twilio_account_sid",
        "twilio_auth_token",
        "twilio_phone_number",
        "elastic_email_api_key",
        "elastic_email_from_email",
        "payment_gateway_url",
        "payment_gateway_api_key",
        "google_api_key",
    ):
        monkeypatch.setattr(settings, name, None)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Fresh in-memory database and session per test"""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def providers() -> SimpleNamespace:
    return SimpleNamespace(
        sms=FakeSMSClient(),
        email=FakeEmailClient(),
        link=FakePaymentLinkClient(),
        ai=FakeInsightClient(),
    )


@pytest.fixture
def refresher(providers: SimpleNamespace) -> InsightRefresher:
    return InsightRefresher(providers.ai, default_amount=100.0, due_days=30)


@pytest.fixture
def api_client(db: Session, providers: SimpleNamespace) -> TestClient:
    """FastAPI test client with test database and fake providers"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_sms_client] = lambda: providers.sms
    app.dependency_overrides[get_email_client] = lambda: providers.email
    app.dependency_overrides[get_payment_link_client] = lambda: providers.link
    app.dependency_overrides[get_insight_client] = lambda: providers.ai
    return TestClient(app)
