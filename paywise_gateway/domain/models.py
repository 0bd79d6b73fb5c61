"""Domain models - pure Python enums and dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Generic, List, Optional, Protocol, TypeVar


class TransactionStatus(str, Enum):
    """Ledger entry status on a client"""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    OVERDUE = "overdue"


class PaymentStatus(str, Enum):
    """Payment request lifecycle.

    link_sent is the initial state. pending_link is never produced by an
    operation; expired is only reached through the overdue sweep.
    """

    PENDING_LINK = "pending_link"
    LINK_SENT = "link_sent"
    PAID = "paid"
    FAILED = "failed"
    EXPIRED = "expired"

    @property
    def is_open(self) -> bool:
        return self in (PaymentStatus.PENDING_LINK, PaymentStatus.LINK_SENT)

    def resolved_transaction_status(self) -> Optional[TransactionStatus]:
        """Transaction status a payment resolution appends, or None"""
        if self is PaymentStatus.PAID:
            return TransactionStatus.PAID
        if self is PaymentStatus.FAILED:
            return TransactionStatus.FAILED
        return None


class CommunicationMethod(str, Enum):
    """Channels a payment request is announced on"""

    SMS = "sms"
    EMAIL = "email"
    BOTH = "both"

    @property
    def uses_sms(self) -> bool:
        return self in (CommunicationMethod.SMS, CommunicationMethod.BOTH)

    @property
    def uses_email(self) -> bool:
        return self in (CommunicationMethod.EMAIL, CommunicationMethod.BOTH)


class TransactionRecord(Protocol):
    """Anything that looks like a stored client transaction"""

    amount: float
    date: datetime
    status: TransactionStatus
    description: str


@dataclass
class PredictionRequest:
    """Input to the risk prediction model"""

    client_id: str
    payment_history: str
    transaction_amount: float
    due_date: str
    client_details: str


@dataclass
class RiskPrediction:
    """Model output: 0 = very unlikely to default, 100 = very likely"""

    prediction_score: float
    risk_factors: str


@dataclass
class SummaryRequest:
    """Input to the history summarization model"""

    client_id: str
    payment_history: str


@dataclass
class HistorySummary:
    summary: str


@dataclass
class ClientInsights:
    """Merged output of a successful AI refresh"""

    prediction_score: float
    risk_factors: str
    payment_summary: str


@dataclass
class PaymentLinkRequest:
    """Input to the payment gateway"""

    amount: float
    description: str
    customer_id: str


@dataclass
class PaymentLink:
    url: str


@dataclass
class EmailMessage:
    """Outbound email"""

    to: str
    subject: str
    html_body: str
    from_name: Optional[str] = None


@dataclass
class DispatchOutcome:
    """Per-channel result of notifying a client; None means the channel was not requested"""

    sms_sent: Optional[bool] = None
    email_sent: Optional[bool] = None

    @property
    def failed_channels(self) -> List[str]:
        failed = []
        if self.sms_sent is False:
            failed.append("sms")
        if self.email_sent is False:
            failed.append("email")
        return failed


T = TypeVar("T")


@dataclass
class OperationResult(Generic[T]):
    """Authoritative outcome of an operation plus warnings from best-effort side effects"""

    value: T
    warnings: List[str] = field(default_factory=list)
    message: Optional[str] = None


@dataclass
class PortfolioSummary:
    """Dashboard aggregates over all clients and payment requests"""

    total_income: float
    pending_dues: float
    pending_count: int
    average_prediction_score: Optional[float]
    risk_distribution: dict
    unscored_clients: int
    client_count: int
    payment_count: int
    as_of: date
