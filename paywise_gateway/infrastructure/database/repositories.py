"""Data access layer for clients, their ledger and payment requests"""

from datetime import date, datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from paywise_gateway.domain.exceptions import NotFoundError, ValidationError
from paywise_gateway.domain.history import NO_HISTORY, format_payment_history
from paywise_gateway.domain.models import ClientInsights, CommunicationMethod, PaymentStatus, TransactionStatus
from paywise_gateway.infrastructure.database.models import Client, ClientTransaction, PaymentRequest
from paywise_gateway.utils.date_utils import utcnow

CLIENT_FIELDS = ("name", "email", "phone")


def _require(field: str, value: Optional[str]) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"Missing required client field: {field}")
    return cleaned


class ClientRepository:
    """Repository for clients and their transactions"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, name: str, email: str, phone: str) -> Client:
        """Persist a new client with an empty ledger"""
        client = Client(
            name=_require("name", name),
            email=_require("email", email),
            phone=_require("phone", phone),
            payment_history=NO_HISTORY,
            created_at=utcnow(),
        )
        self.db.add(client)
        self.db.flush()  # Get ID without committing
        return client

    def get(self, client_id: str) -> Client:
        client = self.db.query(Client).filter(Client.id == client_id).first()
        if client is None:
            raise NotFoundError("Client", client_id)
        return client

    def update(self, client_id: str, **changes: Optional[str]) -> Client:
        """Merge provided contact fields; fields passed as None are left untouched"""
        client = self.get(client_id)
        for field, value in changes.items():
            if field not in CLIENT_FIELDS:
                raise ValidationError(f"Unknown client field: {field}")
            if value is not None:
                setattr(client, field, _require(field, value))
        self.db.flush()
        return client

    def delete(self, client_id: str) -> bool:
        """Remove a client; its ledger and payment requests go with it"""
        client = self.db.query(Client).filter(Client.id == client_id).first()
        if client is None:
            return False
        self.db.delete(client)
        self.db.flush()
        return True

    def list(self) -> List[Client]:
        return self.db.query(Client).order_by(Client.pk).all()

    def append_transaction(
        self,
        client: Client,
        amount: float,
        status: TransactionStatus,
        description: str,
        when: Optional[datetime] = None,
    ) -> ClientTransaction:
        """Append a ledger entry and re-render the history text"""
        txn = ClientTransaction(
            position=len(client.transactions),
            amount=amount,
            date=when or utcnow(),
            status=status,
            description=description,
        )
        client.transactions.append(txn)
        client.payment_history = format_payment_history(client.transactions)
        self.db.flush()
        return txn

    def apply_insights(self, client: Client, insights: ClientInsights) -> Client:
        client.prediction_score = insights.prediction_score
        client.risk_factors = insights.risk_factors
        client.payment_summary = insights.payment_summary
        self.db.flush()
        return client


class PaymentRepository:
    """Repository for payment requests"""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        client: Client,
        amount: float,
        description: str,
        due_date: date,
        communication_method: CommunicationMethod,
        payment_link_url: str,
    ) -> PaymentRequest:
        """Persist a payment request whose link has already been issued"""
        payment = PaymentRequest(
            client=client,
            client_name=client.name,
            amount=amount,
            description=description,
            status=PaymentStatus.LINK_SENT,
            payment_link_url=payment_link_url,
            created_at=utcnow(),
            due_date=due_date,
            communication_method=communication_method,
        )
        self.db.add(payment)
        self.db.flush()
        return payment

    def get(self, payment_id: str) -> PaymentRequest:
        payment = self.db.query(PaymentRequest).filter(PaymentRequest.id == payment_id).first()
        if payment is None:
            raise NotFoundError("Payment", payment_id)
        return payment

    def update_status(self, payment_id: str, status: PaymentStatus) -> Tuple[PaymentRequest, PaymentStatus]:
        """Set status unconditionally; returns the payment and its previous status"""
        payment = self.get(payment_id)
        previous = PaymentStatus(payment.status)
        payment.status = status
        self.db.flush()
        return payment, previous

    def list(self) -> List[PaymentRequest]:
        return self.db.query(PaymentRequest).order_by(PaymentRequest.pk).all()

    def list_by_client(self, client: Client) -> List[PaymentRequest]:
        return (
            self.db.query(PaymentRequest)
            .filter(PaymentRequest.client_pk == client.pk)
            .order_by(PaymentRequest.pk)
            .all()
        )

    def list_overdue(self, today: date) -> List[PaymentRequest]:
        """Open requests whose due date has passed"""
        return (
            self.db.query(PaymentRequest)
            .filter(
                PaymentRequest.status.in_([PaymentStatus.LINK_SENT, PaymentStatus.PENDING_LINK]),
                PaymentRequest.due_date < today,
            )
            .order_by(PaymentRequest.pk)
            .all()
        )
