"""SQLAlchemy ORM models for clients, their ledger and payment requests"""

import uuid
from sqlalchemy import Column, String, Float, DateTime, Date, Integer, ForeignKey, Text, Enum as SAEnum
from sqlalchemy.orm import declarative_base, relationship

from paywise_gateway.domain.models import CommunicationMethod, PaymentStatus, TransactionStatus
from paywise_gateway.utils.date_utils import utcnow

Base = declarative_base()


def _prefixed_id(prefix: str):
    def generate() -> str:
        return f"{prefix}_{uuid.uuid4().hex}"

    return generate


def _enum_column(enum_cls):
    # Stored as plain strings so SQLite and Postgres behave the same
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
    )


class Client(Base):
    """Client with contact info, ledger-derived history text and AI insights"""

    __tablename__ = "client"

    # Surrogate key only orders rows by insertion
    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, unique=True, index=True, default=_prefixed_id("client"))
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    payment_history = Column(Text, nullable=False)
    prediction_score = Column(Float, nullable=True)
    risk_factors = Column(Text, nullable=True)
    payment_summary = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    transactions = relationship(
        "ClientTransaction",
        back_populates="client",
        cascade="all, delete-orphan",
        order_by="ClientTransaction.position",
    )
    payments = relationship("PaymentRequest", back_populates="client", cascade="all, delete-orphan")


class ClientTransaction(Base):
    """Append-only ledger entry owned by a client"""

    __tablename__ = "client_transaction"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, unique=True, default=_prefixed_id("txn"))
    client_pk = Column(Integer, ForeignKey("client.pk", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    amount = Column(Float, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    status = Column(_enum_column(TransactionStatus), nullable=False)
    description = Column(Text, nullable=False)

    client = relationship("Client", back_populates="transactions")


class PaymentRequest(Base):
    """Outbound request for money tied to one client"""

    __tablename__ = "payment_request"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, unique=True, index=True, default=_prefixed_id("payment"))
    client_pk = Column(Integer, ForeignKey("client.pk", ondelete="CASCADE"), nullable=False, index=True)
    # Snapshot taken at creation; not updated when the client is renamed
    client_name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    description = Column(Text, nullable=False)
    status = Column(_enum_column(PaymentStatus), nullable=False, default=PaymentStatus.LINK_SENT)
    payment_link_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    due_date = Column(Date, nullable=False)
    communication_method = Column(_enum_column(CommunicationMethod), nullable=False)

    client = relationship("Client", back_populates="payments")

    @property
    def client_id(self) -> str:
        return self.client.id
