"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from paywise_gateway.domain.models import CommunicationMethod, PaymentStatus, TransactionStatus

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope for every response"""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


class ClientCreateRequest(BaseModel):
    """Request body for POST /v1/clients"""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1, description="E.164 formatted for live SMS")


class ClientUpdateRequest(BaseModel):
    """Request body for PUT /v1/clients/{client_id}; omitted fields are kept"""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class TransactionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    amount: float
    date: datetime
    status: TransactionStatus
    description: str


class ClientSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: str
    payment_history: str
    transactions: List[TransactionSchema]
    prediction_score: Optional[float] = None
    risk_factors: Optional[str] = None
    payment_summary: Optional[str] = None
    created_at: datetime


class PaymentCreateRequest(BaseModel):
    """Request body for POST /v1/payments"""

    client_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    description: str = Field(..., min_length=1)
    due_date: date
    communication_method: CommunicationMethod


class PaymentStatusUpdateRequest(BaseModel):
    """Request body for PUT /v1/payments/{payment_id}/status"""

    status: PaymentStatus


class PaymentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    client_id: str
    client_name: str
    amount: float
    description: str
    status: PaymentStatus
    payment_link_url: Optional[str] = None
    created_at: datetime
    due_date: date
    communication_method: CommunicationMethod


class DashboardSummarySchema(BaseModel):
    """Response data for GET /v1/dashboard/summary"""

    model_config = ConfigDict(from_attributes=True)

    total_income: float
    pending_dues: float
    pending_count: int
    average_prediction_score: Optional[float] = None
    risk_distribution: Dict[str, int]
    unscored_clients: int
    client_count: int
    payment_count: int
    as_of: date
