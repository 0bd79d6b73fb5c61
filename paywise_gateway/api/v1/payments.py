"""/v1/payments - payment requests and status transitions"""

from typing import List

from fastapi import APIRouter, Depends, Request

from paywise_gateway.api.dependencies import get_payment_service, get_request_id
from paywise_gateway.api.v1.schemas import (
    ApiResponse,
    PaymentCreateRequest,
    PaymentSchema,
    PaymentStatusUpdateRequest,
)
from paywise_gateway.services.payments import PaymentService
from paywise_gateway.utils.date_utils import utcnow

router = APIRouter()


@router.get("/payments", response_model=ApiResponse[List[PaymentSchema]])
def list_payments(service: PaymentService = Depends(get_payment_service)):
    payments = service.list_payments()
    return ApiResponse(success=True, data=[PaymentSchema.model_validate(p) for p in payments])


@router.post("/payments", response_model=ApiResponse[PaymentSchema], status_code=201)
async def request_payment(
    request_body: PaymentCreateRequest,
    request: Request,
    service: PaymentService = Depends(get_payment_service),
):
    """
    Request a payment from a client.

    Flow:
    1. Resolve client (404 if absent)
    2. Create payment link (502 if the gateway fails, nothing persisted)
    3. Persist payment in link_sent
    4. Notify over SMS and/or email; failures become warnings
    """
    result = await service.request_payment(
        client_id=request_body.client_id,
        amount=request_body.amount,
        description=request_body.description,
        due_date=request_body.due_date,
        communication_method=request_body.communication_method,
        request_id=get_request_id(request),
    )
    return ApiResponse(
        success=True,
        data=PaymentSchema.model_validate(result.value),
        message=result.message,
        warnings=result.warnings,
    )


@router.post("/payments/expire-overdue", response_model=ApiResponse[List[PaymentSchema]])
def expire_overdue_payments(service: PaymentService = Depends(get_payment_service)):
    """Mark open requests whose due date has passed as expired"""
    expired = service.expire_overdue(utcnow().date())
    return ApiResponse(
        success=True,
        data=[PaymentSchema.model_validate(p) for p in expired],
        message=f"{len(expired)} payment requests expired",
    )


@router.get("/payments/{payment_id}", response_model=ApiResponse[PaymentSchema])
def get_payment(payment_id: str, service: PaymentService = Depends(get_payment_service)):
    return ApiResponse(success=True, data=PaymentSchema.model_validate(service.get_payment(payment_id)))


@router.put("/payments/{payment_id}/status", response_model=ApiResponse[PaymentSchema])
async def update_payment_status(
    payment_id: str,
    request_body: PaymentStatusUpdateRequest,
    request: Request,
    service: PaymentService = Depends(get_payment_service),
):
    """Set status; paid/failed append a client transaction and refresh AI insights"""
    result = await service.update_status(payment_id, request_body.status, request_id=get_request_id(request))
    return ApiResponse(
        success=True,
        data=PaymentSchema.model_validate(result.value),
        message=result.message,
        warnings=result.warnings,
    )
