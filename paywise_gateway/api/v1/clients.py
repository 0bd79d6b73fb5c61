"""/v1/clients - client CRUD, AI refresh and per-client payments"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request

from paywise_gateway.api.dependencies import get_client_service, get_request_id
from paywise_gateway.api.v1.schemas import (
    ApiResponse,
    ClientCreateRequest,
    ClientSchema,
    ClientUpdateRequest,
    PaymentSchema,
)
from paywise_gateway.domain.exceptions import NotFoundError
from paywise_gateway.services.clients import ClientService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/clients", response_model=ApiResponse[List[ClientSchema]])
def list_clients(service: ClientService = Depends(get_client_service)):
    """All clients in insertion order"""
    clients = service.list_clients()
    return ApiResponse(success=True, data=[ClientSchema.model_validate(c) for c in clients])


@router.post("/clients", response_model=ApiResponse[ClientSchema], status_code=201)
async def create_client(
    request_body: ClientCreateRequest,
    request: Request,
    service: ClientService = Depends(get_client_service),
):
    """
    Create a client, then try to score it.

    An AI failure leaves the client without insights and is reported in
    `warnings`; it never fails the request.
    """
    result = await service.create_client(request_body.name, request_body.email, request_body.phone)
    logger.info(
        "Client created",
        extra={"request_id": get_request_id(request), "client_id": result.value.id, "warnings": result.warnings},
    )
    return ApiResponse(success=True, data=ClientSchema.model_validate(result.value), warnings=result.warnings)


@router.get("/clients/{client_id}", response_model=ApiResponse[ClientSchema])
def get_client(client_id: str, service: ClientService = Depends(get_client_service)):
    return ApiResponse(success=True, data=ClientSchema.model_validate(service.get_client(client_id)))


@router.put("/clients/{client_id}", response_model=ApiResponse[ClientSchema])
async def update_client(
    client_id: str,
    request_body: ClientUpdateRequest,
    request: Request,
    service: ClientService = Depends(get_client_service),
):
    """Merge contact fields, then refresh insights best-effort"""
    result = await service.update_client(
        client_id,
        name=request_body.name,
        email=request_body.email,
        phone=request_body.phone,
    )
    logger.info(
        "Client updated",
        extra={"request_id": get_request_id(request), "client_id": client_id, "warnings": result.warnings},
    )
    return ApiResponse(success=True, data=ClientSchema.model_validate(result.value), warnings=result.warnings)


@router.delete("/clients/{client_id}", response_model=ApiResponse[None])
def delete_client(client_id: str, request: Request, service: ClientService = Depends(get_client_service)):
    """Delete a client together with its ledger and payment requests"""
    if not service.delete_client(client_id):
        raise NotFoundError("Client", client_id)
    logger.info("Client deleted", extra={"request_id": get_request_id(request), "client_id": client_id})
    return ApiResponse(success=True, message="Client deleted successfully")


@router.post("/clients/{client_id}/refresh-ai", response_model=ApiResponse[ClientSchema])
async def refresh_client_ai(client_id: str, service: ClientService = Depends(get_client_service)):
    """Re-run prediction and summary; provider failure returns 500"""
    client = await service.refresh_insights(client_id)
    return ApiResponse(success=True, data=ClientSchema.model_validate(client))


@router.get("/clients/{client_id}/payments", response_model=ApiResponse[List[PaymentSchema]])
def list_client_payments(client_id: str, service: ClientService = Depends(get_client_service)):
    payments = service.list_client_payments(client_id)
    return ApiResponse(success=True, data=[PaymentSchema.model_validate(p) for p in payments])
