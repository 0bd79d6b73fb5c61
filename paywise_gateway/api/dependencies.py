"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from paywise_gateway.infrastructure.clients.email import EmailClient
from paywise_gateway.infrastructure.clients.insights import InsightClient
from paywise_gateway.infrastructure.clients.payment_gateway import PaymentLinkClient
from paywise_gateway.infrastructure.clients.sms import SMSClient
from paywise_gateway.infrastructure.database.session import get_db
from paywise_gateway.services.clients import ClientService
from paywise_gateway.services.insights import InsightRefresher
from paywise_gateway.services.payments import PaymentService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_sms_client() -> SMSClient:
    """Provide SMS client instance"""
    return SMSClient()


def get_email_client() -> EmailClient:
    """Provide email client instance"""
    return EmailClient()


def get_payment_link_client() -> PaymentLinkClient:
    """Provide payment gateway client instance"""
    return PaymentLinkClient()


@lru_cache
def get_insight_client() -> InsightClient:
    """Provide the shared AI client (one SDK client per process)"""
    return InsightClient()


def get_insight_refresher(insight_client: InsightClient = Depends(get_insight_client)) -> InsightRefresher:
    return InsightRefresher(insight_client)


def get_client_service(
    db: Session = Depends(get_db),
    refresher: InsightRefresher = Depends(get_insight_refresher),
) -> ClientService:
    return ClientService(db, refresher)


def get_payment_service(
    db: Session = Depends(get_db),
    link_client: PaymentLinkClient = Depends(get_payment_link_client),
    sms_client: SMSClient = Depends(get_sms_client),
    email_client: EmailClient = Depends(get_email_client),
    refresher: InsightRefresher = Depends(get_insight_refresher),
) -> PaymentService:
    return PaymentService(db, link_client, sms_client, email_client, refresher)
