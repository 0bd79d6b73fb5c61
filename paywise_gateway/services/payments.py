"""Payment request orchestration: link, persist, notify, resolve"""

import asyncio
import logging
import time
from datetime import date
from typing import List

from sqlalchemy.orm import Session

from paywise_gateway.config import settings
from paywise_gateway.domain.exceptions import PaymentLinkError, ProviderError
from paywise_gateway.domain.models import (
    CommunicationMethod,
    DispatchOutcome,
    OperationResult,
    PaymentLinkRequest,
    PaymentStatus,
)
from paywise_gateway.domain.notifications import (
    compose_payment_email,
    compose_payment_message,
    dispatch_status_message,
)
from paywise_gateway.infrastructure.clients.email import EmailClient
from paywise_gateway.infrastructure.clients.payment_gateway import PaymentLinkClient
from paywise_gateway.infrastructure.clients.sms import SMSClient
from paywise_gateway.infrastructure.database.models import Client, PaymentRequest
from paywise_gateway.infrastructure.database.repositories import ClientRepository, PaymentRepository
from paywise_gateway.infrastructure.observability.logging import log_payment_request, log_status_change
from paywise_gateway.infrastructure.observability.metrics import (
    payment_request_counter,
    payment_status_counter,
    record_dispatch,
)
from paywise_gateway.services.insights import InsightRefresher

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Payment request lifecycle.

    Only link creation is all-or-nothing. Notifications and the AI refresh
    after a resolution are best-effort and reported as warnings.
    """

    def __init__(
        self,
        db: Session,
        link_client: PaymentLinkClient,
        sms_client: SMSClient,
        email_client: EmailClient,
        refresher: InsightRefresher,
    ):
        self.db = db
        self.clients = ClientRepository(db)
        self.payments = PaymentRepository(db)
        self.link_client = link_client
        self.sms_client = sms_client
        self.email_client = email_client
        self.refresher = refresher

    def list_payments(self) -> List[PaymentRequest]:
        return self.payments.list()

    def get_payment(self, payment_id: str) -> PaymentRequest:
        return self.payments.get(payment_id)

    async def request_payment(
        self,
        client_id: str,
        amount: float,
        description: str,
        due_date: date,
        communication_method: CommunicationMethod,
        request_id: str = "unknown",
    ) -> OperationResult[PaymentRequest]:
        """
        Issue a payment link and notify the client.

        Flow:
        1. Resolve client (NotFoundError)
        2. Obtain link (PaymentLinkError aborts, nothing persisted)
        3. Persist payment in link_sent
        4. Compose one message
        5. Dispatch SMS and/or email independently
        """
        start_time = time.time()
        client = self.clients.get(client_id)

        try:
            link = await self.link_client.create_link(
                PaymentLinkRequest(amount=amount, description=description, customer_id=client.id)
            )
        except PaymentLinkError:
            payment_request_counter.labels(outcome="link_failed").inc()
            raise

        payment = self.payments.create(
            client=client,
            amount=amount,
            description=description,
            due_date=due_date,
            communication_method=communication_method,
            payment_link_url=link.url,
        )
        self.db.commit()
        payment_request_counter.labels(outcome="created").inc()

        message = compose_payment_message(
            client_name=client.name,
            amount=amount,
            description=description,
            link_url=link.url,
            due_date=due_date,
            currency_symbol=settings.currency_symbol,
        )
        outcome = await self.dispatch(client, description, message, communication_method)
        record_dispatch(outcome)

        duration_ms = (time.time() - start_time) * 1000
        log_payment_request(request_id, payment.id, client.id, outcome.failed_channels, duration_ms)

        warnings = [f"{channel.upper()} notification failed" for channel in outcome.failed_channels]
        return OperationResult(
            payment,
            warnings,
            message=dispatch_status_message(client.name, communication_method, outcome),
        )

    async def dispatch(
        self,
        client: Client,
        description: str,
        message: str,
        method: CommunicationMethod,
    ) -> DispatchOutcome:
        """Send on each requested channel concurrently; one failing never affects the other"""
        outcome = DispatchOutcome()
        sends = []
        if method.uses_sms:
            sends.append(("sms", self.sms_client.send(client.phone, message)))
        if method.uses_email:
            email = compose_payment_email(client.email, description, message, settings.email_from_name)
            sends.append(("email", self.email_client.send(email)))

        results = await asyncio.gather(*(send for _, send in sends), return_exceptions=True)
        for (channel, _), result in zip(sends, results):
            if isinstance(result, ProviderError):
                logger.warning(
                    f"{channel} notification failed: {result}",
                    extra={"client_id": client.id, "channel": channel},
                )
            elif isinstance(result, Exception):
                logger.warning(
                    f"{channel} notification failed unexpectedly: {type(result).__name__}: {result}",
                    exc_info=result,
                    extra={"client_id": client.id, "channel": channel},
                )
            elif isinstance(result, BaseException):
                raise result
            setattr(outcome, f"{channel}_sent", result is None)
        return outcome

    async def update_status(
        self,
        payment_id: str,
        status: PaymentStatus,
        request_id: str = "unknown",
    ) -> OperationResult[PaymentRequest]:
        """
        Set a payment's status, with no transition checks.

        Resolving to paid or failed appends a mirrored transaction to the
        client and refreshes its AI insights (best-effort).
        """
        payment, previous = self.payments.update_status(payment_id, status)
        payment_status_counter.labels(status=status.value).inc()
        log_status_change(request_id, payment.id, previous.value, status.value)

        warnings: List[str] = []
        txn_status = status.resolved_transaction_status()
        client = payment.client
        if txn_status is not None:
            self.clients.append_transaction(
                client,
                amount=payment.amount,
                status=txn_status,
                description=f"Payment for request: {payment.description}",
            )
            self.db.commit()
            warnings = await self.refresher.refresh_best_effort(self.clients, client, step="status_update")

        self.db.commit()
        return OperationResult(payment, warnings, message=f"Status changed from {previous.value} to {status.value}")

    def expire_overdue(self, today: date) -> List[PaymentRequest]:
        """Move open requests past their due date to expired"""
        expired = self.payments.list_overdue(today)
        for payment in expired:
            payment.status = PaymentStatus.EXPIRED
            payment_status_counter.labels(status=PaymentStatus.EXPIRED.value).inc()
        self.db.commit()
        if expired:
            logger.info("Expired overdue payment requests", extra={"count": len(expired), "as_of": today.isoformat()})
        return expired
