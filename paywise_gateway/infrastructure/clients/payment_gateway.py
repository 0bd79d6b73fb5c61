"""Payment gateway HTTP client for issuing payment links"""

import logging

import httpx

from paywise_gateway.config import settings
from paywise_gateway.domain.exceptions import PaymentLinkError
from paywise_gateway.domain.models import PaymentLink, PaymentLinkRequest
from paywise_gateway.infrastructure.observability.metrics import provider_latency_histogram

logger = logging.getLogger(__name__)


class PaymentLinkClient:
    """Client for the payment gateway's link endpoint.

    Without a gateway URL every request gets the configured mock link.
    """

    def __init__(
        self,
        gateway_url: str | None = None,
        api_key: str | None = None,
        mock_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.gateway_url = gateway_url or settings.payment_gateway_url
        self.api_key = api_key or (
            settings.payment_gateway_api_key.get_secret_value() if settings.payment_gateway_api_key else None
        )
        self.mock_url = mock_url or settings.payment_link_mock_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    @property
    def is_live(self) -> bool:
        return bool(self.gateway_url)

    async def create_link(self, request: PaymentLinkRequest) -> PaymentLink:
        """
        Create a payment link for an amount owed by a customer.

        Raises:
            PaymentLinkError: On timeout, HTTP errors, or a response without a URL
        """
        if not self.is_live:
            logger.info(
                "MOCK payment link (gateway not configured)",
                extra={"customer_id": request.customer_id, "amount": request.amount},
            )
            return PaymentLink(url=self.mock_url)

        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with provider_latency_histogram.labels(provider="payment_gateway").time():
                    response = await client.post(
                        self.gateway_url,
                        headers=headers,
                        json={
                            "amount": request.amount,
                            "description": request.description,
                            "customer_id": request.customer_id,
                        },
                    )
                response.raise_for_status()
                url = response.json()["url"]

            except httpx.TimeoutException as e:
                raise PaymentLinkError(f"Payment gateway timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise PaymentLinkError(f"Payment gateway error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise PaymentLinkError(f"Payment gateway unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise PaymentLinkError(f"Invalid payment link response: {e}") from e

        if not isinstance(url, str) or not url:
            raise PaymentLinkError("Payment gateway returned an empty link")
        return PaymentLink(url=url)
