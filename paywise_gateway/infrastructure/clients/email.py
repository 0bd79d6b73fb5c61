"""Elastic Email transactional email client"""

import logging
import re
from typing import Any, Dict

import httpx

from paywise_gateway.config import settings
from paywise_gateway.domain.exceptions import NotificationError
from paywise_gateway.domain.models import EmailMessage
from paywise_gateway.infrastructure.observability.metrics import provider_latency_histogram

logger = logging.getLogger(__name__)

_TAG_PATTERN = re.compile(r"<[^>]*>")


class EmailClient:
    """Client for the Elastic Email v4 transactional API"""

    def __init__(
        self,
        api_key: str | None = None,
        from_email: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key or (
            settings.elastic_email_api_key.get_secret_value() if settings.elastic_email_api_key else None
        )
        self.from_email = from_email or settings.elastic_email_from_email
        self.base_url = base_url or settings.elastic_email_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    @property
    def is_live(self) -> bool:
        return bool(self.api_key and self.from_email)

    def sender(self, from_name: str | None) -> str:
        return f"{from_name} <{self.from_email}>" if from_name else (self.from_email or "")

    def build_payload(self, message: EmailMessage) -> Dict[str, Any]:
        """Elastic Email request body with HTML and plain-text parts"""
        return {
            "Recipients": {"To": [message.to]},
            "Content": {
                "Body": [
                    {"ContentType": "HTML", "Content": message.html_body, "Charset": "utf-8"},
                    {"ContentType": "PlainText", "Content": _TAG_PATTERN.sub("", message.html_body), "Charset": "utf-8"},
                ],
                "From": self.sender(message.from_name),
                "Subject": message.subject,
            },
            "Options": {"IsTransactional": True},
        }

    async def send(self, message: EmailMessage) -> None:
        """
        Send a transactional email.

        Raises:
            NotificationError: On timeout or non-2xx response
        """
        if not self.is_live:
            logger.info(
                "MOCK EMAIL (Elastic Email not configured)",
                extra={"channel": "email", "to": message.to, "subject": message.subject},
            )
            return

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with provider_latency_histogram.labels(provider="email").time():
                    response = await client.post(
                        f"{self.base_url}/emails/transactional",
                        headers={"X-ElasticEmail-ApiKey": self.api_key},
                        json=self.build_payload(message),
                    )
                response.raise_for_status()

            except httpx.TimeoutException as e:
                raise NotificationError(f"Elastic Email timeout after {self.timeout}s", channel="email") from e
            except httpx.HTTPStatusError as e:
                raise NotificationError(
                    f"Elastic Email error: {e.response.status_code} {e.response.text}", channel="email"
                ) from e
            except httpx.RequestError as e:
                raise NotificationError(f"Elastic Email unreachable: {e}", channel="email") from e

        logger.info("Email sent", extra={"channel": "email", "to": message.to})
