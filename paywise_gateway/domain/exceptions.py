"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """A required field is missing or blank"""

    pass


class NotFoundError(DomainException):
    """A client or payment id did not resolve"""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class ProviderError(DomainException):
    """A downstream provider call failed"""

    provider = "provider"

    def __init__(self, message: str, provider: str | None = None):
        if provider is not None:
            self.provider = provider
        super().__init__(message)


class PaymentLinkError(ProviderError):
    """Payment gateway could not create a link"""

    provider = "payment_gateway"


class NotificationError(ProviderError):
    """SMS or email dispatch failed"""

    def __init__(self, message: str, channel: str):
        self.channel = channel
        super().__init__(message, provider=channel)


class AIProviderError(ProviderError):
    """Prediction or summary model call failed or returned unusable output"""

    provider = "ai"


class AIRefreshError(DomainException):
    """Client AI insight refresh failed; the underlying error is chained as __cause__"""

    def __init__(self, client_id: str, cause: Exception):
        self.client_id = client_id
        self.cause = cause
        super().__init__(f"Failed to refresh AI insights for {client_id}: {cause}")
