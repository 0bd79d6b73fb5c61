"""Configuration management using Pydantic Settings"""

from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Provider credentials are optional: a provider with missing credentials
    runs in mock mode and only logs what it would have sent.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Store (in-memory SQLite by default, lives as long as the process)
    database_url: str = "sqlite://"

    # Service
    service_name: str = "paywise-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0

    # SMS (Twilio)
    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[SecretStr] = None
    twilio_phone_number: Optional[str] = None
    twilio_api_base: str = "https://api.twilio.com"

    # Email (Elastic Email)
    elastic_email_api_key: Optional[SecretStr] = None
    elastic_email_from_email: Optional[str] = None
    elastic_email_api_base: str = "https://api.elasticemail.com/v4"
    email_from_name: str = "PayWise Team"

    # Payment gateway
    payment_gateway_url: Optional[str] = None
    payment_gateway_api_key: Optional[SecretStr] = None
    payment_link_mock_url: str = "https://example.com/payment-link"

    # AI insights (Gemini)
    google_api_key: Optional[SecretStr] = None
    gemini_model: str = "gemini-2.5-flash"
    llm_temperature: float = 0.2

    # Business defaults
    currency_symbol: str = "₹"
    default_transaction_amount: float = 100.0
    prediction_due_days: int = 30

    @property
    def sms_configured(self) -> bool:
        return bool(self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number)

    @property
    def email_configured(self) -> bool:
        return bool(self.elastic_email_api_key and self.elastic_email_from_email)

    @property
    def payment_gateway_configured(self) -> bool:
        return bool(self.payment_gateway_url)

    @property
    def ai_configured(self) -> bool:
        return self.google_api_key is not None and bool(self.google_api_key.get_secret_value())


settings = Settings()
