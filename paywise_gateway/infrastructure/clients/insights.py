"""Gemini client for payment risk prediction and history summaries.

Uses the google-genai SDK async API with a JSON response schema per call.
Without an API key the client answers from the offline heuristic in
`domain.scoring`, so the rest of the service behaves the same.
"""

import logging
from typing import Type, TypeVar

import httpx
from google import genai
from google.genai import errors, types
from pydantic import BaseModel, Field

from paywise_gateway.config import settings
from paywise_gateway.domain.exceptions import AIProviderError
from paywise_gateway.domain.history import format_amount
from paywise_gateway.domain.models import HistorySummary, PredictionRequest, RiskPrediction, SummaryRequest
from paywise_gateway.domain.scoring import analyze_history, clamp_score, heuristic_prediction, summarize_history
from paywise_gateway.infrastructure.observability.metrics import provider_latency_histogram

logger = logging.getLogger(__name__)

PREDICTION_PROMPT = """You are an expert in predicting payment behavior. Analyze the data below and estimate how likely this client is to default on or delay payments.

Client ID: {client_id}
Payment History:
{payment_history}
Transaction Amount: {transaction_amount}
Due Date: {due_date}
Client Details: {client_details}

Return a prediction score from 0 to 100, where 0 means very unlikely to default and 100 means very likely to default, and describe the key risk factors behind the score."""

SUMMARY_PROMPT = """You are an assistant that summarizes client payment histories.

Write a concise summary of the payment history below. Highlight key trends, payment behavior, and any issues or anomalies.

Payment History:
{payment_history}"""


class PredictionOutput(BaseModel):
    """Response schema for the prediction call"""

    prediction_score: float = Field(description="0 = very unlikely to default, 100 = very likely to default")
    risk_factors: str = Field(description="Key risk factors influencing the score")


class SummaryOutput(BaseModel):
    """Response schema for the summary call"""

    summary: str = Field(description="Summary of payment trends and potential issues")


OutputT = TypeVar("OutputT", bound=BaseModel)


class InsightClient:
    """Client for the AI prediction and summary calls"""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
    ):
        self._api_key = api_key or (settings.google_api_key.get_secret_value() if settings.google_api_key else None)
        self._model_name = model or settings.gemini_model
        self._temperature = temperature if temperature is not None else settings.llm_temperature
        self._client = genai.Client(api_key=self._api_key) if self._api_key else None

    @property
    def is_live(self) -> bool:
        return self._client is not None

    async def predict(self, request: PredictionRequest) -> RiskPrediction:
        """
        Score a client's default risk.

        Raises:
            AIProviderError: On API errors or output that does not match the schema
        """
        if not self.is_live:
            return heuristic_prediction(request.payment_history, request.transaction_amount)

        prompt = PREDICTION_PROMPT.format(
            client_id=request.client_id,
            payment_history=request.payment_history,
            transaction_amount=format_amount(request.transaction_amount),
            due_date=request.due_date,
            client_details=request.client_details,
        )
        output = await self._generate(prompt, PredictionOutput, call="prediction")
        return RiskPrediction(
            prediction_score=clamp_score(output.prediction_score),
            risk_factors=output.risk_factors,
        )

    async def summarize(self, request: SummaryRequest) -> HistorySummary:
        """
        Summarize a client's payment history.

        Raises:
            AIProviderError: On API errors or output that does not match the schema
        """
        if not self.is_live:
            return HistorySummary(summary=summarize_history(analyze_history(request.payment_history)))

        prompt = SUMMARY_PROMPT.format(payment_history=request.payment_history)
        output = await self._generate(prompt, SummaryOutput, call="summary")
        return HistorySummary(summary=output.summary)

    async def _generate(self, prompt: str, schema: Type[OutputT], call: str) -> OutputT:
        config = types.GenerateContentConfig(
            temperature=self._temperature,
            response_mime_type="application/json",
            response_schema=schema,
        )
        try:
            with provider_latency_histogram.labels(provider="ai").time():
                response = await self._client.aio.models.generate_content(
                    model=self._model_name,
                    contents=prompt,
                    config=config,
                )
            parsed = response.parsed
            if isinstance(parsed, schema):
                return parsed
            return schema.model_validate_json(response.text or "")

        except errors.APIError as e:
            raise AIProviderError(f"Gemini {call} call failed: {e}") from e
        except httpx.HTTPError as e:
            raise AIProviderError(f"Gemini {call} call failed: {e}") from e
        except ValueError as e:
            logger.warning("Unusable model output", extra={"call": call, "model": self._model_name})
            raise AIProviderError(f"Gemini {call} output did not match schema: {e}") from e
