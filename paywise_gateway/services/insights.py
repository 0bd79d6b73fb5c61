"""Client AI insight refresh"""

import asyncio
import logging
from datetime import datetime
from typing import List

from paywise_gateway.config import settings
from paywise_gateway.domain.exceptions import AIRefreshError, ProviderError
from paywise_gateway.domain.history import build_prediction_request, build_summary_request
from paywise_gateway.domain.models import ClientInsights
from paywise_gateway.infrastructure.clients.insights import InsightClient
from paywise_gateway.infrastructure.database.models import Client
from paywise_gateway.infrastructure.database.repositories import ClientRepository
from paywise_gateway.infrastructure.observability.metrics import record_ai_refresh

logger = logging.getLogger(__name__)


class InsightRefresher:
    """Runs the prediction and summary calls for a client and merges the results"""

    def __init__(
        self,
        insight_client: InsightClient,
        default_amount: float | None = None,
        due_days: int | None = None,
    ):
        self.insight_client = insight_client
        self.default_amount = default_amount if default_amount is not None else settings.default_transaction_amount
        self.due_days = due_days if due_days is not None else settings.prediction_due_days

    async def compute(self, client: Client, now: datetime | None = None) -> ClientInsights:
        """
        Produce fresh insights without touching the store.

        Both model calls run concurrently and are always awaited to
        completion. Either failing fails the whole refresh.

        Raises:
            AIRefreshError: chained to the first failure of either call
        """
        prediction_request = build_prediction_request(client, self.default_amount, self.due_days, now)
        summary_request = build_summary_request(client)

        prediction, summary = await asyncio.gather(
            self.insight_client.predict(prediction_request),
            self.insight_client.summarize(summary_request),
            return_exceptions=True,
        )
        for result in (prediction, summary):
            if isinstance(result, Exception):
                if not isinstance(result, ProviderError):
                    logger.error(
                        f"Unexpected AI client error: {type(result).__name__}: {result}",
                        exc_info=result,
                        extra={"client_id": client.id},
                    )
                raise AIRefreshError(client.id, result) from result
            if isinstance(result, BaseException):
                raise result

        return ClientInsights(
            prediction_score=prediction.prediction_score,
            risk_factors=prediction.risk_factors,
            payment_summary=summary.summary,
        )

    async def refresh(self, repo: ClientRepository, client: Client) -> Client:
        """Compute insights and write them onto the client (caller commits)"""
        try:
            insights = await self.compute(client)
        except AIRefreshError:
            record_ai_refresh(success=False)
            raise
        record_ai_refresh(success=True, prediction_score=insights.prediction_score)
        return repo.apply_insights(client, insights)

    async def refresh_best_effort(self, repo: ClientRepository, client: Client, step: str) -> List[str]:
        """Refresh but degrade to a warning; existing AI fields are left as they were"""
        try:
            await self.refresh(repo, client)
        except AIRefreshError as e:
            logger.warning(
                f"AI insights refresh failed after {step}: {e.cause}",
                extra={"client_id": client.id, "step": step},
            )
            return [f"AI insights not refreshed: {e.cause}"]
        return []
