"""GET /v1/dashboard/summary - portfolio aggregates"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from paywise_gateway.api.v1.schemas import ApiResponse, DashboardSummarySchema
from paywise_gateway.domain.portfolio import build_portfolio_summary
from paywise_gateway.infrastructure.database.repositories import ClientRepository, PaymentRepository
from paywise_gateway.infrastructure.database.session import get_db
from paywise_gateway.utils.date_utils import utcnow

router = APIRouter()


@router.get("/dashboard/summary", response_model=ApiResponse[DashboardSummarySchema])
def get_dashboard_summary(db: Session = Depends(get_db)):
    """
    Income, open dues and risk distribution across all clients.

    Returns:
        Totals plus a count of scored clients per risk band
    """
    summary = build_portfolio_summary(
        ClientRepository(db).list(),
        PaymentRepository(db).list(),
        as_of=utcnow().date(),
    )
    return ApiResponse(success=True, data=DashboardSummarySchema.model_validate(summary))
