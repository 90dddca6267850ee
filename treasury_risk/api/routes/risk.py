from fastapi import APIRouter, Depends, Request, Response

from ...deps import get_risk_service
from ...risk.models import RiskSummary
from ...services.risk_service import RiskSummaryService

router = APIRouter()


@router.get("/api/risk-summary", response_model=RiskSummary)
async def risk_summary(
    request: Request,
    response: Response,
    service: RiskSummaryService = Depends(get_risk_service),
):
    """
    Current risk score, regime and recommended Base/Solana split.

    Always 200: upstream trouble degrades to stale or neutral data, visible
    only through the explanations and the X-Risk-Cache header.
    """
    result = await service.get_summary()
    request.state.cache_status = result.cache_status
    apply_cache_headers(response, max_age=result.max_age)
    return result.summary


def apply_cache_headers(response: Response, *, max_age: int) -> None:
    if max_age <= 0:
        response.headers["Cache-Control"] = "no-cache"
        return
    response.headers["Cache-Control"] = f"public, max-age={max_age}"
