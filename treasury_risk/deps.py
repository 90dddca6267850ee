from fastapi import Request

from .services.risk_service import RiskSummaryService


def get_risk_service(request: Request) -> RiskSummaryService:
    return request.app.state.risk_service
