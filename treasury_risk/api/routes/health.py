from fastapi import APIRouter, Depends

from ...deps import get_risk_service
from ...services.risk_service import RiskSummaryService

router = APIRouter()


@router.get("/health")
def health():
    return {"ok": True}


@router.get("/status")
def status(service: RiskSummaryService = Depends(get_risk_service)):
    entry = service.cache.get()
    now = service.cache.now()
    return {
        "markets_configured": len(service.markets),
        "cache_ttl_seconds": service.cache.ttl_seconds,
        "cache_populated": entry is not None,
        "cache_fresh": bool(entry and service.cache.is_fresh(entry, now)),
        "last_computed_at": entry.summary.timestamp.isoformat() if entry else None,
        "last_risk_score": entry.summary.risk_score if entry else None,
    }
