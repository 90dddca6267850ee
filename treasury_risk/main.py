import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.router import api_router
from .logging import configure_logging
from .request_logging import RequestLoggingMiddleware
from .services.risk_service import build_risk_service
from .settings import settings

configure_logging()
logger = logging.getLogger(__name__)

DISCLAIMER = (
    "Read-only allocation guidance derived from Polymarket prices. "
    "Not financial advice. No custody. No execution."
)

app = FastAPI(
    title="Treasury Risk - cross-chain allocation signal",
    description=DISCLAIMER,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)
app.include_router(api_router)

app.state.risk_service = build_risk_service()
logger.info(
    "risk_service_ready markets=%s ttl_seconds=%s gamma_url=%s",
    len(app.state.risk_service.markets),
    app.state.risk_service.cache.ttl_seconds,
    app.state.risk_service.client.base_url,
)
