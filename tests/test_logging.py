import json
import logging

from treasury_risk.logging import (
    JsonFormatter,
    _build_logger_levels,
    _coerce_log_level,
    configure_logging,
)
from treasury_risk.settings import settings


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord(
        name="treasury_risk.risk.calculator",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="risk_weights_not_normalized weight_total=%.4f",
        args=(0.5,),
        exc_info=None,
    )
    record.slug = "us-recession-in-2025"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "treasury_risk.risk.calculator"
    assert payload["message"] == "risk_weights_not_normalized weight_total=0.5000"
    assert payload["extra"] == {"slug": "us-recession-in-2025"}


def test_json_formatter_survives_bad_format_args():
    record = logging.LogRecord(
        name="x",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="score=%s regime=%s",
        args=(1,),
        exc_info=None,
    )
    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "score=%s regime=%s"


def test_coerce_log_level():
    assert _coerce_log_level("debug", default=logging.INFO) == logging.DEBUG
    assert _coerce_log_level("", default=logging.INFO) == logging.INFO
    assert _coerce_log_level("chatty", default=logging.WARNING) == logging.WARNING


def test_module_levels_follow_root_level():
    levels = _build_logger_levels(logging.INFO)
    assert levels["treasury_risk.polymarket.client"] == logging.WARNING
    assert levels["treasury_risk.risk.calculator"] == logging.INFO
    assert levels["httpx"] == logging.WARNING


def test_debug_root_opens_service_loggers_but_not_httpx():
    levels = _build_logger_levels(logging.DEBUG)
    assert levels["treasury_risk.polymarket.client"] == logging.DEBUG
    assert levels["treasury_risk.risk.fetcher"] == logging.DEBUG
    assert levels["httpx"] == logging.WARNING
    assert levels["httpcore"] == logging.WARNING


def test_configure_logging_applies_module_levels(monkeypatch):
    monkeypatch.setattr(settings, "LOG_LEVEL", "DEBUG")
    monkeypatch.setattr(settings, "ENV", "prod")
    monkeypatch.setattr(settings, "LOG_JSON", True)
    try:
        configure_logging()
        # prod never logs below INFO
        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("treasury_risk.polymarket.client").level == logging.WARNING
        assert logging.getLogger("treasury_risk.http").level == logging.INFO
        assert isinstance(logging.getLogger().handlers[0].formatter, JsonFormatter)
    finally:
        monkeypatch.undo()
        configure_logging()
