import logging

from studybuddy.core.logging import (
    DOMAIN_CHAT,
    DomainDefaultFilter,
    SuppressHealthCheckFilter,
    get_domain_logger,
    redact_secrets,
)


def test_redact_secrets_masks_sensitive_values():
    raw = (
        "authorization=Bearer abc123 "
        "api_key=my-api-key "
        "token=my-token "
        "used sk-proj1234567890abcdef"
    )
    masked = redact_secrets(raw)
    assert "abc123" not in masked
    assert "my-api-key" not in masked
    assert "my-token" not in masked
    assert "sk-proj1234567890abcdef" not in masked
    assert masked.count("[REDACTED]") >= 4


def test_domain_logger_tags_records(caplog):
    logger = get_domain_logger("studybuddy.test", DOMAIN_CHAT)
    with caplog.at_level(logging.INFO, logger="studybuddy.test"):
        logger.info("hello")
    assert caplog.records[-1].domain == "chat"


def test_default_domain_is_filled_in():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", (), None)
    assert DomainDefaultFilter().filter(record)
    assert record.domain == "app"


def test_health_access_lines_are_dropped():
    keep = logging.LogRecord("uvicorn.access", logging.INFO, __file__, 1, '"POST /api/chat" 200', (), None)
    drop = logging.LogRecord("uvicorn.access", logging.INFO, __file__, 1, '"GET /health" 200', (), None)
    health_filter = SuppressHealthCheckFilter()
    assert health_filter.filter(keep)
    assert not health_filter.filter(drop)
