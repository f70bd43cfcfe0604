"""Testes para config.logging.

Cobre: configure_logging, get_logger, CorrelationIdFilter,
create_json_formatter e integração com correlation_scope.
"""

from __future__ import annotations

import io
import json
import logging

import pytest

from app.observability import correlation_scope, get_correlation_id
from config.logging import (
    DEFAULT_SERVICE_NAME,
    FIELD_RENAME_MAP,
    NOISY_LOGGERS,
    REQUIRED_LOG_FIELDS,
    CorrelationIdFilter,
    configure_logging,
    create_json_formatter,
    get_logger,
)
from config.logging.config import VALID_LOG_LEVELS


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    noisy_levels = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    yield
    root.handlers = handlers
    root.setLevel(level)
    for name, noisy_level in noisy_levels.items():
        logging.getLogger(name).setLevel(noisy_level)


def _record(msg: str = "message", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestConfigureLogging:
    """Testes para configure_logging."""

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("INFO", logging.INFO),
            ("DEBUG", logging.DEBUG),
            ("warning", logging.WARNING),  # case insensitive
            ("CRITICAL", logging.CRITICAL),
        ],
    )
    def test_configure_logging_sets_root_level(self, level: str, expected: int) -> None:
        configure_logging(level=level)
        assert logging.getLogger().level == expected

    def test_configure_logging_invalid_level_raises(self) -> None:
        with pytest.raises(ValueError, match="Nível de log inválido"):
            configure_logging(level="INVALID")

    def test_configure_logging_replaces_handlers_and_adds_filter(self) -> None:
        root = logging.getLogger()
        root.handlers = [logging.NullHandler(), logging.NullHandler()]
        configure_logging(correlation_id_getter=lambda: "custom-corr-id")

        assert len(root.handlers) == 1
        assert any(isinstance(f, CorrelationIdFilter) for f in root.handlers[0].filters)

    def test_transport_loggers_are_quieted_outside_debug(self) -> None:
        configure_logging(level="INFO")
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_constants(self) -> None:
        assert {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} == VALID_LOG_LEVELS
        assert DEFAULT_SERVICE_NAME == "medicore-scheduling"


class TestGetLogger:
    """Testes para get_logger."""

    def test_get_logger_returns_named_singleton(self) -> None:
        logger = get_logger("test.module")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.module"
        assert get_logger("test.module") is logger


class TestCorrelationIdFilter:
    """Testes para CorrelationIdFilter."""

    def test_filter_adds_correlation_id_from_getter(self) -> None:
        filter_ = CorrelationIdFilter("my_service", lambda: "corr-123")
        record = _record()
        assert filter_.filter(record) is True
        assert record.correlation_id == "corr-123"
        assert record.service == "my_service"

    def test_filter_preserves_explicit_correlation_id(self) -> None:
        filter_ = CorrelationIdFilter("svc", lambda: "from-getter")
        record = _record()
        record.correlation_id = "explicit-id"
        filter_.filter(record)
        assert record.correlation_id == "explicit-id"

    def test_filter_uses_empty_string_when_no_getter(self) -> None:
        filter_ = CorrelationIdFilter("service_name", None)
        record = _record(level=logging.ERROR)
        assert filter_.filter(record) is True
        assert record.correlation_id == ""


class TestCreateJsonFormatter:
    """Testes para create_json_formatter e constantes."""

    def test_required_fields_and_renames(self) -> None:
        assert REQUIRED_LOG_FIELDS == (
            "asctime",
            "levelname",
            "name",
            "message",
            "correlation_id",
            "service",
        )
        assert FIELD_RENAME_MAP == {"levelname": "level", "name": "logger"}

    def test_json_formatter_formats_record(self) -> None:
        record = _record("mutation_confirmed")
        record.correlation_id = "abc-123"
        record.service = "test_service"

        payload = json.loads(create_json_formatter().format(record))

        assert payload["message"] == "mutation_confirmed"
        assert payload["logger"] == "test"
        assert payload["level"] == "INFO"
        assert payload["correlation_id"] == "abc-123"


class TestLoggingIntegration:
    """Fluxo completo: configure, log com extra e correlation_scope."""

    def test_json_lines_carry_extra_and_correlation(self) -> None:
        stream = io.StringIO()
        configure_logging(
            level="INFO",
            service_name="integration_test",
            correlation_id_getter=get_correlation_id,
            stream=stream,
        )
        logger = get_logger("integration.test")

        with correlation_scope("op-42"):
            logger.info("appointment_booked", extra={"appointment_id": "apt-1"})
        logger.debug("ignored")

        lines = [json.loads(line) for line in stream.getvalue().splitlines()]
        assert len(lines) == 1
        assert lines[0]["service"] == "integration_test"
        assert lines[0]["correlation_id"] == "op-42"
        assert lines[0]["appointment_id"] == "apt-1"

    def test_correlation_scope_reuses_outer_id(self) -> None:
        with correlation_scope() as outer:
            assert outer
            with correlation_scope() as inner:
                assert inner == outer
            with correlation_scope("explicit") as forced:
                assert forced == "explicit"
            assert get_correlation_id() == outer
        assert get_correlation_id() == ""
