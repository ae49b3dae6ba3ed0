"""Tests for the payroll log context and batch timer."""
from __future__ import annotations

import logging

import pytest

from erp_payroll.core.log import BatchTimer, LoggingOptions, log_context, timeit
from erp_payroll.core.log.context import PayrollContextFilter


def _record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("erp_payroll.test", logging.INFO, __file__, 1, message, None, None)


def test_records_carry_period_and_employee() -> None:
    context_filter = PayrollContextFilter()

    with log_context.scope(period="2024-06"):
        with log_context.scope(employee="EMP001"):
            inner = _record()
            context_filter.filter(inner)
        outer = _record()
        context_filter.filter(outer)
    bare = _record()
    context_filter.filter(bare)

    assert (inner.period, inner.employee, inner.payroll_tag) == ("2024-06", "EMP001", "[2024-06 EMP001] ")
    assert (outer.period, outer.employee, outer.payroll_tag) == ("2024-06", "-", "[2024-06] ")
    assert (bare.period, bare.employee, bare.payroll_tag) == ("-", "-", "")


def test_filter_keeps_tag_set_before_queueing() -> None:
    context_filter = PayrollContextFilter()
    with log_context.scope(period="2024-06", employee="EMP002"):
        record = _record()
        context_filter.filter(record)

    context_filter.filter(record)

    assert record.payroll_tag == "[2024-06 EMP002] "


def test_timer_reports_progress_against_total(caplog) -> None:
    logger = logging.getLogger("erp_payroll.test.timer")

    with caplog.at_level(logging.INFO, logger="erp_payroll.test.timer"):
        with timeit("Payroll run 2024-06", logger=logger, unit="employees", total=3) as timer:
            timer.add()
            timer.add()

    assert "Payroll run 2024-06 finished in" in caplog.text
    assert "2 of 3 employees" in caplog.text


def test_timer_logs_failure_and_reraises(caplog) -> None:
    logger = logging.getLogger("erp_payroll.test.timer")

    with caplog.at_level(logging.INFO, logger="erp_payroll.test.timer"):
        with pytest.raises(RuntimeError):
            with BatchTimer("Notifications 2024-06", logger=logger, unit="messages") as timer:
                timer.add()
                raise RuntimeError("boom")

    failures = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert "Notifications 2024-06 failed after" in failures[0].getMessage()
    assert "1 messages" in failures[0].getMessage()


def test_options_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_DIR", "")

    options = LoggingOptions.from_env(app_name="payroll-ops")

    assert options.numeric_level == logging.DEBUG
    assert options.log_dir is None
    assert options.app_name == "payroll-ops"
    with pytest.raises(TypeError):
        LoggingOptions.from_env(colour=True)
