#!/usr/bin/env python3
"""Operator commands for payroll runs: seed rules, process, approve, resend."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy.orm import Session  # noqa: E402

from erp_payroll.core.config import get_settings  # noqa: E402
from erp_payroll.core.errors import PayrollError  # noqa: E402
from erp_payroll.core.formatting import format_total  # noqa: E402
from erp_payroll.core.log import get_logger, init_logging  # noqa: E402
from erp_payroll.db.session import create_tables, session_scope  # noqa: E402
from erp_payroll.domain.period import Period  # noqa: E402
from erp_payroll.services import (  # noqa: E402
    DeductionService,
    MailSender,
    NotificationService,
    PayrollService,
    SmtpMailSender,
)

LOGGER = get_logger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("init-db", help="Create missing payroll tables")
    commands.add_parser("seed-deductions", help="Create the default deduction rules")
    process = commands.add_parser("process", help="Generate pending payslips for a period")
    process.add_argument("period", type=_period, help="Period as YYYY-MM")
    approve = commands.add_parser("approve", help="Approve a period and notify employees")
    approve.add_argument("period", type=_period, help="Period as YYYY-MM")
    commands.add_parser("resend-failed", help="Retry failed payroll notifications")
    return parser.parse_args(argv)


def _period(value: str) -> Period:
    try:
        return Period.parse(value)
    except PayrollError as exc:
        raise argparse.ArgumentTypeError(exc.message) from exc


def run_command(args: argparse.Namespace, session: Session, mail_sender: MailSender) -> str:
    """Execute one parsed command and return its summary line."""

    settings = get_settings()
    if args.command == "seed-deductions":
        created = DeductionService(session).seed_defaults()
        names = ", ".join(rule.name for rule in created) or "none"
        return f"Seeded {len(created)} deduction rules: {names}"

    if args.command == "process":
        result = PayrollService(session).process(args.period)
        total = sum((payslip.net_salary for payslip in result.payslips), start=0)
        return (
            f"{args.period.label}: {result.created_count} payslips created "
            f"(net {format_total(total)}), {len(result.skipped)} skipped"
        )

    if args.command == "approve":
        approved = PayrollService(session).approve(args.period)
        messages = NotificationService(
            session, mail_sender, settings.notifications
        ).notify_approved(args.period)
        sent = sum(1 for message in messages if message.status.value == "SENT")
        return (
            f"{args.period.label}: {len(approved)} payslips approved, "
            f"{sent} notifications sent, {len(messages) - sent} failed"
        )

    if args.command == "resend-failed":
        result = NotificationService(session, mail_sender, settings.notifications).resend_failed()
        return (
            f"Resent {len(result.sent)} notifications, {len(result.failed)} still failing, "
            f"{len(result.exhausted)} exhausted"
        )

    raise ValueError(f"Unknown command {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    init_logging(app_name="payroll-ops", level=settings.log_level, log_dir=settings.log_dir)

    if args.command == "init-db":
        create_tables()
        print("Payroll tables are in place")
        return 0

    try:
        with session_scope() as session:
            print(run_command(args, session, SmtpMailSender(settings.mail)))
    except PayrollError as exc:
        LOGGER.error("%s failed: %s", args.command, exc.message)
        print(f"Error [{exc.code}]: {exc.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
