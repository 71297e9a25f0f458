"""Compose and deliver the daily invoice report emails."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Union

from flask import current_app

from app.utils.email import send_email

ReportDate = Union[date, datetime]


def _recipient() -> str:
    return current_app.config.get("REPORT_RECIPIENT") or "admin@example.com"


def _format_report_date(report_date: ReportDate) -> str:
    return report_date.strftime("%B %d, %Y")


def _money(value: Any) -> str:
    return f"{Decimal(str(value or 0)):,.2f}"


def top_invoices_message(report_date: ReportDate, invoices: Iterable[Dict[str, Any]]):
    """Return ``(subject, body)`` for the top invoices report."""

    invoices = list(invoices)
    total_amount = sum(Decimal(str(inv.get("total") or 0)) for inv in invoices)
    subject = f"Top 10 invoices of the day - {_format_report_date(report_date)}"
    lines = [f"Top invoices for {_format_report_date(report_date)}", ""]
    for position, inv in enumerate(invoices, start=1):
        lines.append(
            f"{position:>2}. {inv.get('invoice_number') or inv.get('id')}"
            f"  {inv.get('invoice_date') or ''}  {_money(inv.get('total'))}"
        )
    lines.extend(["", f"Total: {_money(total_amount)}"])
    return subject, "\n".join(lines)


def top_sales_days_message(report_date: ReportDate, top_sales_days: List[Dict[str, Any]]):
    """Return ``(subject, body)`` for the top sales days report."""

    subject = f"Top 10 sales days - {_format_report_date(report_date)}"
    lines = [f"Best sales days as of {_format_report_date(report_date)}", ""]
    for position, row in enumerate(top_sales_days, start=1):
        lines.append(
            f"{position:>2}. {row['date'].isoformat()}  {_money(row['total'])}"
        )
    return subject, "\n".join(lines)


def send_top_invoices(report_date: ReportDate, invoices):
    subject, body = top_invoices_message(report_date, invoices)
    current_app.logger.info("Sending top invoices report to %s", _recipient())
    return send_email(_recipient(), subject, body)


def send_top_sales_days(report_date: ReportDate, top_sales_days):
    subject, body = top_sales_days_message(report_date, top_sales_days)
    current_app.logger.info("Sending top sales days report to %s", _recipient())
    return send_email(_recipient(), subject, body)
