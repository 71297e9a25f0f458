"""Daily invoice reports and the background thread that schedules them."""

from __future__ import annotations

import time
from datetime import date, datetime, time as dt_time, timedelta
from threading import Event, Thread
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import func

from app import db
from app.models import Invoice
from app.queries.invoice_query import InvoiceQuery
from app.services import report_mailer

TOP_LIMIT = 10

_reports_thread: Thread | None = None
_stop_event = Event()


def _reported_day(now: Optional[datetime]) -> datetime:
    now = now or datetime.utcnow()
    return datetime.combine((now - timedelta(days=1)).date(), dt_time.min)


def top_invoices(report_day: datetime) -> List[Dict[str, Any]]:
    """Return the highest value active invoices dated on ``report_day``."""
    params = {
        "start_range": report_day,
        "end_range": datetime.combine(report_day.date(), dt_time.max),
        "per_page": TOP_LIMIT,
        "sort": "total",
        "direction": "desc",
    }
    return InvoiceQuery(Invoice.active_query(), params).materialize()


def top_sell_dates(limit: int = TOP_LIMIT) -> List[Dict[str, Any]]:
    """Return the calendar days with the largest summed active totals."""
    day = func.date(Invoice.invoice_date)
    total_sum = func.sum(Invoice.total)
    rows = (
        db.session.query(day.label("day"), total_sum.label("total_sum"))
        .filter(Invoice.active.is_(True), Invoice.invoice_date.isnot(None))
        .group_by(day)
        .order_by(total_sum.desc())
        .limit(limit)
        .all()
    )
    results = []
    for row in rows:
        # SQLite returns DATE() as text, other backends as a date.
        row_day = row.day
        if isinstance(row_day, str):
            row_day = date.fromisoformat(row_day)
        elif isinstance(row_day, datetime):
            row_day = row_day.date()
        results.append({"date": row_day, "total": float(row.total_sum or 0)})
    return results


def daily_top_invoices(now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Email yesterday's top invoices when there are any."""
    report_day = _reported_day(now)
    invoices = top_invoices(report_day)
    if invoices:
        report_mailer.send_top_invoices(report_day, invoices)
    else:
        current_app.logger.info(
            "No invoices dated %s; skipping top invoices report",
            report_day.date(),
        )
    return invoices


def daily_top_sell_dates(now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Email the best sales days when there are any."""
    report_day = _reported_day(now)
    sales_days = top_sell_dates()
    if sales_days:
        report_mailer.send_top_sales_days(report_day, sales_days)
    return sales_days


def run_daily_reports(now: Optional[datetime] = None) -> None:
    for job in (daily_top_invoices, daily_top_sell_dates):
        try:
            job(now)
        except Exception:
            current_app.logger.exception("Daily report %s failed", job.__name__)


def _reports_loop(app, interval: int):
    next_run = time.monotonic() + interval
    while True:
        remaining = next_run - time.monotonic()
        if remaining > 0:
            if _stop_event.wait(remaining):
                break
        elif _stop_event.is_set():
            break

        with app.app_context():
            run_daily_reports()

        next_run += interval
        current_time = time.monotonic()
        while next_run <= current_time:
            next_run += interval


def start_daily_reports_thread(app):
    """Start or restart the daily reports thread based on app config."""
    global _reports_thread, _stop_event
    if hasattr(app, "_get_current_object"):
        app = app._get_current_object()
    if _reports_thread and _reports_thread.is_alive():
        _stop_event.set()
        _reports_thread.join()
        _stop_event = Event()

    if not app.config.get("DAILY_REPORTS_ENABLED"):
        return

    interval = app.config.get("DAILY_REPORTS_INTERVAL")
    if not interval:
        return
    _reports_thread = Thread(
        target=_reports_loop, args=(app, interval), daemon=True
    )
    _reports_thread.start()


__all__ = [
    "daily_top_invoices",
    "daily_top_sell_dates",
    "run_daily_reports",
    "start_daily_reports_thread",
    "top_invoices",
    "top_sell_dates",
]
