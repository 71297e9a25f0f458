"""Utility helpers shared across the test-suite."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from app import db
from app.models import Invoice


def create_invoice(
    *,
    invoice_number: str = "INV",
    invoice_date: datetime | None = None,
    total: Any = Decimal("100.00"),
    active: bool = True,
) -> Invoice:
    """Insert and return an invoice with sensible defaults."""

    invoice = Invoice(
        invoice_number=invoice_number,
        invoice_date=invoice_date or datetime(2023, 1, 1),
        total=total,
        active=active,
    )
    db.session.add(invoice)
    db.session.commit()
    return invoice


def numbers(rows: Any) -> list[str]:
    """Return invoice numbers from model instances or serialized rows."""

    result = []
    for row in rows:
        if isinstance(row, dict):
            result.append(row["invoice_number"])
        else:
            result.append(row.invoice_number)
    return result
