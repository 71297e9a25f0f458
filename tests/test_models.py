from datetime import datetime
from decimal import Decimal

from app import db
from app.models import Invoice, invoice_data_version
from tests.utils import create_invoice


def test_to_dict_serializes_columns(app):
    invoice = create_invoice(
        invoice_number="INV-42",
        invoice_date=datetime(2023, 6, 15, 9, 30),
        total=Decimal("123.40"),
        active=False,
    )
    assert invoice.to_dict() == {
        "id": invoice.id,
        "invoice_number": "INV-42",
        "invoice_date": "2023-06-15T09:30:00",
        "total": "123.40",
        "active": False,
    }


def test_to_dict_handles_missing_values(app):
    invoice = Invoice(invoice_number="EMPTY")
    db.session.add(invoice)
    db.session.commit()
    data = invoice.to_dict()
    assert data["invoice_date"] is None
    assert data["total"] is None
    assert data["active"] is True


def test_active_query_excludes_inactive(app, invoices):
    assert {inv.invoice_number for inv in Invoice.active_query()} == {
        "INV-1",
        "INV-2",
        "INV-4",
        "INV-5",
    }


def test_data_version_changes_with_contents(app):
    empty = invoice_data_version()
    assert empty == ("0", "0", "0")

    invoice = create_invoice(total=Decimal("10.00"))
    added = invoice_data_version()
    assert added != empty

    invoice.total = Decimal("20.00")
    db.session.commit()
    assert invoice_data_version() != added

    db.session.delete(invoice)
    db.session.commit()
    assert invoice_data_version()[0] == "0"
