from decimal import Decimal
from typing import Any, Dict, Tuple

from sqlalchemy import func

from app import db


class Invoice(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    invoice_number = db.Column(db.String(50), nullable=True)
    invoice_date = db.Column(db.DateTime, nullable=True, index=True)
    total = db.Column(db.Numeric(12, 2), nullable=True)
    active = db.Column(db.Boolean, nullable=True, default=True)

    __table_args__ = (db.Index("ix_invoice_active_date", "active", "invoice_date"),)

    @classmethod
    def active_query(cls):
        """Return a query restricted to active invoices."""
        return cls.query.filter(cls.active.is_(True))

    def to_dict(self) -> Dict[str, Any]:
        total = self.total
        if total is not None and not isinstance(total, Decimal):
            total = Decimal(str(total))
        return {
            "id": self.id,
            "invoice_number": self.invoice_number,
            "invoice_date": (
                self.invoice_date.isoformat() if self.invoice_date else None
            ),
            "total": str(total) if total is not None else None,
            "active": bool(self.active),
        }

    def __repr__(self):
        return f"<Invoice {self.invoice_number or self.id}>"


def invoice_data_version() -> Tuple[str, str, str]:
    """Return a cheap fingerprint of the invoice table contents.

    The tuple changes whenever an invoice is added, removed, or has its total
    changed, which makes it suitable as a cache version token.
    """

    count, max_id, total = db.session.query(
        func.count(Invoice.id), func.max(Invoice.id), func.sum(Invoice.total)
    ).one()
    return (str(count), str(max_id or 0), str(total or 0))
