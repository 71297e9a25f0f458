import os
import random
from datetime import datetime, time, timedelta
from decimal import Decimal

from app import create_app, db
from app.models import Invoice


def seed_invoices(count: int = 50, days: int = 30) -> int:
    """Populate the database with sample invoices spread over recent days."""
    app = create_app([])
    with app.app_context():
        if Invoice.query.count():
            print("Invoices already present; skipping seed.")
            return 0
        rng = random.Random(os.getenv("SEED", "invoices"))
        today = datetime.combine(datetime.utcnow().date(), time.min)
        invoices = []
        for number in range(1, count + 1):
            invoice_date = today - timedelta(
                days=rng.randrange(days), minutes=rng.randrange(24 * 60)
            )
            invoices.append(
                Invoice(
                    invoice_number=f"INV-{number:05d}",
                    invoice_date=invoice_date,
                    total=Decimal(rng.randrange(1000, 500000)) / 100,
                    active=rng.random() > 0.2,
                )
            )
        db.session.add_all(invoices)
        db.session.commit()
        print(f"Created {len(invoices)} invoices.")
        return len(invoices)


if __name__ == "__main__":
    seed_invoices(int(os.getenv("SEED_COUNT", "50")))
