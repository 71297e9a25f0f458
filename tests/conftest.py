from __future__ import annotations

import os
import sys
from datetime import datetime, time, timedelta
from decimal import Decimal

import pytest

from app import create_app, db
from tests.utils import create_invoice

# Ensure the app package is importable when tests change directories
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, BASE_DIR)


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "testsecret")
    monkeypatch.setenv("QUERY_CACHE_URL", "memory://")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_PATH", raising=False)
    monkeypatch.delenv("INVOICE_QUERY_CACHE_ENABLED", raising=False)
    monkeypatch.delenv("INVOICE_QUERY_CACHE_TTL", raising=False)
    monkeypatch.delenv("DAILY_REPORTS_ENABLED", raising=False)

    # Ensure a clean database for each test within the temp directory
    db_path = tmp_path / "invoices.db"
    if db_path.exists():
        os.remove(db_path)

    cwd = os.getcwd()
    os.chdir(tmp_path)
    app = create_app(["--demo"])
    os.chdir(cwd)

    app.config.update({"TESTING": True})

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def today():
    return datetime.combine(datetime.utcnow().date(), time.min)


@pytest.fixture
def invoices(app, today):
    """Five invoices one day apart, from three days ago until tomorrow."""
    return {
        "three_days_ago": create_invoice(
            invoice_number="INV-1",
            invoice_date=today - timedelta(days=3),
            total=Decimal("1000.00"),
        ),
        "two_days_ago": create_invoice(
            invoice_number="INV-2",
            invoice_date=today - timedelta(days=2),
            total=Decimal("1500.00"),
        ),
        "yesterday": create_invoice(
            invoice_number="INV-3",
            invoice_date=today - timedelta(days=1),
            total=Decimal("800.00"),
            active=False,
        ),
        "today": create_invoice(
            invoice_number="INV-4",
            invoice_date=today,
            total=Decimal("2000.00"),
        ),
        "tomorrow": create_invoice(
            invoice_number="INV-5",
            invoice_date=today + timedelta(days=1),
            total=Decimal("500.00"),
        ),
    }
