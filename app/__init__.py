import os
from datetime import datetime

from dotenv import load_dotenv
from flask import Flask, current_app, jsonify
from flask_sqlalchemy import SQLAlchemy

load_dotenv()
db = SQLAlchemy()


def _get_bool_env(var_name: str, default: bool = False) -> bool:
    """Return a boolean environment variable value."""

    value = os.getenv(var_name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(var_name: str, default: int) -> int:
    """Return an integer environment variable value."""

    value = os.getenv(var_name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise RuntimeError(f"{var_name} must be an integer, got {value!r}") from None


def _database_uri(base_dir: str) -> str:
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return database_url
    # DATABASE_PATH may point at a directory (e.g. a mounted volume) in which
    # case the SQLite file is stored inside it.
    default_db_path = os.path.join(base_dir, "invoices.db")
    db_path = os.getenv("DATABASE_PATH", default_db_path)
    if os.path.isdir(db_path):
        db_path = os.path.join(db_path, "invoices.db")
    os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
    return f"sqlite:///{db_path}"


def register_error_handlers(app):
    """Map query input errors and store failures to JSON responses."""
    from app.queries.errors import BACKING_STORE_ERRORS, InvalidQueryParameter

    @app.errorhandler(InvalidQueryParameter)
    def bad_request(error):
        current_app.logger.info("Rejected invoice query: %s", error)
        return jsonify({"error": str(error)}), 400

    for error_class in BACKING_STORE_ERRORS:

        @app.errorhandler(error_class)
        def store_unavailable(error):
            current_app.logger.exception("Backing store failure: %s", error)
            return jsonify({"error": "Invoice data is temporarily unavailable"}), 503


def create_app(args: list):
    """Application factory used by Flask."""
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY")
    app.config["START_TIME"] = datetime.utcnow()

    base_dir = os.getcwd()
    app.config["SQLALCHEMY_DATABASE_URI"] = _database_uri(base_dir)

    app.config["QUERY_CACHE_URL"] = os.getenv("QUERY_CACHE_URL", "memory://")
    app.config["QUERY_CACHE_MAX_SIZE"] = _get_int_env("QUERY_CACHE_MAX_SIZE", 1024)
    app.config["INVOICE_QUERY_CACHE_ENABLED"] = _get_bool_env(
        "INVOICE_QUERY_CACHE_ENABLED", default=True
    )
    app.config["INVOICE_QUERY_CACHE_TTL"] = _get_int_env(
        "INVOICE_QUERY_CACHE_TTL", 300
    )
    app.config["REPORT_RECIPIENT"] = os.getenv(
        "REPORT_RECIPIENT", "admin@example.com"
    )
    app.config["DAILY_REPORTS_ENABLED"] = _get_bool_env(
        "DAILY_REPORTS_ENABLED", default=False
    )
    app.config["DAILY_REPORTS_INTERVAL"] = _get_int_env(
        "DAILY_REPORTS_INTERVAL", 60 * 60 * 24
    )

    if "--demo" in args:
        app.config["DEMO"] = True
        app.config["DAILY_REPORTS_ENABLED"] = False
    else:
        app.config["DEMO"] = False

    db.init_app(app)
    from flask_migrate import Migrate

    Migrate(app, db)

    from app.cache_store import create_cache_store

    app.extensions["query_cache_store"] = create_cache_store(
        app.config["QUERY_CACHE_URL"],
        max_size=app.config["QUERY_CACHE_MAX_SIZE"],
    )

    register_error_handlers(app)

    with app.app_context():
        # Ensure models are imported and the schema exists even when
        # migrations have not been executed yet.
        from . import models  # noqa: F401

        db.create_all()

        from app.routes.invoice_routes import invoice

        app.register_blueprint(invoice)

        from app.services.daily_reports import start_daily_reports_thread

        start_daily_reports_thread(app)

    return app
