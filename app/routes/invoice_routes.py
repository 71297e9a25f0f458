from datetime import timedelta

from flask import Blueprint, current_app, jsonify, request

from app.models import Invoice
from app.queries.cached import CachedQuery
from app.queries.invoice_query import InvoiceQuery

invoice = Blueprint("invoice", __name__)


def _invoice_listing() -> CachedQuery:
    """Return the cached invoice query configured for the current app."""
    listing = current_app.extensions.get("invoice_listing")
    if listing is None:
        listing = CachedQuery(
            InvoiceQuery, current_app.extensions["query_cache_store"]
        )
        listing.configure(
            expires_in=timedelta(
                seconds=current_app.config["INVOICE_QUERY_CACHE_TTL"]
            )
        )
        current_app.extensions["invoice_listing"] = listing
    return listing


@invoice.route("/invoices", methods=["GET"])
def view_invoices():
    """Return invoices matching the range, pagination and sort arguments."""
    if current_app.config.get("INVOICE_QUERY_CACHE_ENABLED", True):
        invoices = _invoice_listing().cached_call(Invoice.query, request.args)
    else:
        invoices = InvoiceQuery(Invoice.query, request.args).materialize()
    return jsonify({"invoices": invoices})
