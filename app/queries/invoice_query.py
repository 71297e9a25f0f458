"""Filtered, ordered and paginated invoice listings."""

from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Any, Dict, List, Mapping, Optional

from app.models import Invoice, invoice_data_version
from app.queries.cached import CachePolicy
from app.queries.params import (
    DEFAULT_PAGE,
    DEFAULT_PER_PAGE,
    DEFAULT_SORT_DIRECTION,
    DEFAULT_SORT_FIELD,
    NormalizedParameters,
    RangeBound,
    SortDirection,
    normalize_params,
)


def _as_datetime(bound: RangeBound) -> Optional[datetime]:
    # Date-only bounds mean midnight of that day on both ends.
    if bound is None or isinstance(bound, datetime):
        return bound
    return datetime.combine(bound, time.min)


def filter_by_range(query, start_range: RangeBound, end_range: RangeBound):
    """Restrict ``query`` to invoices dated within the inclusive range."""

    if start_range is None and end_range is None:
        return query
    start = _as_datetime(start_range)
    end = _as_datetime(end_range)
    if start is not None:
        query = query.filter(Invoice.invoice_date >= start)
    if end is not None:
        query = query.filter(Invoice.invoice_date <= end)
    return query


def order(query, sort, direction: SortDirection):
    column = getattr(Invoice, sort.value)
    if direction is SortDirection.ASC:
        return query.order_by(column.asc(), Invoice.id.asc())
    return query.order_by(column.desc(), Invoice.id.desc())


def paginate(query, page: int, per_page: int):
    offset = max(page - 1, 0) * per_page
    return query.offset(offset).limit(per_page)


class InvoiceQuery:
    """Build the invoice listing for a base query and request parameters.

    ``call`` returns an unexecuted SQLAlchemy query with the range filter,
    ordering and pagination applied in that order. Use ``materialize`` to run
    it and obtain JSON-ready rows.
    """

    DEFAULT_PAGE = DEFAULT_PAGE
    DEFAULT_PER_PAGE = DEFAULT_PER_PAGE
    DEFAULT_SORT_FIELD = DEFAULT_SORT_FIELD
    DEFAULT_SORT_DIRECTION = DEFAULT_SORT_DIRECTION

    cache_policy = CachePolicy(
        expires_in=timedelta(minutes=5),
        version_by=lambda query: invoice_data_version(),
    )

    def __init__(self, scope=None, params: Optional[Mapping[str, Any]] = None):
        self.params = self.normalize(params)
        self.scope = scope if scope is not None else Invoice.query

    @staticmethod
    def normalize(params: Optional[Mapping[str, Any]]) -> NormalizedParameters:
        return normalize_params(params)

    @staticmethod
    def build(scope, params: NormalizedParameters):
        query = scope
        if params.has_range:
            query = filter_by_range(query, params.start_range, params.end_range)
        query = order(query, params.sort, params.direction)
        return paginate(query, params.page, params.per_page)

    def call(self):
        return self.build(self.scope, self.params)

    def fingerprint(self):
        return self.params.fingerprint()

    def materialize(self) -> List[Dict[str, Any]]:
        return [invoice.to_dict() for invoice in self.call().all()]


def call(scope=None, params: Optional[Mapping[str, Any]] = None):
    """Return the uncached listing query for ``scope`` and ``params``."""
    return InvoiceQuery(scope, params).call()

