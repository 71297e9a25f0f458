"""Query objects for invoice listings."""

from .cached import CachedQuery, CachePolicy
from .errors import (
    InvalidDateFormat,
    InvalidNumberFormat,
    InvalidQueryParameter,
    InvalidSortDirection,
    InvalidSortField,
)
from .invoice_query import InvoiceQuery, call
from .params import NormalizedParameters, SortDirection, SortField, normalize_params

__all__ = [
    "CachedQuery",
    "CachePolicy",
    "InvalidDateFormat",
    "InvalidNumberFormat",
    "InvalidQueryParameter",
    "InvalidSortDirection",
    "InvalidSortField",
    "InvoiceQuery",
    "NormalizedParameters",
    "SortDirection",
    "SortField",
    "call",
    "normalize_params",
]
