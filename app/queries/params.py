"""Parsing of raw request parameters for invoice listing queries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Tuple, Union

from app.queries.errors import (
    InvalidDateFormat,
    InvalidNumberFormat,
    InvalidSortDirection,
    InvalidSortField,
)

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
MAX_SQL_INTEGER = 2**63 - 1

RangeBound = Union[date, datetime, None]


class SortField(str, Enum):
    """Invoice columns a listing may be ordered by."""

    INVOICE_NUMBER = "invoice_number"
    INVOICE_DATE = "invoice_date"
    TOTAL = "total"
    ACTIVE = "active"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


DEFAULT_SORT_FIELD = SortField.INVOICE_DATE
DEFAULT_SORT_DIRECTION = SortDirection.DESC


@dataclass(frozen=True)
class NormalizedParameters:
    """Typed listing parameters derived from a raw request mapping."""

    start_range: RangeBound = None
    end_range: RangeBound = None
    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE
    sort: SortField = DEFAULT_SORT_FIELD
    direction: SortDirection = DEFAULT_SORT_DIRECTION

    @property
    def has_range(self) -> bool:
        return self.start_range is not None or self.end_range is not None

    def fingerprint(self) -> Tuple[Tuple[str, Optional[str]], ...]:
        """Return the parameters as name/value pairs sorted by name.

        Values are rendered as strings so the result can be embedded in a
        cache key regardless of the store's serialization format.
        """

        values = {
            "start_range": _bound_text(self.start_range),
            "end_range": _bound_text(self.end_range),
            "page": str(self.page),
            "per_page": str(self.per_page),
            "sort": self.sort.value,
            "direction": self.direction.value,
        }
        return tuple(sorted(values.items()))


def _bound_text(value: RangeBound) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_range_bound(param: str, value: Any) -> RangeBound:
    """Parse a range bound with date or date-time precision.

    Strings containing a colon carry a time component and produce a naive UTC
    ``datetime``; other strings produce a ``date``. Blank values mean the
    range is open on that side.
    """

    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        return _to_naive_utc(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateFormat(param, value)

    text = value.strip()
    try:
        if ":" in text:
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            return _to_naive_utc(datetime.fromisoformat(text))
        return date.fromisoformat(text)
    except ValueError as exc:
        raise InvalidDateFormat(param, value) from exc


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_int(param: str, value: Any, default: int) -> int:
    """Return ``value`` as an integer, or ``default`` when it is blank."""

    if _is_blank(value):
        return default
    if isinstance(value, bool):
        raise InvalidNumberFormat(param, value)
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError as exc:
            raise InvalidNumberFormat(param, value) from exc
    else:
        raise InvalidNumberFormat(param, value)
    if abs(number) > MAX_SQL_INTEGER:
        raise InvalidNumberFormat(param, value)
    return number


def parse_sort(value: Any) -> SortField:
    if _is_blank(value):
        return DEFAULT_SORT_FIELD
    try:
        return SortField(str(value).strip())
    except ValueError as exc:
        raise InvalidSortField(value) from exc


def parse_direction(value: Any) -> SortDirection:
    if _is_blank(value):
        return DEFAULT_SORT_DIRECTION
    try:
        return SortDirection(str(value).strip().lower())
    except ValueError as exc:
        raise InvalidSortDirection(value) from exc


def normalize_params(raw: Optional[Mapping[str, Any]]) -> NormalizedParameters:
    """Build :class:`NormalizedParameters` from a raw parameter mapping.

    Only the six listing parameters are read; other keys are ignored. Any
    value that cannot be interpreted raises a subclass of
    :class:`~app.queries.errors.InvalidQueryParameter`.
    """

    raw = raw or {}
    per_page = parse_int("per_page", raw.get("per_page"), DEFAULT_PER_PAGE)
    if per_page < 0:
        raise InvalidNumberFormat("per_page", raw.get("per_page"))
    page = parse_int("page", raw.get("page"), DEFAULT_PAGE)
    # OFFSET and LIMIT are bound as signed 64-bit integers.
    if max(page - 1, 0) * per_page > MAX_SQL_INTEGER:
        raise InvalidNumberFormat("page", raw.get("page"))
    return NormalizedParameters(
        start_range=parse_range_bound("start_range", raw.get("start_range")),
        end_range=parse_range_bound("end_range", raw.get("end_range")),
        page=page,
        per_page=per_page,
        sort=parse_sort(raw.get("sort")),
        direction=parse_direction(raw.get("direction")),
    )
