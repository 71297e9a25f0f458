"""Error types raised while turning request parameters into invoice queries."""

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError


class InvalidQueryParameter(ValueError):
    """Raised when a caller supplies a query parameter that cannot be used."""

    def __init__(self, param: str, value, message: str):
        super().__init__(message)
        self.param = param
        self.value = value


class InvalidDateFormat(InvalidQueryParameter):
    """Raised when ``start_range`` or ``end_range`` cannot be parsed."""

    def __init__(self, param: str, value):
        super().__init__(param, value, f"Invalid date for {param}: {value!r}")


class InvalidNumberFormat(InvalidQueryParameter):
    """Raised when ``page`` or ``per_page`` is not a usable integer."""

    def __init__(self, param: str, value):
        super().__init__(param, value, f"Invalid number for {param}: {value!r}")


class InvalidSortField(InvalidQueryParameter):
    """Raised when ``sort`` names a column that cannot be sorted on."""

    def __init__(self, value):
        super().__init__("sort", value, f"Cannot sort invoices by {value!r}")


class InvalidSortDirection(InvalidQueryParameter):
    """Raised when ``direction`` is neither ``asc`` nor ``desc``."""

    def __init__(self, value):
        super().__init__(
            "direction", value, f"Sort direction must be 'asc' or 'desc', got {value!r}"
        )


# Failures of the database or the cache store. These are never wrapped or
# cached; the application maps them to a 503 response.
BACKING_STORE_ERRORS = (SQLAlchemyError, RedisError)
