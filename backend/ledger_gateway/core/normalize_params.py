"""Parameter Normalizer — raw path/query strings into typed, constrained values.

Invariants:
    - Pure: no IO, no logging, no node calls
    - Empty (or whitespace-only) path identifiers raise RequestError
    - sn and pagination fields are ASCII decimal digits within 0..2**64-1
    - Present-but-unparseable query values raise; they never default silently
    - Unrouted paths with an empty segment are empty identifiers

Design Decisions:
    - Query/path values arrive as raw strings from the routes: int() would accept
      "+1", " 1" and "1_000", so digits are matched explicitly
"""

import re
from dataclasses import dataclass

from ledger_gateway.core.domain_types import MAX_U64, SerialNumber
from ledger_gateway.core.errors import ErrorContext, RequestError

_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class Pagination:
    """Pagination window. None means the node's default."""
    from_: int | None = None
    quantity: int | None = None


def require_id(value: str | None, name: str) -> str:
    """Validate a path identifier. Returns it unchanged."""
    if value is None or not value.strip():
        raise RequestError(f"Error in path parameter '{name}': empty identifier")
    return value


def _parse_u64(raw: str, name: str) -> int:
    if not _DIGITS.fullmatch(raw):
        raise RequestError(
            f"Error in parameter '{name}': expected a non-negative integer, got {raw!r}",
        )
    value = int(raw)
    if value > MAX_U64:
        raise RequestError(f"Error in parameter '{name}': value out of range")
    return value


def parse_sn(raw: str) -> SerialNumber:
    """Parse an event serial number path segment."""
    try:
        return SerialNumber(_parse_u64(raw, "sn"))
    except RequestError as e:
        e.context = ErrorContext(debug_info={"raw_sn": raw})
        raise


def parse_count(raw: str | None, name: str) -> int | None:
    """Parse an optional non-negative query integer (absent → None)."""
    if raw is None:
        return None
    return _parse_u64(raw, name)


def parse_pagination(
    from_raw: str | None, quantity_raw: str | None,
) -> Pagination:
    """Parse the from/quantity query pair."""
    return Pagination(
        from_=parse_count(from_raw, "from"),
        quantity=parse_count(quantity_raw, "quantity"),
    )


def has_empty_segment(path: str) -> bool:
    """True when a path has an empty segment ("/a//b" or a trailing "/").

    Such paths cannot match a route with an identifier in that position, so an
    unrouted one means an empty identifier was sent.
    """
    return "" in path.split("/")[1:]
