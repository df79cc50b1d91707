"""Single-Item Narrower — exact lookups on top of paginated node queries.

Invariants:
    - Issues exactly one list query starting at sn with quantity 1
    - Empty result → NotFoundError; otherwise the sole element
    - Never fetches the full list and indexes into it
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from ledger_gateway.core.errors import ErrorContext, NotFoundError

T = TypeVar("T")


async def fetch_single(
    list_query: Callable[[int, int], Awaitable[list[T]]],
    sn: int,
    what: str = "Event",
) -> T:
    """Narrow list_query(from_=sn, quantity=1) to a single item."""
    items = await list_query(sn, 1)
    if not items:
        raise NotFoundError(
            f"{what} with sn {sn} not found", ErrorContext(sn=sn),
        )
    return items[0]
