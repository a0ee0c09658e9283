"""
Cursor pagination.

Render list endpoints return an envelope of ``{"<kind>": {...}, "cursor": "..."}``
pairs. A page function maps one call to ``(items, last_cursor)``;
``list_all`` drives it until the data runs out.
"""

from __future__ import annotations

from typing import (
    Any, Awaitable, Callable, List, Optional, Protocol, Tuple, TypeVar,
)

from render_mcp.context import RequestContext
from render_mcp.errors import APIError

PAGE_LIMIT = 100

T = TypeVar("T")
P = TypeVar("P", bound="PaginationParams")


class PaginationParams(Protocol):
    def set_cursor(self, cursor: Optional[str]) -> None: ...

    def set_limit(self, limit: int) -> None: ...


PageFunc = Callable[[RequestContext, P], Awaitable[Tuple[List[T], Optional[str]]]]


async def list_all(ctx: RequestContext, params: P, list_page: PageFunc) -> List[T]:
    """
    Fetch every page and return the concatenated items.

    Stops on an empty page, or on a page shorter than PAGE_LIMIT. A full page
    always costs one more call, even if that call comes back empty. Errors
    from ``list_page`` propagate; no partial result is returned.
    """
    params.set_limit(PAGE_LIMIT)

    results: List[T] = []
    while True:
        page, cursor = await list_page(ctx, params)
        if not page:
            return results

        results.extend(page)

        if len(page) < PAGE_LIMIT:
            return results
        params.set_cursor(cursor)


def unwrap_page(envelope: Any, key: str) -> Tuple[List[Any], Optional[str]]:
    """
    Split ``[{key: item, "cursor": c}, ...]`` into items and the last cursor.

    Raises:
        APIError: the body is not a list of objects
    """
    if not envelope:
        return [], None
    if not isinstance(envelope, list) or not all(isinstance(entry, dict) for entry in envelope):
        raise APIError(
            f"unexpected response shape for {key} list: expected a list of objects, "
            f"got {type(envelope).__name__}"
        )
    items = [entry.get(key) for entry in envelope]
    return items, envelope[-1].get("cursor")
