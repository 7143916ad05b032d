"""Shared fetch loop for the upstream archives.

Every upstream is described by a :class:`Source`: how to build the request for
a cursor, how to turn a JSON payload into a :class:`Page`, and a
:class:`PagingStrategy` that decides which cursor comes next after a success,
a failed call or an unreadable payload. :func:`fetch_source` drives the loop,
keeping calls strictly sequential and spaced by a fixed delay.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[Any]]


@dataclass(slots=True)
class Page(Generic[T]):
    records: list[T]
    total_pages: int | None = None
    offset: int | None = None
    hits: int | None = None


@dataclass(slots=True)
class Request:
    url: str
    params: dict[str, Any] = field(default_factory=dict)


class PagingStrategy(ABC):
    @abstractmethod
    def first(self) -> Any | None:
        """Cursor of the first call, or None when there is nothing to fetch."""

    @abstractmethod
    def after_success(self, cursor: Any, page: Page[Any]) -> Any | None: ...

    @abstractmethod
    def after_failure(self, cursor: Any) -> Any | None: ...

    @abstractmethod
    def after_malformed(self, cursor: Any) -> Any | None: ...


@dataclass(slots=True)
class TotalPagesPaging(PagingStrategy):
    """Numbered pages; each response declares how many pages exist.

    A failed page is skipped rather than re-requested.
    """

    page_limit: int
    first_page: int = 1

    def first(self) -> int | None:
        return self.first_page if self.first_page < self.page_limit else None

    def after_success(self, cursor: int, page: Page[Any]) -> int | None:
        if page.total_pages is None or cursor >= page.total_pages:
            return None
        return self._advance(cursor)

    def after_failure(self, cursor: int) -> int | None:
        return self._advance(cursor)

    def after_malformed(self, cursor: int) -> int | None:
        return None

    def _advance(self, cursor: int) -> int | None:
        following = cursor + 1
        return following if following < self.page_limit else None


@dataclass(slots=True)
class OffsetPaging(PagingStrategy):
    """Numbered pages; each response declares its result offset and total hits."""

    page_limit: int
    first_page: int = 0

    def first(self) -> int | None:
        return self.first_page if self.first_page < self.page_limit else None

    def after_success(self, cursor: int, page: Page[Any]) -> int | None:
        if page.offset is None or page.hits is None:
            return None
        if page.offset >= page.hits:
            return None
        return self._advance(cursor)

    def after_failure(self, cursor: int) -> int | None:
        return self._advance(cursor)

    def after_malformed(self, cursor: int) -> int | None:
        return None

    def _advance(self, cursor: int) -> int | None:
        following = cursor + 1
        return following if following < self.page_limit else None


class FixedListPaging(PagingStrategy):
    """Exactly one call per item, whatever happens to the others."""

    def __init__(self, items: Sequence[Any]) -> None:
        self.items = tuple(items)

    def first(self) -> int | None:
        return 0 if self.items else None

    def after_success(self, cursor: int, page: Page[Any]) -> int | None:
        return self._advance(cursor)

    def after_failure(self, cursor: int) -> int | None:
        return self._advance(cursor)

    def after_malformed(self, cursor: int) -> int | None:
        return self._advance(cursor)

    def item(self, cursor: int) -> Any:
        return self.items[cursor]

    def _advance(self, cursor: int) -> int | None:
        following = cursor + 1
        return following if following < len(self.items) else None


@dataclass(slots=True)
class Source(Generic[T]):
    name: str
    paging: PagingStrategy
    build_request: Callable[[Any], Request]
    parse_page: Callable[[Any, Any], Page[T]]
    describe: Callable[[Any], str] = lambda cursor: f"page {cursor}"


@dataclass(slots=True)
class FetchReport(Generic[T]):
    source: str
    records: list[T] = field(default_factory=list)
    attempted: int = 0
    responded: int = 0
    failed: int = 0


async def fetch_source(
    client: httpx.AsyncClient,
    source: Source[T],
    *,
    delay: float,
    sleep: Sleep = asyncio.sleep,
) -> FetchReport[T]:
    report: FetchReport[T] = FetchReport(source=source.name)
    cursor = source.paging.first()

    while cursor is not None:
        label = source.describe(cursor)
        request = source.build_request(cursor)
        report.attempted += 1
        try:
            response = await client.get(request.url, params=request.params)
        except httpx.TransportError as exc:
            report.failed += 1
            logger.warning("%s (%s) could not be reached: %s", source.name, label, exc)
            following = source.paging.after_failure(cursor)
        else:
            report.responded += 1
            if response.is_success:
                try:
                    page = source.parse_page(cursor, response.json())
                except ValueError as exc:
                    report.failed += 1
                    logger.warning(
                        "%s (%s) returned an unexpected payload: %s",
                        source.name,
                        label,
                        exc,
                    )
                    following = source.paging.after_malformed(cursor)
                else:
                    report.records.extend(page.records)
                    following = source.paging.after_success(cursor, page)
            else:
                report.failed += 1
                logger.warning(
                    "%s: %s (%s) failed to fetch: %s",
                    response.status_code,
                    source.name,
                    label,
                    response.text,
                )
                following = source.paging.after_failure(cursor)

        if following is not None and delay > 0:
            await sleep(delay)
        cursor = following

    return report
