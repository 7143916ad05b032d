from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypeVar

import httpx

from ..config import Settings, get_settings
from ..dates import ArchiveWindow
from ..errors import UpstreamUnavailableError
from ..http_client import get_http_client
from ..models.archive import ArchiveDocument, DateBundle
from .paging import FetchReport, Sleep, fetch_source
from .sources import guardian_source, meteostat_source, nytimes_source, wikimedia_source

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class AggregatorService:
    settings: Settings | None = None
    client: httpx.AsyncClient | None = None
    sleep: Sleep = field(default=asyncio.sleep)

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = get_settings()

    async def build(self, now: datetime | None = None) -> ArchiveDocument:
        window = ArchiveWindow.around(now, years=self.settings.years_back)
        client = self.client or await get_http_client()
        logger.info(
            "Fetching archive window %s..%s", window.keys[0], window.keys[-1]
        )

        reports: list[FetchReport[Any]] = []
        for make_source in (
            guardian_source,
            nytimes_source,
            wikimedia_source,
            meteostat_source,
        ):
            source = make_source(self.settings, window)
            report = await fetch_source(
                client, source, delay=self.settings.request_delay, sleep=self.sleep
            )
            logger.info(
                "%s: %d records from %d calls (%d failed)",
                report.source,
                len(report.records),
                report.attempted,
                report.failed,
            )
            reports.append(report)

        attempted = sum(report.attempted for report in reports)
        if attempted and not any(report.responded for report in reports):
            raise UpstreamUnavailableError(
                f"none of {attempted} upstream calls received a response"
            )

        guardian, nytimes, wikimedia, meteostat = (
            group_by_date(report.records) for report in reports
        )
        return ArchiveDocument(
            {
                key: DateBundle(
                    guardian_articles=guardian.get(key, []),
                    nytimes_articles=nytimes.get(key, []),
                    wiki_events=wikimedia.get(key, []),
                    weather=meteostat.get(key, []),
                )
                for key in window.keys
            }
        )


def group_by_date(records: Iterable[T]) -> dict[str, list[T]]:
    grouped: dict[str, list[T]] = defaultdict(list)
    for record in records:
        grouped[record.date].append(record)
    return dict(grouped)
