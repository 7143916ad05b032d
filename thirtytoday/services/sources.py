from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import date
from typing import Any, TypeVar

from ..config import Settings, endpoint
from ..dates import ISO_DATE_FORMAT, ArchiveWindow, date_key, key_from_timestamp
from ..errors import MalformedResponseError
from ..models.archive import (
    Article,
    Event,
    EventPage,
    Location,
    Thumbnail,
    WeatherReading,
)
from .paging import (
    FixedListPaging,
    OffsetPaging,
    Page,
    Request,
    Source,
    TotalPagesPaging,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

PLACEHOLDER_DESCRIPTION = "Day of the year"

LONDON = Location(name="London", lon=-0.118092, lat=51.509865)
NEW_YORK = Location(name="New York", lon=-73.935242, lat=40.73061)
WEATHER_LOCATIONS: tuple[Location, ...] = (LONDON, NEW_YORK)
# Meteostat reports hourly times in this zone per location.
WEATHER_TIMEZONES = {LONDON.name: "Europe/London", NEW_YORK.name: "America/New_York"}


def guardian_source(settings: Settings, window: ArchiveWindow) -> Source[Article]:
    url = endpoint(settings.guardian_base_url, "search")

    def build_request(page: int) -> Request:
        return Request(
            url,
            params={
                "api-key": settings.guardian_api_key or "",
                "from-date": window.start.strftime(ISO_DATE_FORMAT),
                "to-date": window.end.strftime(ISO_DATE_FORMAT),
                "page": page,
                "page-size": settings.guardian_page_size,
            },
        )

    def parse_page(page: int, payload: Any) -> Page[Article]:
        body = _section(payload, "response")
        results = _list(body, "results")
        return Page(
            records=_map_each(results, _map_guardian_article),
            total_pages=_int(body.get("pages")),
        )

    return Source(
        name="Guardian",
        paging=TotalPagesPaging(page_limit=settings.guardian_page_limit),
        build_request=build_request,
        parse_page=parse_page,
    )


def nytimes_source(settings: Settings, window: ArchiveWindow) -> Source[Article]:
    url = endpoint(settings.nytimes_base_url, "articlesearch.json")
    section_filter = nytimes_section_filter(settings.nytimes_sections)

    def build_request(page: int) -> Request:
        params: dict[str, Any] = {
            "api-key": settings.nytimes_api_key or "",
            "begin_date": date_key(window.start),
            "end_date": date_key(window.end),
            "page": page,
        }
        if section_filter:
            params["fq"] = section_filter
        return Request(url, params=params)

    def parse_page(page: int, payload: Any) -> Page[Article]:
        body = _section(payload, "response")
        meta = _section(body, "meta")
        docs = _list(body, "docs")
        offset = _int(meta.get("offset"))
        hits = _int(meta.get("hits"))
        if offset is None or hits is None:
            raise MalformedResponseError("meta is missing offset or hits")
        return Page(
            records=_map_each(docs, _map_nytimes_article),
            offset=offset,
            hits=hits,
        )

    return Source(
        name="New York Times",
        paging=OffsetPaging(page_limit=settings.nytimes_page_limit),
        build_request=build_request,
        parse_page=parse_page,
    )


def nytimes_section_filter(sections: tuple[str, ...]) -> str | None:
    if not sections:
        return None
    quoted = " ".join(f'"{name}"' for name in sections)
    return f"section_name:({quoted})"


def wikimedia_source(settings: Settings, window: ArchiveWindow) -> Source[Event]:
    paging = FixedListPaging(window.days)

    def build_request(cursor: int) -> Request:
        day: date = paging.item(cursor)
        return Request(
            endpoint(
                settings.wikimedia_base_url,
                "onthisday/events",
                f"{day:%m}/{day:%d}",
            )
        )

    def parse_page(cursor: int, payload: Any) -> Page[Event]:
        day: date = paging.item(cursor)
        events = _list(_mapping(payload), "events")
        return Page(records=select_events(events, day))

    return Source(
        name="Wikimedia",
        paging=paging,
        build_request=build_request,
        parse_page=parse_page,
        describe=lambda cursor: f"{paging.item(cursor):%m/%d}",
    )


def select_events(events: list[Any], day: date) -> list[Event]:
    """Keep the events of ``day``'s year, without day-of-the-year placeholders."""
    key = date_key(day)
    selected: list[Event] = []
    for raw in events:
        if not isinstance(raw, dict) or _int(raw.get("year")) != day.year:
            continue
        if raw.get("description") == PLACEHOLDER_DESCRIPTION:
            continue
        text = raw.get("text")
        if not isinstance(text, str) or not text:
            logger.debug("Skipping %s event without text", key)
            continue
        raw_pages = raw.get("pages")
        if not isinstance(raw_pages, list):
            raw_pages = []
        pages = _map_each(
            (
                item
                for item in raw_pages
                if isinstance(item, dict)
                and item.get("description") != PLACEHOLDER_DESCRIPTION
            ),
            _map_event_page,
        )
        selected.append(Event(date=key, headline=text, pages=pages))
    return selected


def meteostat_source(settings: Settings, window: ArchiveWindow) -> Source[WeatherReading]:
    paging = FixedListPaging(WEATHER_LOCATIONS)
    url = endpoint(settings.meteostat_base_url, "point/hourly")

    def build_request(cursor: int) -> Request:
        location: Location = paging.item(cursor)
        return Request(
            url,
            params={
                "lat": location.lat,
                "lon": location.lon,
                "start": window.start.strftime(ISO_DATE_FORMAT),
                "end": window.end.strftime(ISO_DATE_FORMAT),
                "tz": WEATHER_TIMEZONES.get(location.name, "UTC"),
                "rapidapi-key": settings.meteostat_api_key or "",
            },
        )

    def parse_page(cursor: int, payload: Any) -> Page[WeatherReading]:
        location: Location = paging.item(cursor)
        hours = _list(_mapping(payload), "data")
        return Page(records=_map_each(hours, lambda item: _map_weather(item, location)))

    return Source(
        name="Meteostat",
        paging=paging,
        build_request=build_request,
        parse_page=parse_page,
        describe=lambda cursor: paging.item(cursor).name,
    )


def _map_guardian_article(raw: Any) -> Article:
    raw = _mapping(raw)
    subsection = raw.get("sectionName")
    return Article(
        date=_date_key(raw, "webPublicationDate"),
        headline=_str(raw, "webTitle"),
        web_url=_str(raw, "webUrl"),
        abstract=None,
        thumbnail=None,
        section=raw.get("pillarName") or subsection or "Other",
        subsection=subsection,
    )


def _map_nytimes_article(raw: Any) -> Article:
    raw = _mapping(raw)
    headline = raw.get("headline")
    main = headline.get("main") if isinstance(headline, dict) else headline
    if not isinstance(main, str):
        raise MalformedResponseError("article has no headline")
    return Article(
        date=_date_key(raw, "pub_date"),
        headline=main,
        web_url=_str(raw, "web_url"),
        abstract=raw.get("abstract") or None,
        thumbnail=_nytimes_thumbnail(raw.get("multimedia")),
        section=raw.get("section_name") or "Other",
        subsection=raw.get("subsection_name") or None,
    )


def _nytimes_thumbnail(multimedia: Any) -> Thumbnail | None:
    if not isinstance(multimedia, list) or not multimedia:
        return None
    first = multimedia[0]
    if not isinstance(first, dict) or first.get("type") != "image" or not first.get("url"):
        return None
    return Thumbnail(
        url=f"https://nytimes.com/{str(first['url']).lstrip('/')}",
        width=_int(first.get("width")),
        height=_int(first.get("height")),
    )


def _map_event_page(raw: dict[str, Any]) -> EventPage:
    titles = raw.get("titles")
    urls = raw.get("content_urls")
    desktop = urls.get("desktop") if isinstance(urls, dict) else None
    title = (titles.get("normalized") if isinstance(titles, dict) else None) or raw.get("title")
    page_url = desktop.get("page") if isinstance(desktop, dict) else None
    if not title or not page_url:
        raise MalformedResponseError("event page is missing its title or URL")
    return EventPage(
        title=title,
        web_url=page_url,
        description=raw.get("description"),
        abstract=raw.get("extract"),
        thumbnail=_wikimedia_thumbnail(raw.get("thumbnail")),
    )


def _wikimedia_thumbnail(raw: Any) -> Thumbnail | None:
    if not isinstance(raw, dict) or not raw.get("source"):
        return None
    return Thumbnail(
        url=raw["source"],
        width=_int(raw.get("width")),
        height=_int(raw.get("height")),
    )


def _map_weather(raw: Any, location: Location) -> WeatherReading:
    raw = _mapping(raw)
    return WeatherReading(
        date=_date_key(raw, "time"),
        time=_str(raw, "time"),
        location=location,
        temp=raw.get("temp"),
        rhum=raw.get("rhum"),
        wspd=raw.get("wspd"),
    )


def _map_each(items: Iterable[Any], mapper: Callable[[Any], T]) -> list[T]:
    mapped: list[T] = []
    for item in items:
        try:
            mapped.append(mapper(item))
        except ValueError as exc:
            logger.debug("Skipping unreadable record: %s", exc)
    return mapped


def _mapping(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedResponseError(f"expected an object, got {type(value).__name__}")
    return value


def _section(payload: Any, key: str) -> dict[str, Any]:
    value = _mapping(payload).get(key)
    if not isinstance(value, dict):
        raise MalformedResponseError(f"'{key}' is missing")
    return value


def _list(payload: dict[str, Any], key: str) -> list[Any]:
    value = payload.get(key)
    if not isinstance(value, list):
        raise MalformedResponseError(f"'{key}' is missing or not a list")
    return value


def _str(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise MalformedResponseError(f"'{key}' is missing")
    return value


def _date_key(payload: dict[str, Any], key: str) -> str:
    value = _str(payload, key)
    try:
        return key_from_timestamp(value)
    except (ValueError, OverflowError) as exc:
        raise MalformedResponseError(f"'{key}' is not a timestamp: {value}") from exc


def _int(value: Any) -> int | None:
    try:
        if value is None or value == "":
            return None
        return int(value)
    except (TypeError, ValueError):
        return None
