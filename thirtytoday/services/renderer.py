"""Builds the page shown to a viewer from a persisted archive document.

The viewer's "now" is moved back 30 years in the viewer's own timezone, then
that instant is re-expressed in each country's timezone. Each country can land
on a different date key than the viewer, which is why the archive always
holds three consecutive days.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal
from zoneinfo import ZoneInfo

from ..dates import HOUR_FORMAT, date_key, years_ago
from ..models.archive import ArchiveDocument, Article, DateBundle, Event, WeatherReading

logger = logging.getLogger(__name__)

PublicationKey = Literal["guardian_articles", "nytimes_articles"]


@dataclass(frozen=True, slots=True)
class Country:
    name: str
    timezone: str
    publication_name: str
    publication_key: PublicationKey
    weather_location: str


COUNTRIES: tuple[Country, ...] = (
    Country(
        name="United States",
        timezone="America/New_York",
        publication_name="The New York Times",
        publication_key="nytimes_articles",
        weather_location="New York",
    ),
    Country(
        name="United Kingdom",
        timezone="Europe/London",
        publication_name="The Guardian",
        publication_key="guardian_articles",
        weather_location="London",
    ),
)


@dataclass(slots=True)
class SectionView:
    name: str
    with_abstract: list[Article] = field(default_factory=list)
    without_abstract: list[Article] = field(default_factory=list)


@dataclass(slots=True)
class CountryView:
    country: Country
    local_time: datetime
    weather: WeatherReading | None
    sections: list[SectionView]


@dataclass(slots=True)
class PageView:
    then: datetime
    events: list[Event]
    countries: list[CountryView]

    @property
    def heading(self) -> str:
        return format_long_date(self.then)


def build_page(
    document: ArchiveDocument,
    viewer_timezone: str,
    now: datetime | None = None,
    years: int = 30,
) -> PageView:
    now = now or datetime.now(timezone.utc)
    then = years_ago(now.astimezone(ZoneInfo(viewer_timezone)), years)

    countries: list[CountryView] = []
    for country in COUNTRIES:
        local = then.astimezone(ZoneInfo(country.timezone))
        bundle = _bundle(document, date_key(local))
        articles = getattr(bundle, country.publication_key)
        if not articles:
            continue
        countries.append(
            CountryView(
                country=country,
                local_time=local,
                weather=find_weather(bundle.weather, country.weather_location, local),
                sections=group_articles(articles),
            )
        )

    return PageView(
        then=then,
        events=list(_bundle(document, date_key(then)).wiki_events),
        countries=countries,
    )


def group_articles(articles: Iterable[Article]) -> list[SectionView]:
    """Group by section, keep the last article per headline and order them.

    Sections come out alphabetically; within a section, articles with an
    abstract come first, each half ordered by headline ignoring case.
    """
    by_section: dict[str, dict[str, Article]] = {}
    for article in articles:
        by_section.setdefault(article.section, {})[article.headline] = article

    sections: list[SectionView] = []
    for name in sorted(by_section):
        unique = sorted(
            by_section[name].values(),
            key=lambda a: (not a.abstract, a.headline.casefold(), a.headline),
        )
        sections.append(
            SectionView(
                name=name,
                with_abstract=[a for a in unique if a.abstract],
                without_abstract=[a for a in unique if not a.abstract],
            )
        )
    return sections


def find_weather(
    readings: Iterable[WeatherReading], location: str, local_time: datetime
) -> WeatherReading | None:
    hour = local_time.strftime(HOUR_FORMAT)
    for reading in readings:
        if reading.location.name == location and reading.time == hour:
            return reading
    return None


def format_long_date(moment: datetime) -> str:
    return f"{moment:%A}, {moment.day} {moment:%B}, {moment.year}"


def format_short_date(moment: datetime) -> str:
    return f"{moment.day} {moment:%B}, {moment.year}"


def format_clock(moment: datetime) -> str:
    return f"{moment:%H:%M} ({moment.tzname()})"


def _bundle(document: ArchiveDocument, key: str) -> DateBundle:
    bundle = document.bundle(key)
    if bundle is None:
        logger.warning("Archive has no bundle for %s, rendering it empty", key)
        return DateBundle()
    return bundle
