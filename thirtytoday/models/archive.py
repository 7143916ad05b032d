from __future__ import annotations

from pydantic import BaseModel, Field, RootModel


class Thumbnail(BaseModel):
    url: str = Field(description="Image URL")
    width: int | None = Field(default=None, description="Width in pixels")
    height: int | None = Field(default=None, description="Height in pixels")


class Article(BaseModel):
    date: str = Field(description="Publication date key (YYYYMMDD)")
    headline: str = Field(description="Article headline")
    web_url: str = Field(description="Canonical article URL")
    abstract: str | None = Field(default=None, description="Short teaser or dek")
    thumbnail: Thumbnail | None = None
    section: str = Field(description="Section or pillar the article was filed under")
    subsection: str | None = Field(default=None, description="Finer-grained section")


class EventPage(BaseModel):
    title: str = Field(description="Normalised Wikipedia page title")
    web_url: str = Field(description="Desktop URL of the page")
    description: str | None = None
    abstract: str | None = Field(default=None, description="Lead extract of the page")
    thumbnail: Thumbnail | None = None


class Event(BaseModel):
    date: str = Field(description="Date key (YYYYMMDD) the event happened on")
    headline: str = Field(description="One-line description of the event")
    pages: list[EventPage] = Field(default_factory=list)


class Location(BaseModel):
    name: str
    lon: float
    lat: float


class WeatherReading(BaseModel):
    date: str = Field(description="Date key (YYYYMMDD) of the observation")
    time: str = Field(description="Observation hour, e.g. 1996-10-19 14:00:00")
    location: Location
    temp: float | None = Field(default=None, description="Air temperature in °C")
    rhum: float | None = Field(default=None, description="Relative humidity in %")
    wspd: float | None = Field(default=None, description="Wind speed in km/h")


class DateBundle(BaseModel):
    guardian_articles: list[Article] = Field(default_factory=list)
    nytimes_articles: list[Article] = Field(default_factory=list)
    wiki_events: list[Event] = Field(default_factory=list)
    weather: list[WeatherReading] = Field(default_factory=list)


class ArchiveDocument(RootModel[dict[str, DateBundle]]):
    """Snapshot of every bundle fetched in one run, keyed by YYYYMMDD."""

    def bundle(self, key: str) -> DateBundle | None:
        return self.root.get(key)

    def keys(self) -> list[str]:
        return list(self.root)
