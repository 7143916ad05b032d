from .archive import (
    ArchiveDocument,
    Article,
    DateBundle,
    Event,
    EventPage,
    Location,
    Thumbnail,
    WeatherReading,
)

__all__ = [
    "ArchiveDocument",
    "Article",
    "DateBundle",
    "Event",
    "EventPage",
    "Location",
    "Thumbnail",
    "WeatherReading",
]
