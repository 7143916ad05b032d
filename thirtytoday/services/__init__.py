from .aggregator import AggregatorService
from .geolocation import GeolocationService
from .renderer import build_page, group_articles

__all__ = ["AggregatorService", "GeolocationService", "build_page", "group_articles"]
