from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx

from ..config import Settings, endpoint, get_settings
from ..http_client import get_http_client

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GeolocationService:
    settings: Settings | None = None
    client: httpx.AsyncClient | None = None

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = get_settings()

    async def lookup_timezone(self, ip: str | None) -> str:
        """IANA timezone of ``ip``, or the configured default when unknown."""
        fallback = self.settings.default_timezone
        try:
            address = ipaddress.ip_address((ip or "").strip())
        except ValueError:
            logger.info("Not an IP address: %r, using %s", ip, fallback)
            return fallback
        client = self.client or await get_http_client()
        try:
            response = await client.get(
                endpoint(self.settings.geolocation_base_url, str(address))
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Geolocation lookup for %s failed: %s", ip, exc)
            return fallback

        if not isinstance(payload, dict) or payload.get("status") != "success":
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.info("No location for %s (%s), using %s", ip, message, fallback)
            return fallback

        name = payload.get("timezone")
        if not is_known_timezone(name):
            logger.warning("Geolocation returned unknown timezone %r for %s", name, ip)
            return fallback
        return name


def is_known_timezone(name: object) -> bool:
    if not isinstance(name, str) or not name:
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True
