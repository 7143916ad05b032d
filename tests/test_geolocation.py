import httpx
import pytest
import respx

from thirtytoday.config import Settings
from thirtytoday.services.geolocation import GeolocationService


@pytest.mark.asyncio
async def test_lookup_timezone_returns_the_reported_zone() -> None:
    settings = Settings()
    async with httpx.AsyncClient() as client:
        service = GeolocationService(settings=settings, client=client)
        with respx.mock(assert_all_called=True) as mock:
            mock.get("http://ip-api.com/json/81.2.69.160").respond(
                200,
                json={"status": "success", "country": "United Kingdom", "timezone": "Europe/London"},
            )
            zone = await service.lookup_timezone("81.2.69.160")

    assert zone == "Europe/London"


@pytest.mark.asyncio
async def test_lookup_timezone_falls_back_for_private_addresses() -> None:
    settings = Settings(default_timezone="America/New_York")
    async with httpx.AsyncClient() as client:
        service = GeolocationService(settings=settings, client=client)
        with respx.mock() as mock:
            mock.get("http://ip-api.com/json/127.0.0.1").respond(
                200, json={"status": "fail", "message": "reserved range", "query": "127.0.0.1"}
            )
            zone = await service.lookup_timezone("127.0.0.1")

    assert zone == "America/New_York"


@pytest.mark.asyncio
async def test_lookup_timezone_falls_back_on_errors_and_unknown_zones() -> None:
    settings = Settings()
    async with httpx.AsyncClient() as client:
        service = GeolocationService(settings=settings, client=client)
        with respx.mock() as mock:
            mock.get("http://ip-api.com/json/198.51.100.1").respond(503)
            mock.get("http://ip-api.com/json/198.51.100.2").respond(
                200, json={"status": "success", "timezone": "Mars/Olympus_Mons"}
            )
            failed = await service.lookup_timezone("198.51.100.1")
            unknown = await service.lookup_timezone("198.51.100.2")
            missing = await service.lookup_timezone(None)

    assert failed == unknown == missing == "UTC"


@pytest.mark.asyncio
async def test_lookup_timezone_ignores_values_that_are_not_addresses() -> None:
    settings = Settings()
    async with httpx.AsyncClient() as client:
        service = GeolocationService(settings=settings, client=client)
        with respx.mock(assert_all_called=False) as mock:
            route = mock.route(host="ip-api.com")
            zones = [
                await service.lookup_timezone("../../evil?fields=all"),
                await service.lookup_timezone("testclient"),
            ]

    assert zones == ["UTC", "UTC"]
    assert route.call_count == 0
