from functools import lru_cache
from pathlib import Path

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

NYTIMES_SECTIONS: tuple[str, ...] = (
    "Arts",
    "Automobiles",
    "Autos",
    "Blogs",
    "Books",
    "Business",
    "Education",
    "Front Page",
    "Giving",
    "Health",
    "Job Market",
    "Movies",
    "Multimedia",
    "National",
    "New York",
    "Olympics",
    "Opinion",
    "Public Editor",
    "Real Estate",
    "Science",
    "Sports",
    "Style",
    "Sunday Magazine",
    "Sunday Review",
    "Technology",
    "The Public Editor",
    "Theater",
    "Today's Headlines",
    "Travel",
    "U.S.",
    "Washington",
    "World",
    "Your Money",
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", extra="ignore", populate_by_name=True)

    http_timeout: float = Field(10.0, gt=0, alias="HTTP_TIMEOUT")
    http_max_connections: int = Field(20, ge=1, alias="HTTP_MAX_CONNECTIONS")
    http_max_keepalive: int = Field(10, ge=1, alias="HTTP_MAX_KEEPALIVE")
    http_user_agent: str = Field(
        "thirty-today/0.1 (+https://github.com/edhwright/thirty-today)",
        alias="HTTP_USER_AGENT",
    )

    guardian_base_url: HttpUrl = Field(
        "https://content.guardianapis.com", alias="GUARDIAN_BASE_URL"
    )
    nytimes_base_url: HttpUrl = Field(
        "https://api.nytimes.com/svc/search/v2", alias="NYTIMES_BASE_URL"
    )
    wikimedia_base_url: HttpUrl = Field(
        "https://api.wikimedia.org/feed/v1/wikipedia/en", alias="WIKIMEDIA_BASE_URL"
    )
    meteostat_base_url: HttpUrl = Field(
        "https://meteostat.p.rapidapi.com", alias="METEOSTAT_BASE_URL"
    )
    geolocation_base_url: HttpUrl = Field(
        "http://ip-api.com/json", alias="GEOLOCATION_BASE_URL"
    )

    guardian_api_key: str | None = Field(default=None, alias="GUARDIAN_API_KEY")
    nytimes_api_key: str | None = Field(default=None, alias="NYTIMES_API_KEY")
    meteostat_api_key: str | None = Field(default=None, alias="METEOSTAT_API_KEY")

    years_back: int = Field(30, ge=1, alias="YEARS_BACK")
    request_delay: float = Field(6.0, ge=0, alias="REQUEST_DELAY")
    guardian_page_size: int = Field(50, ge=1, le=200, alias="GUARDIAN_PAGE_SIZE")
    guardian_page_limit: int = Field(20, ge=1, alias="GUARDIAN_PAGE_LIMIT")
    nytimes_page_limit: int = Field(100, ge=1, alias="NYTIMES_PAGE_LIMIT")
    nytimes_sections: tuple[str, ...] = Field(
        NYTIMES_SECTIONS, alias="NYTIMES_SECTIONS"
    )

    data_path: Path = Field(Path("data.json"), alias="DATA_PATH")
    default_timezone: str = Field("UTC", alias="DEFAULT_TIMEZONE")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def endpoint(base_url: HttpUrl | str, *parts: str) -> str:
    """Join a configured base URL with path segments, without doubled slashes."""
    base = str(base_url).rstrip("/")
    tail = "/".join(part.strip("/") for part in parts)
    return f"{base}/{tail}" if tail else base
