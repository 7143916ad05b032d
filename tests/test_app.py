import pytest
from fastapi.testclient import TestClient

import api.index as index_module
from thirtytoday.dates import ArchiveWindow
from thirtytoday.models import ArchiveDocument, Article, DateBundle
from thirtytoday.store import write_document


class FakeGeolocation:
    def __init__(self) -> None:
        self.addresses: list[str | None] = []

    async def lookup_timezone(self, ip: str | None) -> str:
        self.addresses.append(ip)
        return "Europe/London"


@pytest.fixture
def geolocation():
    fake = FakeGeolocation()
    index_module.app.dependency_overrides[index_module.get_geolocation_service] = lambda: fake
    yield fake
    index_module.app.dependency_overrides.clear()


def _document_for_today(article: Article) -> ArchiveDocument:
    window = ArchiveWindow.around()
    return ArchiveDocument(
        {
            key: DateBundle(guardian_articles=[article.model_copy(update={"date": key})])
            for key in window.keys
        }
    )


def test_health() -> None:
    with TestClient(index_module.app) as client:
        response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_index_renders_the_archive(geolocation) -> None:
    document = _document_for_today(
        Article(date="", headline="Headline from the past", web_url="https://example.com/past", section="News")
    )
    index_module.app.dependency_overrides[index_module.get_document] = lambda: document

    with TestClient(index_module.app) as client:
        response = client.get("/", headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "Headline from the past" in response.text
    assert "The Guardian" in response.text
    assert geolocation.addresses == ["203.0.113.7"]


def test_index_without_document_is_unavailable(geolocation, monkeypatch, tmp_path) -> None:
    settings = index_module.get_settings().model_copy(update={"data_path": tmp_path / "missing.json"})
    monkeypatch.setattr(index_module, "get_settings", lambda: settings)

    with TestClient(index_module.app) as client:
        response = client.get("/")

    assert response.status_code == 503


def test_index_reads_the_document_from_disk(geolocation, monkeypatch, tmp_path) -> None:
    settings = index_module.get_settings().model_copy(update={"data_path": tmp_path / "data.json"})
    monkeypatch.setattr(index_module, "get_settings", lambda: settings)
    write_document(ArchiveDocument({"19961019": DateBundle()}), settings.data_path)

    with TestClient(index_module.app) as client:
        response = client.get("/")

    assert response.status_code == 200
    assert "<h1>" in response.text
