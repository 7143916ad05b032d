from datetime import datetime, timezone

from bs4 import BeautifulSoup

from thirtytoday.models import (
    ArchiveDocument,
    Article,
    DateBundle,
    Event,
    EventPage,
    Location,
    WeatherReading,
)
from thirtytoday.services.renderer import build_page, find_weather, group_articles
from thirtytoday.templates import render_page

LONDON = Location(name="London", lon=-0.118092, lat=51.509865)
NEW_YORK = Location(name="New York", lon=-73.935242, lat=40.73061)


def _article(headline: str, section: str = "News", abstract: str | None = None, date: str = "19961019", url: str | None = None) -> Article:
    return Article(
        date=date,
        headline=headline,
        web_url=url or f"https://example.com/{headline}",
        abstract=abstract,
        section=section,
    )


def _reading(location: Location, time: str, temp: float) -> WeatherReading:
    return WeatherReading(
        date=time[:10].replace("-", ""),
        time=time,
        location=location,
        temp=temp,
        rhum=80,
        wspd=11.2,
    )


def test_group_articles_keeps_last_duplicate_headline() -> None:
    first = _article("Same headline", url="https://example.com/first")
    second = _article("Same headline", url="https://example.com/second")

    sections = group_articles([first, second])

    assert len(sections) == 1
    survivors = sections[0].with_abstract + sections[0].without_abstract
    assert [a.web_url for a in survivors] == ["https://example.com/second"]


def test_group_articles_orders_sections_and_articles() -> None:
    articles = [
        _article("zebra crossing", section="Sport"),
        _article("Beta", section="News"),
        _article("alpha", section="News"),
        _article("Gamma", section="News", abstract="Has a summary"),
        _article("delta", section="News", abstract="Also summarised"),
    ]

    sections = group_articles(articles)

    assert [s.name for s in sections] == ["News", "Sport"]
    news = sections[0]
    assert [a.headline for a in news.with_abstract] == ["delta", "Gamma"]
    assert [a.headline for a in news.without_abstract] == ["alpha", "Beta"]


def test_find_weather_matches_location_and_hour() -> None:
    readings = [
        _reading(LONDON, "1996-10-19 13:00:00", 10),
        _reading(NEW_YORK, "1996-10-19 13:00:00", 20),
    ]
    local = datetime(1996, 10, 19, 13, 42)

    assert find_weather(readings, "New York", local).temp == 20
    assert find_weather(readings, "Paris", local) is None


def _document() -> ArchiveDocument:
    return ArchiveDocument(
        {
            "19961018": DateBundle(
                nytimes_articles=[_article("Friday night in Manhattan", date="19961018", section="New York")],
                wiki_events=[Event(date="19961018", headline="Yesterday's event")],
                weather=[_reading(NEW_YORK, "1996-10-18 20:00:00", 14.5)],
            ),
            "19961019": DateBundle(
                guardian_articles=[_article("Saturday in London <live>", section="News")],
                wiki_events=[
                    Event(
                        date="19961019",
                        headline="Something notable & new",
                        pages=[EventPage(title="Notable", web_url="https://en.wikipedia.org/wiki/Notable")],
                    )
                ],
                weather=[_reading(LONDON, "1996-10-19 01:00:00", 9.1)],
            ),
            "19961020": DateBundle(),
        }
    )


def test_build_page_resolves_each_country_date() -> None:
    # 00:30 BST in London is still the previous evening in New York.
    now = datetime(2026, 10, 19, 0, 30, tzinfo=timezone.utc)

    view = build_page(_document(), "Europe/London", now=now)

    assert view.heading == "Saturday, 19 October, 1996"
    assert [event.headline for event in view.events] == ["Something notable & new"]
    names = [country.country.name for country in view.countries]
    assert names == ["United States", "United Kingdom"]

    us, uk = view.countries
    assert us.local_time.strftime("%Y%m%d %H:%M") == "19961018 20:30"
    assert us.weather is not None and us.weather.temp == 14.5
    assert [s.name for s in us.sections] == ["New York"]
    assert uk.local_time.strftime("%Y%m%d %H:%M") == "19961019 01:30"
    assert uk.weather is not None and uk.weather.temp == 9.1


def test_build_page_renders_missing_dates_as_empty() -> None:
    now = datetime(2026, 10, 25, 12, 0, tzinfo=timezone.utc)

    view = build_page(_document(), "Asia/Tokyo", now=now)

    assert view.events == []
    assert view.countries == []


def test_render_page_escapes_upstream_text() -> None:
    now = datetime(2026, 10, 19, 0, 30, tzinfo=timezone.utc)
    html = render_page(build_page(_document(), "Europe/London", now=now))

    soup = BeautifulSoup(html, "lxml")
    assert soup.find("h1").get_text() == "Saturday, 19 October, 1996"
    assert soup.find("h2").get_text() == "Something notable & new"
    summaries = [tag.get_text() for tag in soup.find_all("summary")]
    assert "Saturday in London <live>" in summaries
    assert "<live>" not in html
    weather = soup.find_all("div", class_="weather")
    assert [w.find("p").get_text() for w in weather] == ["New York", "London"]
    assert "9.1 °C" in weather[1].get_text()
    clock = soup.find("div", class_="clock").get_text()
    assert "20:30 (EDT)" in clock
