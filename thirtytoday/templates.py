"""HTML for the single page. Every value coming from an upstream is escaped."""

from __future__ import annotations

from html import escape

from .models.archive import Article, Event, EventPage, Thumbnail, WeatherReading
from .services.renderer import (
    CountryView,
    PageView,
    SectionView,
    format_clock,
    format_short_date,
)

WIKIPEDIA_LOGO = Thumbnail(
    url="https://upload.wikimedia.org/wikipedia/en/thumb/8/80/Wikipedia-logo-v2.svg/842px-Wikipedia-logo-v2.svg.png",
    width=842,
    height=768,
)

FAVICON = (
    "data:image/svg+xml,%3Csvg xmlns='http://www.w3.org/2000/svg' width='24' height='24'%3E"
    "%3Ctext y='22' x='0' font-size='22'%3E%F0%9F%97%9E%EF%B8%8F%3C/text%3E%3C/svg%3E"
)

STYLES = """
html, body { height: 100%; margin: 0; }
body { background-color: #dcd7d0; color: #222; font-family: Helvetica, "Helvetica Neue", Arial, sans-serif; }
header.masthead { background: #222; color: #dcd7d0; padding: 0.5rem 1rem; }
.events { background: #222; color: #dcd7d0; }
.events section, .country { max-width: 72rem; padding: 1rem; }
.pages { display: grid; grid-template-columns: repeat(auto-fill, minmax(10rem, 1fr)); gap: 0.25rem; }
.pages a { color: inherit; text-decoration: none; padding: 0.5rem; }
.pages img { width: 100%; max-height: 18rem; object-fit: contain; }
.line-clamp { display: -webkit-box; -webkit-line-clamp: 5; -webkit-box-orient: vertical; overflow: hidden; }
details > summary { list-style: none; cursor: pointer; padding: 0.5rem; font-size: 0.875rem; }
details > summary::-webkit-details-marker { display: none; }
details > div { padding: 0.5rem; }
footer { padding: 1.25rem 1rem; font-size: 0.875rem; }
"""


def render_page(view: PageView) -> str:
    events = _events(view.events)
    countries = "".join(_country(country) for country in view.countries)
    return f"""<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <meta name="description" content="News from 30 years ago.">
    <title>thirty-today</title>
    <link rel="icon" href="{FAVICON}">
    <style>{STYLES}</style>
  </head>
  <body>
    <header class="masthead"><h1>{escape(view.heading)}</h1></header>
    <main>
      <hr>
      {events}
      {countries}
    </main>
    <footer>
      <p><a href="https://github.com/edhwright/thirty-today" target="_blank">GitHub</a></p>
    </footer>
  </body>
</html>
"""


def _events(events: list[Event]) -> str:
    if not events:
        return ""
    sections = "".join(_event(event) for event in events)
    return f'<div class="events">{sections}<hr></div>'


def _event(event: Event) -> str:
    pages = "".join(_event_page(page) for page in event.pages)
    return f"""
      <section>
        <h2>{escape(event.headline)}</h2>
        <div class="pages">{pages}</div>
      </section>"""


def _event_page(page: EventPage) -> str:
    thumbnail = page.thumbnail or WIKIPEDIA_LOGO
    abstract = escape(page.abstract or page.description or "")
    return f"""
          <a href="{escape(page.web_url)}" target="_blank">
            <header>
              <h3>{escape(page.title)}</h3>
              {_image(thumbnail, lazy=True)}
            </header>
            <p class="line-clamp">{abstract}</p>
          </a>"""


def _country(view: CountryView) -> str:
    country = view.country
    sections = "".join(_section(section) for section in view.sections)
    return f"""
      <div class="country">
        <header>
          <h2>{escape(country.name)}</h2>
          <div class="clock">
            <p>{escape(format_clock(view.local_time))}</p>
            <p>{escape(format_short_date(view.local_time))}</p>
          </div>
          {_weather(country.weather_location, view.weather)}
        </header>
        <section class="publication">
          <h3>{escape(country.publication_name)}</h3>
          {sections}
        </section>
      </div>
      <hr>"""


def _weather(location: str, reading: WeatherReading | None) -> str:
    if reading is None:
        return ""
    return f"""<div class="weather">
            <p>{escape(location)}</p>
            <p>{_number(reading.temp)} °C</p>
            <p>Humidity: {_number(reading.rhum)}%</p>
            <p>Wind: {_number(reading.wspd)} km/h</p>
          </div>"""


def _section(section: SectionView) -> str:
    divider = (
        '<hr class="divider">'
        if section.with_abstract and section.without_abstract
        else ""
    )
    with_abstract = "".join(_article(article) for article in section.with_abstract)
    without_abstract = "".join(_article(article) for article in section.without_abstract)
    return f"""
          <section class="section">
            <h4>{escape(section.name)}</h4>
            <div>{with_abstract}{divider}{without_abstract}</div>
          </section>"""


def _article(article: Article) -> str:
    abstract = f"<p>{escape(article.abstract)}</p>" if article.abstract else ""
    thumbnail = _image(article.thumbnail) if article.thumbnail else ""
    return f"""
              <details>
                <summary>{escape(article.headline)}</summary>
                <div>
                  {abstract}
                  {thumbnail}
                  <p><a href="{escape(article.web_url)}" target="_blank">Full article</a></p>
                </div>
              </details>"""


def _image(thumbnail: Thumbnail, lazy: bool = False) -> str:
    size = ""
    if thumbnail.width:
        size += f' width="{thumbnail.width}"'
    if thumbnail.height:
        size += f' height="{thumbnail.height}"'
    loading = ' loading="lazy"' if lazy else ""
    return f'<img src="{escape(thumbnail.url)}"{size} alt="thumbnail"{loading}>'


def _number(value: float | None) -> str:
    if value is None:
        return "–"
    return f"{value:g}"
