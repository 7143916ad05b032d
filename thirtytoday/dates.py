from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

DATE_KEY_FORMAT = "%Y%m%d"
ISO_DATE_FORMAT = "%Y-%m-%d"
HOUR_FORMAT = "%Y-%m-%d %H:00:00"


def date_key(value: date | datetime) -> str:
    return value.strftime(DATE_KEY_FORMAT)


def years_ago(moment: datetime, years: int) -> datetime:
    return moment - relativedelta(years=years)


def key_from_timestamp(value: str) -> str:
    """Date key of an upstream timestamp, taken from its own calendar date."""
    return date_key(date_parser.parse(value))


@dataclass(frozen=True, slots=True)
class ArchiveWindow:
    start: date
    anchor: date
    end: date

    @classmethod
    def around(cls, now: datetime | None = None, years: int = 30) -> ArchiveWindow:
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is not None:
            now = now.astimezone(timezone.utc)
        anchor = years_ago(now, years).date()
        return cls(
            start=anchor - timedelta(days=1),
            anchor=anchor,
            end=anchor + timedelta(days=1),
        )

    @property
    def days(self) -> tuple[date, date, date]:
        return (self.start, self.start + timedelta(days=1), self.end)

    @property
    def keys(self) -> tuple[str, str, str]:
        first, second, third = self.days
        return (date_key(first), date_key(second), date_key(third))
