from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum


class Period(Enum):
    """Period tokens and the number of days each one covers."""

    ONE_WEEK = ("1week", 7)
    ONE_MONTH = ("1month", 30)
    NINETY_DAYS = ("90day", 90)
    SIX_MONTHS = ("6month", 180)
    ONE_YEAR = ("1year", 365)

    def __init__(self, token, days):
        self.token = token
        self.days = days

    @classmethod
    def resolve(cls, token):
        """Return the Period for a token, falling back to one month."""
        for period in cls:
            if period.token == token:
                return period
        return cls.ONE_MONTH


@dataclass(frozen=True)
class DateRange:
    from_: datetime
    to: datetime

    def __post_init__(self):
        if self.from_ > self.to:
            raise ValueError(f"DateRange start {self.from_} is after end {self.to}")

    @property
    def days(self):
        return (self.to - self.from_).days

    def to_dict(self):
        return {"from": format_date(self.from_), "to": format_date(self.to)}


def utc_now():
    return datetime.now(timezone.utc)


def format_date(instant):
    """Format an instant as its UTC calendar day, YYYY-MM-DD."""
    if instant.tzinfo is not None:
        instant = instant.astimezone(timezone.utc)
    return instant.strftime("%Y-%m-%d")


def parse_date(value):
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_instant(value):
    """Parse an ISO-8601 timestamp such as GitHub's created_at into an aware datetime."""
    instant = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant


def subtract_year(instant):
    # Feb 29 rolls forward to Mar 1 so the span never exceeds one year
    try:
        return instant.replace(year=instant.year - 1)
    except ValueError:
        return instant.replace(year=instant.year - 1, month=3, day=1)


def get_rolling_period_days(token):
    return Period.resolve(token).days


def get_date_range(token, now=None):
    """Range ending now and reaching back the period's number of days."""
    now = now or utc_now()
    days = Period.resolve(token).days
    return DateRange(from_=now - timedelta(days=days), to=now)


def get_comparison_date_ranges(token, now=None):
    """Current range plus the previous range of equal length ending where the current one starts."""
    current = get_date_range(token, now)
    length = timedelta(days=Period.resolve(token).days)
    previous = DateRange(from_=current.from_ - length, to=current.from_)
    return current, previous
