from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

Clock = Callable[[], datetime]

ONE_MILLISECOND = timedelta(milliseconds=1)
SECONDS_PER_DAY = 60 * 60 * 24


def utc_now() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 date or datetime; naive values are taken as UTC."""
    text = value.strip()
    if not text:
        raise ValueError("timestamp must not be empty")
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    moment = moment.astimezone(UTC)
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{moment.microsecond // 1000:03d}Z"


def normalize_timestamp(value: str) -> str:
    return format_timestamp(parse_timestamp(value))


def next_timestamp(previous: str | None, now: datetime | None = None) -> str:
    """Return a timestamp strictly after ``previous``.

    Wall-clock time is used when it has advanced past ``previous`` (at
    millisecond resolution); otherwise ``previous + 1ms`` is synthesised.
    """
    candidate = parse_timestamp(format_timestamp(now or utc_now()))
    if previous:
        last = parse_timestamp(previous)
        if candidate <= last:
            candidate = last + ONE_MILLISECOND
    return format_timestamp(candidate)


def days_between(start: str, end: str) -> float:
    delta = parse_timestamp(end) - parse_timestamp(start)
    return delta.total_seconds() / SECONDS_PER_DAY


def calendar_day(value: str) -> str:
    return parse_timestamp(value).date().isoformat()
