from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel

from jobtracker.core.analytics.stats import average, median, ratio
from jobtracker.core.applications import JobApplication
from jobtracker.core.clock import calendar_day, days_between, format_timestamp, utc_now
from jobtracker.core.status import ActiveStatus, InactiveStatus, current_status
from jobtracker.types import SourceType, StatusCategory


class AnalyticsSummary(BaseModel):
    total_applications: int
    active_applications: int
    inactive_applications: int
    offers_received: int
    rejections: int
    average_interest_rating: float


class StatusCount(BaseModel):
    label: str
    category: StatusCategory
    count: int


class ApplicationsByDate(BaseModel):
    date: str
    count: int


class OutcomeCounts(BaseModel):
    total: int = 0
    active: int = 0
    offers: int = 0
    rejected: int = 0

    @property
    def success_rate(self) -> float:
        return ratio(self.offers, self.offers + self.rejected)


class SourceEffectiveness(BaseModel):
    source_type: SourceType
    total: int
    active: int
    offers: int
    rejected: int
    success_rate: float


class TimeInStatus(BaseModel):
    label: str
    average_days: float
    median_days: float
    min_days: float
    max_days: float
    sample_size: int


class InterestRatingStats(BaseModel):
    rating: int
    total: int
    active: int
    offers: int
    rejected: int
    success_rate: float


class ResponseRateStats(BaseModel):
    total_applications: int
    with_response: int
    no_response: int
    response_rate: float


class ApplicationsAnalytics(BaseModel):
    summary: AnalyticsSummary
    status_distribution: list[StatusCount]
    applications_by_date: list[ApplicationsByDate]
    source_effectiveness: list[SourceEffectiveness]
    time_in_status: list[TimeInStatus]
    interest_rating_stats: list[InterestRatingStats]
    response_rate: ResponseRateStats


def _status(app: JobApplication) -> ActiveStatus | InactiveStatus | None:
    return current_status(app).unwrap_or(None)


def _tally(counts: OutcomeCounts, app: JobApplication) -> None:
    counts.total += 1
    status = _status(app)
    if status is None:
        return
    if status.category == "active":
        counts.active += 1
        if status.label == "offer":
            counts.offers += 1
    elif status.label == "rejected":
        counts.rejected += 1


def compute_summary(applications: Sequence[JobApplication]) -> AnalyticsSummary:
    counts = OutcomeCounts()
    inactive = 0
    for app in applications:
        _tally(counts, app)
        status = _status(app)
        if status is not None and status.category == "inactive":
            inactive += 1

    ratings = [app.interest_rating for app in applications if app.interest_rating is not None]
    return AnalyticsSummary(
        total_applications=len(applications),
        active_applications=counts.active,
        inactive_applications=inactive,
        offers_received=counts.offers,
        rejections=counts.rejected,
        average_interest_rating=average(ratings),
    )


def compute_status_distribution(applications: Sequence[JobApplication]) -> list[StatusCount]:
    """Current-status counts in order of first appearance."""
    distribution: dict[str, StatusCount] = {}
    for app in applications:
        status = _status(app)
        if status is None:
            continue
        entry = distribution.setdefault(status.label, StatusCount(label=status.label, category=status.category, count=0))
        entry.count += 1
    return list(distribution.values())


def compute_applications_by_date(applications: Sequence[JobApplication]) -> list[ApplicationsByDate]:
    buckets: dict[str, int] = {}
    for app in applications:
        day = calendar_day(app.application_date)
        buckets[day] = buckets.get(day, 0) + 1
    return [ApplicationsByDate(date=day, count=count) for day, count in sorted(buckets.items())]


def compute_source_effectiveness(applications: Sequence[JobApplication]) -> list[SourceEffectiveness]:
    by_source: dict[SourceType, OutcomeCounts] = {}
    for app in applications:
        _tally(by_source.setdefault(app.source_type, OutcomeCounts()), app)
    return [
        SourceEffectiveness(source_type=source, **counts.model_dump(), success_rate=counts.success_rate)
        for source, counts in by_source.items()
    ]


def compute_time_in_status(applications: Sequence[JobApplication], now: datetime | None = None) -> list[TimeInStatus]:
    """Days spent in each label; the still-open last entry runs until ``now``."""
    until = format_timestamp(now or utc_now())
    durations: dict[str, list[float]] = {}
    for app in applications:
        log = app.status_log
        for index, (started, status) in enumerate(log):
            ended = log[index + 1].timestamp if index + 1 < len(log) else until
            durations.setdefault(status.label, []).append(days_between(started, ended))

    return [
        TimeInStatus(
            label=label,
            average_days=average(values),
            median_days=median(values),
            min_days=min(values),
            max_days=max(values),
            sample_size=len(values),
        )
        for label, values in durations.items()
    ]


def compute_interest_rating_stats(applications: Sequence[JobApplication]) -> list[InterestRatingStats]:
    by_rating: dict[int, OutcomeCounts] = {}
    for app in applications:
        if app.interest_rating is None:
            continue
        _tally(by_rating.setdefault(app.interest_rating, OutcomeCounts()), app)
    return [
        InterestRatingStats(rating=rating, **counts.model_dump(), success_rate=counts.success_rate)
        for rating, counts in sorted(by_rating.items())
    ]


def compute_response_rate(applications: Sequence[JobApplication]) -> ResponseRateStats:
    with_response = 0
    no_response = 0
    for app in applications:
        status = _status(app)
        if status is None:
            continue
        if status.label == "no response":
            no_response += 1
        else:
            with_response += 1

    total = len(applications)
    return ResponseRateStats(
        total_applications=total,
        with_response=with_response,
        no_response=no_response,
        response_rate=ratio(with_response, total) * 100,
    )


def compute_analytics(applications: Sequence[JobApplication], now: datetime | None = None) -> ApplicationsAnalytics:
    return ApplicationsAnalytics(
        summary=compute_summary(applications),
        status_distribution=compute_status_distribution(applications),
        applications_by_date=compute_applications_by_date(applications),
        source_effectiveness=compute_source_effectiveness(applications),
        time_in_status=compute_time_in_status(applications, now),
        interest_rating_stats=compute_interest_rating_stats(applications),
        response_rate=compute_response_rate(applications),
    )
