from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel, field_validator

from jobtracker.core.analytics.applications import ApplicationsAnalytics, compute_analytics
from jobtracker.core.analytics.contacts import ContactAnalytics, compute_contact_analytics
from jobtracker.core.analytics.interviews import InterviewAnalytics, compute_interview_analytics
from jobtracker.core.applications import JobApplication
from jobtracker.core.clock import Clock, calendar_day, utc_now
from jobtracker.core.ports import ContactRepository, InterviewStageRepository, JobApplicationRepository
from jobtracker.core.result import Result

logger = logging.getLogger(__name__)


class DateRange(BaseModel):
    """Inclusive range of calendar days (``YYYY-MM-DD``); either end may be open."""

    start_date: str | None = None
    end_date: str | None = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def validate_day(cls, value: object) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None
        try:
            return calendar_day(text)
        except ValueError as exc:
            raise ValueError(f"'{text}' is not an ISO-8601 date") from exc

    @property
    def is_open(self) -> bool:
        return self.start_date is None and self.end_date is None


class CombinedAnalytics(BaseModel):
    applications: ApplicationsAnalytics
    contacts: ContactAnalytics
    interviews: InterviewAnalytics
    date_range: DateRange


class ApplicationAnalyticsReport(BaseModel):
    analytics: ApplicationsAnalytics
    date_range: DateRange


def compute_default_date_range(applications: Sequence[JobApplication]) -> DateRange:
    days = [calendar_day(app.application_date) for app in applications]
    if not days:
        return DateRange()
    return DateRange(start_date=min(days), end_date=max(days))


def filter_applications_by_date_range(
    applications: Sequence[JobApplication], date_range: DateRange
) -> list[JobApplication]:
    selected = []
    for app in applications:
        day = calendar_day(app.application_date)
        if date_range.start_date and day < date_range.start_date:
            continue
        if date_range.end_date and day > date_range.end_date:
            continue
        selected.append(app)
    return selected


class AnalyticsAggregator:
    def __init__(
        self,
        applications: JobApplicationRepository,
        contacts: ContactRepository,
        interviews: InterviewStageRepository,
        clock: Clock = utc_now,
    ):
        self.applications = applications
        self.contacts = contacts
        self.interviews = interviews
        self.clock = clock

    def _now(self) -> datetime:
        return self.clock()

    def _in_range(self, date_range: DateRange | None) -> Result[tuple[list[JobApplication], DateRange], str]:
        def select(apps: list[JobApplication]) -> tuple[list[JobApplication], DateRange]:
            effective = date_range if date_range is not None and not date_range.is_open else compute_default_date_range(apps)
            return filter_applications_by_date_range(apps, effective), effective

        return self.applications.get_all().map(select)

    def compute_all_analytics(self, date_range: DateRange | None = None) -> Result[CombinedAnalytics, str]:
        selected = self._in_range(date_range)
        if selected.is_err():
            logger.warning("Analytics unavailable: %s", selected.unwrap_err())
            return selected
        apps, effective = selected.unwrap()

        def combine(parts: tuple[ContactAnalytics, InterviewAnalytics]) -> CombinedAnalytics:
            contacts, interviews = parts
            return CombinedAnalytics(
                applications=compute_analytics(apps, self._now()),
                contacts=contacts,
                interviews=interviews,
                date_range=effective,
            )

        return (
            self.compute_contact_analytics_only(apps)
            .and_then(lambda contacts: self.compute_interview_analytics_only(apps).map(lambda iv: (contacts, iv)))
            .map(combine)
        )

    def compute_application_analytics(
        self, date_range: DateRange | None = None
    ) -> Result[ApplicationAnalyticsReport, str]:
        return self._in_range(date_range).map(
            lambda selected: ApplicationAnalyticsReport(
                analytics=compute_analytics(selected[0], self._now()), date_range=selected[1]
            )
        )

    def compute_contact_analytics_only(self, applications: Sequence[JobApplication]) -> Result[ContactAnalytics, str]:
        app_ids = {app.id for app in applications}
        return self.contacts.get_all().map(
            lambda contacts: compute_contact_analytics(
                applications, [c for c in contacts if c.job_application_id in app_ids]
            )
        )

    def compute_interview_analytics_only(
        self, applications: Sequence[JobApplication]
    ) -> Result[InterviewAnalytics, str]:
        app_ids = {app.id for app in applications}
        return self.interviews.get_all().map(
            lambda stages: compute_interview_analytics(
                applications, [s for s in stages if s.job_application_id in app_ids]
            )
        )
