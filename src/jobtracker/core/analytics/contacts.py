from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel

from jobtracker.core.analytics.stats import average, median, ratio
from jobtracker.core.applications import JobApplication
from jobtracker.core.clock import days_between
from jobtracker.core.contacts import Contact
from jobtracker.core.status import current_status

CONTACT_BUCKETS: list[tuple[str, int, int | None]] = [
    ("0", 0, 0),
    ("1-2", 1, 2),
    ("3-5", 3, 5),
    ("6+", 6, None),
]


class ResponseRateByChannel(BaseModel):
    channel: str
    total: int
    responses: int
    response_rate: float


class ResponseRateByRole(BaseModel):
    role: str
    total: int
    responses: int
    response_rate: float


class ContactCountCorrelation(BaseModel):
    contact_count: str
    applications: int
    active_rate: float
    offer_rate: float
    rejection_rate: float


class ContactAnalytics(BaseModel):
    total_contacts: int
    average_contacts_per_application: float
    applications_with_contacts: int
    applications_without_contacts: int
    average_days_to_response: float
    median_days_to_response: float
    response_rate_by_channel: list[ResponseRateByChannel]
    response_rate_by_role: list[ResponseRateByRole]
    contact_count_correlation: list[ContactCountCorrelation]


def _group_by_application(contacts: Sequence[Contact]) -> dict[str, list[Contact]]:
    grouped: dict[str, list[Contact]] = {}
    for contact in contacts:
        grouped.setdefault(contact.job_application_id, []).append(contact)
    return grouped


def days_to_response(contacts: Sequence[Contact]) -> list[float]:
    # No response date is recorded, so the last update of a responded
    # contact stands in for it.
    return [
        days_between(contact.outreach_date, contact.updated_at)
        for contact in contacts
        if contact.response_received
    ]


def _response_rates(contacts: Sequence[Contact], key: str) -> list[tuple[str, int, int]]:
    totals: dict[str, list[int]] = {}
    for contact in contacts:
        group = getattr(contact, key) or "unknown"
        counts = totals.setdefault(group, [0, 0])
        counts[0] += 1
        if contact.response_received:
            counts[1] += 1
    return [(group, total, responses) for group, (total, responses) in totals.items()]


def compute_contact_count_correlation(
    applications: Sequence[JobApplication],
    by_application: dict[str, list[Contact]],
) -> list[ContactCountCorrelation]:
    tallies = {name: [0, 0, 0] for name, _, _ in CONTACT_BUCKETS}
    for app in applications:
        count = len(by_application.get(app.id, []))
        name = next(
            name for name, low, high in CONTACT_BUCKETS if count >= low and (high is None or count <= high)
        )
        bucket = tallies[name]
        bucket[0] += 1
        status = current_status(app).unwrap_or(None)
        if status is None:
            continue
        if status.label == "offer":
            bucket[1] += 1
        elif status.label == "rejected":
            bucket[2] += 1

    correlation = []
    for name, (total, offers, rejections) in tallies.items():
        correlation.append(
            ContactCountCorrelation(
                contact_count=name,
                applications=total,
                active_rate=ratio(total - offers - rejections, total),
                offer_rate=ratio(offers, total),
                rejection_rate=ratio(rejections, total),
            )
        )
    return correlation


def compute_contact_analytics(
    applications: Sequence[JobApplication],
    contacts: Sequence[Contact],
) -> ContactAnalytics:
    by_application = _group_by_application(contacts)
    app_ids = {app.id for app in applications}
    with_contacts = sum(1 for app_id in by_application if app_id in app_ids)
    per_application = [len(by_application.get(app.id, [])) for app in applications]
    response_days = days_to_response(contacts)

    return ContactAnalytics(
        total_contacts=len(contacts),
        average_contacts_per_application=average(per_application),
        applications_with_contacts=with_contacts,
        applications_without_contacts=len(applications) - with_contacts,
        average_days_to_response=average(response_days),
        median_days_to_response=median(response_days),
        response_rate_by_channel=[
            ResponseRateByChannel(channel=channel, total=total, responses=responses, response_rate=ratio(responses, total))
            for channel, total, responses in _response_rates(contacts, "channel")
        ],
        response_rate_by_role=[
            ResponseRateByRole(role=role, total=total, responses=responses, response_rate=ratio(responses, total))
            for role, total, responses in _response_rates(contacts, "role")
        ],
        contact_count_correlation=compute_contact_count_correlation(applications, by_application),
    )
