import pytest
from pydantic import ValidationError as PydanticValidationError

from jobtracker.core.analytics import DateRange, compute_default_date_range, filter_applications_by_date_range


def _seed(container):
    manager = container.manager
    early = manager.create({"company": "Acme", "position_title": "Dev", "application_date": "2024-01-05"}).unwrap()
    middle = manager.create({"company": "Globex", "position_title": "Dev", "application_date": "2024-02-10"}).unwrap()
    late = manager.create({"company": "Initech", "position_title": "Dev", "application_date": "2024-02-28"}).unwrap()
    manager.change_status(middle.id, "offer").unwrap()
    container.contacts.create({"job_application_id": early.id, "contact_name": "Pat", "outreach_date": "2024-01-06"})
    container.interviews.create({"job_application_id": middle.id, "round": 1, "interview_type": "technical"})
    return early, middle, late


def test_date_range_normalizes_to_days() -> None:
    date_range = DateRange(start_date="2024-01-05T23:00:00Z", end_date=" ")
    assert date_range.start_date == "2024-01-05"
    assert date_range.end_date is None
    assert not date_range.is_open
    assert DateRange().is_open
    with pytest.raises(PydanticValidationError):
        DateRange(start_date="yesterday-ish")


def test_default_range_spans_application_dates(memory_container) -> None:
    early, middle, late = _seed(memory_container)
    apps = memory_container.manager.list_applications().unwrap()
    assert compute_default_date_range(apps) == DateRange(start_date="2024-01-05", end_date="2024-02-28")
    assert compute_default_date_range([]).is_open

    inclusive = filter_applications_by_date_range(apps, DateRange(start_date="2024-02-10", end_date="2024-02-28"))
    assert {app.id for app in inclusive} == {middle.id, late.id}


def test_compute_all_analytics_filters_every_section(memory_container) -> None:
    early, middle, late = _seed(memory_container)
    aggregator = memory_container.analytics

    everything = aggregator.compute_all_analytics().unwrap()
    assert everything.date_range == DateRange(start_date="2024-01-05", end_date="2024-02-28")
    assert everything.applications.summary.total_applications == 3
    assert everything.contacts.total_contacts == 1
    assert everything.interviews.total_interviews == 1

    february = aggregator.compute_all_analytics(DateRange(start_date="2024-02-01")).unwrap()
    assert february.date_range.start_date == "2024-02-01"
    assert february.applications.summary.total_applications == 2
    assert february.applications.summary.offers_received == 1
    assert february.contacts.total_contacts == 0
    assert february.interviews.total_interviews == 1
    assert february.interviews.interview_conversion_rate == 1

    report = aggregator.compute_application_analytics(DateRange(end_date="2024-01-31")).unwrap()
    assert report.analytics.summary.total_applications == 1


def test_analytics_on_empty_store(memory_container) -> None:
    combined = memory_container.analytics.compute_all_analytics().unwrap()
    assert combined.applications.summary.total_applications == 0
    assert combined.contacts.total_contacts == 0
    assert combined.interviews.total_interviews == 0
    assert combined.date_range.is_open
