from datetime import UTC, datetime

import pytest

from jobtracker.core.analytics import compute_analytics, compute_contact_analytics, compute_interview_analytics
from jobtracker.core.analytics.applications import compute_time_in_status
from jobtracker.core.analytics.stats import average, median, ratio
from jobtracker.core.applications import create_job_application_with_initial_status, new_status
from jobtracker.core.contacts import create_contact
from jobtracker.core.interviews import create_interview_stage
from jobtracker.core.status import ActiveStatus, InactiveStatus

NOW = datetime(2024, 1, 1, tzinfo=UTC)


def _app(app_id: str, label: str | None = None, **fields):
    data = {"company": f"Company {app_id}", "position_title": "Dev", "application_date": "2024-01-01", **fields}
    app = create_job_application_with_initial_status(data, lambda: app_id, NOW).unwrap()
    if label == "rejected":
        new_status(app, InactiveStatus(label="rejected"), NOW)
    elif label == "no response":
        new_status(app, InactiveStatus(label="no response"), NOW)
    elif label:
        new_status(app, ActiveStatus(label=label), NOW)
    return app


def _contact(contact_id: str, app_id: str, **fields):
    data = {"job_application_id": app_id, "contact_name": "Pat", "outreach_date": "2024-01-01", **fields}
    return create_contact(data, lambda: contact_id, NOW).unwrap()


def _stage(stage_id: str, app_id: str, round: int, **fields):
    data = {"job_application_id": app_id, "round": round, "interview_type": "technical", **fields}
    return create_interview_stage(data, lambda: stage_id, NOW).unwrap()


def test_stats_helpers_handle_empty_input() -> None:
    assert average([]) == 0
    assert median([]) == 0
    assert median([3, 1, 2]) == 2
    assert median([4, 1, 3, 2]) == 2.5
    assert ratio(1, 0) == 0


def test_empty_input_yields_zeroes() -> None:
    analytics = compute_analytics([], NOW)
    assert analytics.summary.total_applications == 0
    assert analytics.response_rate.response_rate == 0
    assert analytics.status_distribution == []
    assert analytics.applications_by_date == []
    assert analytics.source_effectiveness == []
    assert analytics.time_in_status == []
    assert analytics.interest_rating_stats == []


def test_summary_counts_offers_and_rejections() -> None:
    apps = [_app("a", "offer"), _app("b", "rejected"), _app("c")]
    summary = compute_analytics(apps, NOW).summary
    assert summary.total_applications == 3
    assert summary.offers_received == 1
    assert summary.rejections == 1
    assert summary.active_applications == 2
    assert summary.inactive_applications == 1


def test_distribution_sources_ratings_and_response_rate() -> None:
    apps = [
        _app("a", "offer", source_type="referral", interest_rating=3),
        _app("b", "rejected", source_type="referral", interest_rating=3),
        _app("c", "no response", source_type="job_board", interest_rating=1),
        _app("d", source_type="job_board", application_date="2024-01-02"),
    ]
    analytics = compute_analytics(apps, NOW)

    distribution = {row.label: (row.category, row.count) for row in analytics.status_distribution}
    assert distribution == {
        "offer": ("active", 1),
        "rejected": ("inactive", 1),
        "no response": ("inactive", 1),
        "applied": ("active", 1),
    }
    assert [(row.date, row.count) for row in analytics.applications_by_date] == [("2024-01-01", 3), ("2024-01-02", 1)]

    sources = {row.source_type: row for row in analytics.source_effectiveness}
    assert sources["referral"].success_rate == 0.5
    assert sources["job_board"].success_rate == 0

    ratings = {row.rating: row for row in analytics.interest_rating_stats}
    assert ratings[3].total == 2
    assert ratings[3].offers == 1
    assert ratings[1].total == 1

    assert analytics.response_rate.with_response == 3
    assert analytics.response_rate.no_response == 1
    assert analytics.response_rate.response_rate == 75
    assert analytics.summary.average_interest_rating == pytest.approx(7 / 3)


def test_time_in_status_runs_open_entry_until_now() -> None:
    app = _app("a")
    new_status(app, ActiveStatus(label="interview"), datetime(2024, 1, 3, tzinfo=UTC))
    stats = {row.label: row for row in compute_time_in_status([app], datetime(2024, 1, 4, tzinfo=UTC))}
    assert stats["applied"].average_days == 2
    assert stats["interview"].average_days == 1
    assert stats["interview"].sample_size == 1


def test_contact_analytics_buckets_and_rates() -> None:
    apps = [_app("a", "offer"), _app("b", "rejected"), _app("c")]
    contacts = [
        _contact("c1", "a", channel="email", role="recruiter", response_received=True),
        _contact("c2", "a", channel="email"),
        _contact("c3", "b", channel="linkedin", role="recruiter"),
    ]
    analytics = compute_contact_analytics(apps, contacts)

    assert analytics.total_contacts == 3
    assert analytics.applications_with_contacts == 2
    assert analytics.applications_without_contacts == 1
    assert analytics.average_contacts_per_application == 1

    channels = {row.channel: row for row in analytics.response_rate_by_channel}
    assert channels["email"].response_rate == 0.5
    assert channels["linkedin"].response_rate == 0
    roles = {row.role: row for row in analytics.response_rate_by_role}
    assert roles["recruiter"].total == 2
    assert roles["unknown"].total == 1

    buckets = {row.contact_count: row for row in analytics.contact_count_correlation}
    assert list(buckets) == ["0", "1-2", "3-5", "6+"]
    assert buckets["0"].applications == 1
    assert buckets["0"].active_rate == 1
    assert buckets["1-2"].applications == 2
    assert buckets["1-2"].offer_rate == 0.5
    assert buckets["1-2"].rejection_rate == 0.5
    assert buckets["6+"].applications == 0


def test_interview_analytics() -> None:
    apps = [
        _app("a", "offer", application_date="2024-01-01"),
        _app("b", "rejected", application_date="2024-01-01"),
        _app("c", "interview"),
    ]
    stages = [
        _stage("s1", "a", 1, scheduled_date="2024-01-05", completed_date="2024-01-05"),
        _stage("s2", "a", 2, scheduled_date="2024-01-09", is_final_round=True, interview_type="onsite"),
        _stage("s3", "b", 1, scheduled_date="2024-01-03", completed_date="2024-01-03"),
        _stage("s4", "c", 1),
    ]
    analytics = compute_interview_analytics(apps, stages)

    assert analytics.total_interviews == 4
    assert analytics.average_rounds_to_offer == 2
    assert analytics.interview_conversion_rate == pytest.approx(1 / 3)
    assert analytics.average_days_from_application_to_first_interview == 3
    assert analytics.median_days_from_application_to_first_interview == 3
    assert analytics.average_days_between_rounds == 4

    rounds = {row.round: row for row in analytics.round_analysis}
    assert (rounds[1].total, rounds[1].offers, rounds[1].rejected, rounds[1].still_active) == (3, 1, 1, 1)
    assert rounds[1].success_rate == 0.5
    assert rounds[2].success_rate == 1

    types = {row.interview_type: row for row in analytics.interview_type_effectiveness}
    assert types["technical"].total == 3
    assert types["onsite"].offers == 1

    assert analytics.final_round_success.total_final_rounds == 1
    assert analytics.final_round_success.conversion_rate == 1
    assert analytics.interview_completion_rate.scheduled == 3
    assert analytics.interview_completion_rate.completed == 2


def test_rates_stay_within_unit_interval() -> None:
    apps = [_app(str(index), label) for index, label in enumerate(["offer", "rejected", "offer", None, "onsite"])]
    analytics = compute_analytics(apps, NOW)
    rates = [row.success_rate for row in analytics.source_effectiveness]
    rates += [row.success_rate for row in analytics.interest_rating_stats]
    assert all(0 <= rate <= 1 for rate in rates)
    assert 0 <= analytics.response_rate.response_rate <= 100
