from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel

from jobtracker.core.analytics.stats import average, median, ratio
from jobtracker.core.applications import JobApplication
from jobtracker.core.clock import days_between
from jobtracker.core.interviews import InterviewStage
from jobtracker.core.status import ActiveStatus, InactiveStatus, current_status


class InterviewTypeEffectiveness(BaseModel):
    interview_type: str
    total: int
    offers: int
    rejected: int
    success_rate: float


class RoundAnalysis(BaseModel):
    round: int
    total: int
    offers: int
    rejected: int
    still_active: int
    success_rate: float


class FinalRoundSuccess(BaseModel):
    total_final_rounds: int
    offers: int
    rejections: int
    conversion_rate: float


class InterviewCompletionRate(BaseModel):
    scheduled: int
    completed: int
    completion_rate: float


class InterviewAnalytics(BaseModel):
    total_interviews: int
    average_rounds_to_offer: float
    median_rounds_to_offer: float
    interview_conversion_rate: float
    average_days_from_application_to_first_interview: float
    median_days_from_application_to_first_interview: float
    average_days_between_rounds: float
    interview_type_effectiveness: list[InterviewTypeEffectiveness]
    round_analysis: list[RoundAnalysis]
    final_round_success: FinalRoundSuccess
    interview_completion_rate: InterviewCompletionRate


def _group_by_application(stages: Sequence[InterviewStage]) -> dict[str, list[InterviewStage]]:
    grouped: dict[str, list[InterviewStage]] = {}
    for stage in stages:
        grouped.setdefault(stage.job_application_id, []).append(stage)
    for app_stages in grouped.values():
        app_stages.sort(key=lambda stage: stage.round)
    return grouped


def _outcomes(
    app_ids: set[str], statuses: dict[str, ActiveStatus | InactiveStatus | None]
) -> tuple[int, int, int]:
    """Offers, rejections and other active outcomes among ``app_ids``."""
    offers = rejected = still_active = 0
    for app_id in app_ids:
        status = statuses.get(app_id)
        if status is None:
            continue
        if status.label == "offer":
            offers += 1
        elif status.label == "rejected":
            rejected += 1
        elif status.category == "active":
            still_active += 1
    return offers, rejected, still_active


def rounds_to_offer(
    applications: Sequence[JobApplication], by_application: dict[str, list[InterviewStage]]
) -> list[int]:
    rounds = []
    for app in applications:
        status = current_status(app).unwrap_or(None)
        stages = by_application.get(app.id, [])
        if status is not None and status.label == "offer" and stages:
            rounds.append(len(stages))
    return rounds


def days_to_first_interview(
    applications: Sequence[JobApplication], by_application: dict[str, list[InterviewStage]]
) -> list[float]:
    days = []
    for app in applications:
        stages = by_application.get(app.id, [])
        if stages and stages[0].scheduled_date:
            days.append(days_between(app.application_date, stages[0].scheduled_date))
    return days


def days_between_rounds(by_application: dict[str, list[InterviewStage]]) -> list[float]:
    days = []
    for stages in by_application.values():
        for current, following in zip(stages, stages[1:]):
            if current.scheduled_date and following.scheduled_date:
                days.append(days_between(current.scheduled_date, following.scheduled_date))
    return days


def compute_interview_analytics(
    applications: Sequence[JobApplication],
    stages: Sequence[InterviewStage],
) -> InterviewAnalytics:
    by_application = _group_by_application(stages)
    statuses = {app.id: current_status(app).unwrap_or(None) for app in applications}

    with_interviews = [app for app in applications if by_application.get(app.id)]
    offers_with_interviews = sum(
        1 for app in with_interviews if (status := statuses[app.id]) is not None and status.label == "offer"
    )

    type_totals: dict[str, int] = {}
    type_apps: dict[str, set[str]] = {}
    round_totals: dict[int, int] = {}
    round_apps: dict[int, set[str]] = {}
    for stage in stages:
        type_totals[stage.interview_type] = type_totals.get(stage.interview_type, 0) + 1
        type_apps.setdefault(stage.interview_type, set()).add(stage.job_application_id)
        round_totals[stage.round] = round_totals.get(stage.round, 0) + 1
        round_apps.setdefault(stage.round, set()).add(stage.job_application_id)

    type_effectiveness = []
    for interview_type, total in type_totals.items():
        offers, rejected, _ = _outcomes(type_apps[interview_type], statuses)
        type_effectiveness.append(
            InterviewTypeEffectiveness(
                interview_type=interview_type,
                total=total,
                offers=offers,
                rejected=rejected,
                success_rate=ratio(offers, offers + rejected),
            )
        )

    round_analysis = []
    for round_number in sorted(round_totals):
        offers, rejected, still_active = _outcomes(round_apps[round_number], statuses)
        round_analysis.append(
            RoundAnalysis(
                round=round_number,
                total=round_totals[round_number],
                offers=offers,
                rejected=rejected,
                still_active=still_active,
                success_rate=ratio(offers, offers + rejected),
            )
        )

    final_rounds = [stage for stage in stages if stage.is_final_round]
    final_offers, final_rejections, _ = _outcomes({stage.job_application_id for stage in final_rounds}, statuses)

    scheduled = [stage for stage in stages if stage.scheduled_date]
    completed = sum(1 for stage in scheduled if stage.completed_date)

    offer_rounds = rounds_to_offer(applications, by_application)
    first_interview_days = days_to_first_interview(applications, by_application)

    return InterviewAnalytics(
        total_interviews=len(stages),
        average_rounds_to_offer=average(offer_rounds),
        median_rounds_to_offer=median(offer_rounds),
        interview_conversion_rate=ratio(offers_with_interviews, len(with_interviews)),
        average_days_from_application_to_first_interview=average(first_interview_days),
        median_days_from_application_to_first_interview=median(first_interview_days),
        average_days_between_rounds=average(days_between_rounds(by_application)),
        interview_type_effectiveness=type_effectiveness,
        round_analysis=round_analysis,
        final_round_success=FinalRoundSuccess(
            total_final_rounds=len(final_rounds),
            offers=final_offers,
            rejections=final_rejections,
            conversion_rate=ratio(final_offers, len(final_rounds)),
        ),
        interview_completion_rate=InterviewCompletionRate(
            scheduled=len(scheduled),
            completed=completed,
            completion_rate=ratio(completed, len(scheduled)),
        ),
    )
