from jobtracker.core.analytics.aggregator import (
    AnalyticsAggregator,
    CombinedAnalytics,
    DateRange,
    compute_default_date_range,
    filter_applications_by_date_range,
)
from jobtracker.core.analytics.applications import ApplicationsAnalytics, compute_analytics
from jobtracker.core.analytics.contacts import ContactAnalytics, compute_contact_analytics
from jobtracker.core.analytics.interviews import InterviewAnalytics, compute_interview_analytics

__all__ = [
    "AnalyticsAggregator",
    "ApplicationsAnalytics",
    "CombinedAnalytics",
    "ContactAnalytics",
    "DateRange",
    "InterviewAnalytics",
    "compute_analytics",
    "compute_contact_analytics",
    "compute_default_date_range",
    "compute_interview_analytics",
    "filter_applications_by_date_range",
]
