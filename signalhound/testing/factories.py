"""Test factories for generating test data."""

from polyfactory.factories.pydantic_factory import ModelFactory

from signalhound.models.dashboard import DashboardSummary, TestResult


class TestResultFactory(ModelFactory[TestResult]):
    """Factory for TestResult."""

    latest_timestamp = 1735732800000
    first_timestamp = 1735646400000


class DashboardSummaryFactory(ModelFactory[DashboardSummary]):
    """Factory for DashboardSummary."""

    overall_status = "FAILING"
    dashboard_name = "sig-release-master-blocking"
    dashboard_tab = None
