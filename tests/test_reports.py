"""Tests for accounting report generation."""

import pytest

from lmnp_core.exceptions import InvalidPeriodError
from lmnp_core.models import AccountingPeriod, CheckStatus
from lmnp_core.reports import generate_accounting_reports
from lmnp_core.repositories import InMemoryRecordRepository, Repositories


class FailingRevenueRepository:
    def get_by_user_id(self, user_id):
        raise ConnectionError("backend unavailable")


class TestGenerateAccountingReports:
    """Test suite for generate_accounting_reports."""

    def test_full_year_report(self, user_id, repositories, year_2023):
        report = generate_accounting_reports(user_id, year_2023, repositories)

        assert report.period == year_2023
        assert report.income_statement.total_revenues == 1000
        assert report.income_statement.total_expenses == 320
        assert report.income_statement.net_result == 680
        assert report.balance_sheet.is_balanced
        assert report.balance_sheet.total_assets == 1760
        assert [a.account for a in report.ledger] == ["706", "6xx-maintenance", "681", "28"]
        assert [c.status for c in report.checks] == [CheckStatus.OK, CheckStatus.OK]
        assert not report.has_warnings

    def test_other_users_records_ignored(self, repositories, year_2023):
        report = generate_accounting_reports("someone-else", year_2023, repositories)

        assert report.income_statement.net_result == 0
        assert report.ledger == []

    def test_invalid_period_rejected(self, user_id, repositories):
        period = AccountingPeriod(start_date="2023-12-31", end_date="2023-01-01")

        with pytest.raises(InvalidPeriodError) as exc_info:
            generate_accounting_reports(user_id, period, repositories)

        assert str(exc_info.value) == "La date de début doit être antérieure à la date de fin"
        assert exc_info.value.recoverable

    def test_single_day_period_allowed(self, user_id, repositories):
        period = AccountingPeriod(start_date="2023-03-01", end_date="2023-03-01")

        report = generate_accounting_reports(user_id, period, repositories)

        assert report.income_statement.total_revenues == 1000

    def test_repository_failure_propagates(self, user_id, repositories, year_2023):
        broken = Repositories(
            revenues=FailingRevenueRepository(),
            expenses=repositories.expenses,
            amortizations=repositories.amortizations,
            properties=repositories.properties,
            declarations=repositories.declarations,
        )

        with pytest.raises(ConnectionError):
            generate_accounting_reports(user_id, year_2023, broken)

    def test_camel_case_export(self, user_id, repositories, year_2023):
        report = generate_accounting_reports(user_id, year_2023, repositories)

        dumped = report.model_dump(mode="json", by_alias=True)

        assert set(dumped) == {"period", "balanceSheet", "incomeStatement", "ledger", "checks"}
        assert dumped["period"] == {"startDate": "2023-01-01", "endDate": "2023-12-31"}
        assert dumped["balanceSheet"]["isBalanced"] is True
        assert dumped["ledger"][0]["totalCredit"] == 1000


class TestInMemoryRepositories:
    def test_user_scoping(self, revenues):
        repository = InMemoryRecordRepository(revenues)

        assert repository.get_by_user_id("user-1") == revenues
        assert repository.get_by_user_id("user-2") == []
