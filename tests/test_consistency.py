"""Tests for the advisory consistency checks."""

from lmnp_core.consistency import check_balance, check_result_alignment, run_consistency_checks
from lmnp_core.models import BalanceSheet, CheckStatus, IncomeStatement


class TestConsistencyChecks:
    """Test suite for run_consistency_checks."""

    def test_balanced_and_aligned(self):
        sheet = BalanceSheet(total_assets=100, total_liabilities=100)
        statement = IncomeStatement(total_revenues=1000, total_expenses=200, net_result=800)

        balance, alignment = run_consistency_checks(sheet, statement)

        assert balance.status == CheckStatus.OK
        assert balance.message == "Bilan équilibré : actif et passif concordent"
        assert alignment.status == CheckStatus.OK
        assert alignment.gap == 0

    def test_unbalanced_sheet_reports_signed_gap(self):
        sheet = BalanceSheet(is_balanced=False, balance_gap=-12.5)

        check = check_balance(sheet)

        assert check.status == CheckStatus.WARNING
        assert check.gap == -12.5
        assert check.message == "Écart détecté entre actif et passif (-12.50 €)"

    def test_misaligned_result(self):
        statement = IncomeStatement(total_revenues=1000, total_expenses=200, net_result=750)

        check = check_result_alignment(statement)

        assert check.status == CheckStatus.WARNING
        assert check.gap == 50
        assert check.message == "Écart calculé sur le résultat (50.00 €)"
