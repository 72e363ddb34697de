"""Derived accounting models: totals, statements, ledger and checks.

Attributes are snake_case; ``model_dump(by_alias=True)`` yields the camelCase
field names exporters rely on (``totalRevenue``, ``balanceGap``...).
"""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lmnp_core.models.records import Amortization, Declaration, Expense, Property, Revenue


class ReportModel(BaseModel):
    """Base for derived models exposed to exporters."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AccountingPeriod(ReportModel):
    """Arbitrary reporting interval, inclusive at both ends."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"examples": [{"startDate": "2024-01-01", "endDate": "2024-12-31"}]},
    )

    start_date: dt.date = Field(description="First day of the period (inclusive)")
    end_date: dt.date = Field(description="Last day of the period (inclusive)")

    @classmethod
    def calendar_year(cls, year: int) -> "AccountingPeriod":
        return cls(start_date=dt.date(year, 1, 1), end_date=dt.date(year, 12, 31))

    @property
    def is_ordered(self) -> bool:
        return self.start_date <= self.end_date

    def contains(self, day: Optional[dt.date]) -> bool:
        return day is not None and self.start_date <= day <= self.end_date


class DeclarationTotals(ReportModel):
    """Aggregates for one declaration year, each rounded to cents."""

    total_revenue: float = 0.0
    total_expenses: float = 0.0
    total_amortizations: float = 0.0
    net_result: float = 0.0

    @property
    def pre_amortization_result(self) -> float:
        return self.total_revenue - self.total_expenses


class DeclarationContext(ReportModel):
    """Everything the form mapping needs for one declaration.

    Built fresh from the raw collections on every request; never cached.
    """

    declaration: Declaration
    totals: DeclarationTotals
    revenues: list[Revenue] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    properties: list[Property] = Field(default_factory=list)
    amortizations: list[Amortization] = Field(default_factory=list)


class StatementLine(ReportModel):
    label: str
    amount: float


class IncomeStatement(ReportModel):
    """Compte de résultat: grouped revenues and expenses for a period."""

    revenues: list[StatementLine] = Field(default_factory=list)
    expenses: list[StatementLine] = Field(default_factory=list)
    total_revenues: float = 0.0
    total_expenses: float = 0.0
    net_result: float = 0.0


class BalanceSheet(ReportModel):
    """Bilan simplifié. ``is_balanced`` holds once the adjustment line is in."""

    assets: list[StatementLine] = Field(default_factory=list)
    liabilities: list[StatementLine] = Field(default_factory=list)
    total_assets: float = 0.0
    total_liabilities: float = 0.0
    is_balanced: bool = True
    balance_gap: float = 0.0


class LedgerEntry(ReportModel):
    date: dt.date
    description: str = ""
    debit: float = 0.0
    credit: float = 0.0
    reference: str = ""


class LedgerAccount(ReportModel):
    """One account of the grand livre with its running totals."""

    account: str
    label: str
    entries: list[LedgerEntry] = Field(default_factory=list)
    total_debit: float = 0.0
    total_credit: float = 0.0

    @property
    def balance(self) -> float:
        return self.total_debit - self.total_credit


class CheckStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


class ConsistencyCheck(ReportModel):
    """Advisory finding; never blocks report generation."""

    message: str
    status: CheckStatus
    gap: Optional[float] = None


class AccountingReportResult(ReportModel):
    period: AccountingPeriod
    balance_sheet: BalanceSheet
    income_statement: IncomeStatement
    ledger: list[LedgerAccount] = Field(default_factory=list)
    checks: list[ConsistencyCheck] = Field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return any(check.status != CheckStatus.OK for check in self.checks)


__all__ = [
    "ReportModel",
    "AccountingPeriod",
    "DeclarationTotals",
    "DeclarationContext",
    "StatementLine",
    "IncomeStatement",
    "BalanceSheet",
    "LedgerEntry",
    "LedgerAccount",
    "CheckStatus",
    "ConsistencyCheck",
    "AccountingReportResult",
]
