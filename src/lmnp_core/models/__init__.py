"""Data models for lmnp-core.

This package provides:
- Input records handed over by the storage layer (records.py)
- Derived statements, ledger and consistency checks (reports.py)
- Tax-form mappings, validation issues and snapshots (liasse.py)
"""

from lmnp_core.models.records import (
    # Enumerations
    RevenueType,
    ExpenseCategory,
    AmortizationCategory,
    AmortizationStatus,
    DeclarationStatus,
    TaxRegime,
    # Helpers
    parse_date,
    # Records
    Revenue,
    Expense,
    Amortization,
    Property,
    Declarant,
    DeclarationDetails,
    Declaration,
)

from lmnp_core.models.reports import (
    ReportModel,
    AccountingPeriod,
    DeclarationTotals,
    DeclarationContext,
    StatementLine,
    IncomeStatement,
    BalanceSheet,
    LedgerEntry,
    LedgerAccount,
    CheckStatus,
    ConsistencyCheck,
    AccountingReportResult,
)

from lmnp_core.models.liasse import (
    LiasseFormType,
    CaseCategory,
    IssueSeverity,
    GLOBAL_FORM,
    FormOverrides,
    FormCaseValue,
    LiasseFormMapping,
    FormValidationIssue,
    LiasseGenerationSnapshot,
)

__all__ = [
    # Enumerations
    "RevenueType",
    "ExpenseCategory",
    "AmortizationCategory",
    "AmortizationStatus",
    "DeclarationStatus",
    "TaxRegime",
    "CheckStatus",
    "LiasseFormType",
    "CaseCategory",
    "IssueSeverity",
    # Helpers
    "parse_date",
    # Records
    "Revenue",
    "Expense",
    "Amortization",
    "Property",
    "Declarant",
    "DeclarationDetails",
    "Declaration",
    # Reports
    "ReportModel",
    "AccountingPeriod",
    "DeclarationTotals",
    "DeclarationContext",
    "StatementLine",
    "IncomeStatement",
    "BalanceSheet",
    "LedgerEntry",
    "LedgerAccount",
    "ConsistencyCheck",
    "AccountingReportResult",
    # Liasse
    "GLOBAL_FORM",
    "FormOverrides",
    "FormCaseValue",
    "LiasseFormMapping",
    "FormValidationIssue",
    "LiasseGenerationSnapshot",
]
