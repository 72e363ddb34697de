"""LMNP Core - Accounting statements and liasse fiscale mapping for furnished rentals."""

__version__ = "0.1.0"

from .calculations import build_declaration_context, calculate_declaration_totals
from .declarations import DeclarationService
from .exceptions import (
    ConfigurationError,
    DeclarationConflictError,
    DeclarationNotFoundError,
    InvalidPeriodError,
    LmnpError,
    ValidationError,
)
from .form_mapping import (
    apply_override,
    build_form_mappings,
    build_generation_snapshot,
    compute_amortization_cap,
    validate_form_mappings,
)
from .ledger import build_ledger
from .models import (
    AccountingPeriod,
    AccountingReportResult,
    Amortization,
    BalanceSheet,
    Declaration,
    DeclarationContext,
    DeclarationTotals,
    Expense,
    IncomeStatement,
    LiasseFormMapping,
    LiasseFormType,
    LiasseGenerationSnapshot,
    Property,
    Revenue,
)
from .numeric import round_two, to_number
from .proration import compute_amortization_for_period
from .reports import generate_accounting_reports
from .repositories import Repositories
from .statements import build_balance_sheet, build_income_statement

__all__ = [
    # Calculations
    "calculate_declaration_totals",
    "build_declaration_context",
    "compute_amortization_for_period",
    "build_income_statement",
    "build_balance_sheet",
    "build_ledger",
    "generate_accounting_reports",
    # Liasse
    "build_form_mappings",
    "validate_form_mappings",
    "build_generation_snapshot",
    "compute_amortization_cap",
    "apply_override",
    # Services
    "DeclarationService",
    "Repositories",
    # Models
    "AccountingPeriod",
    "AccountingReportResult",
    "Amortization",
    "BalanceSheet",
    "Declaration",
    "DeclarationContext",
    "DeclarationTotals",
    "Expense",
    "IncomeStatement",
    "LiasseFormMapping",
    "LiasseFormType",
    "LiasseGenerationSnapshot",
    "Property",
    "Revenue",
    # Numeric
    "to_number",
    "round_two",
    # Exceptions
    "LmnpError",
    "ValidationError",
    "InvalidPeriodError",
    "DeclarationConflictError",
    "DeclarationNotFoundError",
    "ConfigurationError",
]
