"""Tabular exports of accounting reports and liasse mappings.

Row builders turn report models into lists of cells; renderers turn rows into
CSV or plaintext. Header labels and row order are what downstream tools
parse, so they are part of the export contract.

Usage:
    exported = export_ledger(report, ExportFormat.CSV)
    Path(exported.filename).write_text(exported.content, encoding="utf-8")
"""

import csv
import io
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from lmnp_core.config import ExportConfig
from lmnp_core.models import AccountingPeriod, AccountingReportResult, LiasseFormMapping
from lmnp_core.numeric import format_amount_fr

Cell = Union[str, float]
Row = list[Cell]

BALANCE_HEADER: Row = ["Section", "Libellé", "Montant"]
INCOME_HEADER: Row = ["Nature", "Libellé", "Montant"]
LEDGER_HEADER: Row = ["Compte", "Libellé", "Date", "Description", "Débit", "Crédit", "Référence"]
LIASSE_HEADER: Row = ["Formulaire", "Case", "Libellé", "Calcul auto", "Valeur retenue", "Ajusté"]


class ExportFormat(str, Enum):
    CSV = "csv"
    TEXT = "txt"

    @property
    def media_type(self) -> str:
        return "text/csv" if self is ExportFormat.CSV else "text/plain"


@dataclass(frozen=True)
class ExportedFile:
    filename: str
    content: str
    media_type: str


# =============================================================================
# ROW BUILDERS
# =============================================================================


def balance_sheet_rows(report: AccountingReportResult) -> list[Row]:
    sheet = report.balance_sheet
    return [
        BALANCE_HEADER,
        *(["Actif", line.label, line.amount] for line in sheet.assets),
        ["Actif", "Total actif", sheet.total_assets],
        *(["Passif", line.label, line.amount] for line in sheet.liabilities),
        ["Passif", "Total passif", sheet.total_liabilities],
    ]


def income_statement_rows(report: AccountingReportResult) -> list[Row]:
    statement = report.income_statement
    return [
        INCOME_HEADER,
        *(["Produits", line.label, line.amount] for line in statement.revenues),
        ["Produits", "Total produits", statement.total_revenues],
        *(["Charges", line.label, line.amount] for line in statement.expenses),
        ["Charges", "Total charges", statement.total_expenses],
        ["Résultat", "Résultat net", statement.net_result],
    ]


def ledger_rows(report: AccountingReportResult) -> list[Row]:
    """One row per entry (dates as dd/mm/yyyy), then a Total row per account."""
    rows: list[Row] = [LEDGER_HEADER]
    for account in report.ledger:
        for entry in account.entries:
            rows.append(
                [
                    account.account,
                    account.label,
                    entry.date.strftime("%d/%m/%Y"),
                    entry.description,
                    entry.debit,
                    entry.credit,
                    entry.reference,
                ]
            )
        rows.append(
            [account.account, "Total", "", "", account.total_debit, account.total_credit, ""]
        )
    return rows


def liasse_rows(mappings: Sequence[LiasseFormMapping]) -> list[Row]:
    rows: list[Row] = [LIASSE_HEADER]
    for mapping in mappings:
        for case in mapping.cases:
            rows.append(
                [
                    mapping.form.value,
                    case.code,
                    case.label,
                    case.auto_value,
                    case.value,
                    "Oui" if case.overridden else "Non",
                ]
            )
    return rows


# =============================================================================
# RENDERERS
# =============================================================================


def _plain_amount(value: float) -> str:
    """1000.0 -> '1000', 60.5 -> '60.5', -12.25 -> '-12.25'."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def render_csv(rows: Sequence[Row], delimiter: str = ";") -> str:
    """Delimited rows with plain dotted amounts, one line per row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter, lineterminator="\n")
    for row in rows:
        writer.writerow(
            [_plain_amount(cell) if isinstance(cell, float) else cell for cell in row]
        )
    return buffer.getvalue().rstrip("\n")


def render_text(rows: Sequence[Row], delimiter: str = " \t ", currency_symbol: str = "€") -> str:
    """Human-readable rows; amounts formatted fr-FR with the currency symbol."""
    lines = []
    for row in rows:
        cells = [
            f"{format_amount_fr(cell)} {currency_symbol}" if isinstance(cell, float) else cell
            for cell in row
        ]
        lines.append(delimiter.join(cells))
    return "\n".join(lines)


def render_rows(rows: Sequence[Row], fmt: ExportFormat, config: Optional[ExportConfig] = None) -> str:
    config = config or ExportConfig()
    if fmt is ExportFormat.CSV:
        return render_csv(rows, config.csv_delimiter)
    return render_text(rows, config.text_delimiter, config.currency_symbol)


# =============================================================================
# FILES
# =============================================================================


def period_filename(prefix: str, period: AccountingPeriod, fmt: ExportFormat) -> str:
    return f"{prefix}_{period.start_date.isoformat()}_{period.end_date.isoformat()}.{fmt.value}"


def liasse_filename(year: int, fmt: ExportFormat) -> str:
    return f"liasse_{year}.{fmt.value}"


def _exported(filename: str, rows: list[Row], fmt: ExportFormat, config: Optional[ExportConfig]) -> ExportedFile:
    return ExportedFile(filename=filename, content=render_rows(rows, fmt, config), media_type=fmt.media_type)


def export_balance_sheet(
    report: AccountingReportResult,
    fmt: ExportFormat = ExportFormat.CSV,
    config: Optional[ExportConfig] = None,
) -> ExportedFile:
    return _exported(
        period_filename("bilan", report.period, fmt), balance_sheet_rows(report), fmt, config
    )


def export_income_statement(
    report: AccountingReportResult,
    fmt: ExportFormat = ExportFormat.CSV,
    config: Optional[ExportConfig] = None,
) -> ExportedFile:
    return _exported(
        period_filename("compte_resultat", report.period, fmt),
        income_statement_rows(report),
        fmt,
        config,
    )


def export_ledger(
    report: AccountingReportResult,
    fmt: ExportFormat = ExportFormat.CSV,
    config: Optional[ExportConfig] = None,
) -> ExportedFile:
    return _exported(
        period_filename("grand_livre", report.period, fmt), ledger_rows(report), fmt, config
    )


def export_liasse(
    year: int,
    mappings: Sequence[LiasseFormMapping],
    fmt: ExportFormat = ExportFormat.CSV,
    config: Optional[ExportConfig] = None,
) -> ExportedFile:
    return _exported(liasse_filename(year, fmt), liasse_rows(mappings), fmt, config)


__all__ = [
    "BALANCE_HEADER",
    "INCOME_HEADER",
    "LEDGER_HEADER",
    "LIASSE_HEADER",
    "ExportFormat",
    "ExportedFile",
    "balance_sheet_rows",
    "income_statement_rows",
    "ledger_rows",
    "liasse_rows",
    "render_csv",
    "render_text",
    "render_rows",
    "period_filename",
    "liasse_filename",
    "export_balance_sheet",
    "export_income_statement",
    "export_ledger",
    "export_liasse",
]
