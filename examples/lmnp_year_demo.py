#!/usr/bin/env python3
"""
LMNP Year-End Demonstration

This script walks through a furnished-rental year end:
1. Load a year of revenues, expenses and depreciable assets
2. Generate the balance sheet, income statement and general ledger
3. Create the yearly declaration and map it onto the liasse fiscale
4. Export everything as CSV

Run: python examples/lmnp_year_demo.py
"""

from pathlib import Path

from lmnp_core import AccountingPeriod, DeclarationService, Repositories, generate_accounting_reports
from lmnp_core.config import load_config
from lmnp_core.exports import (
    ExportFormat,
    export_balance_sheet,
    export_income_statement,
    export_ledger,
    export_liasse,
)
from lmnp_core.logging_config import configure_logging
from lmnp_core.models import Amortization, Expense, Property, Revenue
from lmnp_core.numeric import format_amount_fr

USER_ID = "demo-user"


def create_sample_repositories() -> Repositories:
    """Two studios in Lyon, one year of activity."""

    properties = [
        Property(id="studio-croix-rousse", user_id=USER_ID, address="8 rue d'Austerlitz, Lyon", monthly_rent=650),
        Property(id="studio-guillotiere", user_id=USER_ID, address="21 rue de Marseille, Lyon", monthly_rent=580),
    ]

    revenues = [
        Revenue(
            id=f"loyer-{prop.id}-{month:02d}",
            user_id=USER_ID,
            property_id=prop.id,
            amount=prop.monthly_rent,
            date=f"2023-{month:02d}-05",
            description=f"Loyer {month:02d}/2023",
            type="rent",
        )
        for prop in properties
        for month in range(1, 13)
    ]
    revenues.append(
        Revenue(
            id="regul-charges",
            user_id=USER_ID,
            property_id="studio-guillotiere",
            amount="240,00",
            date="2023-12-20",
            description="Régularisation de charges",
            type="charges",
        )
    )

    expenses = [
        Expense(id="pno", user_id=USER_ID, property_id="studio-croix-rousse", amount=180, date="2023-02-01",
                description="Assurance PNO", category="insurance"),
        Expense(id="tf-1", user_id=USER_ID, property_id="studio-croix-rousse", amount=720, date="2023-10-15",
                description="Taxe foncière", category="taxes"),
        Expense(id="tf-2", user_id=USER_ID, property_id="studio-guillotiere", amount=610, date="2023-10-15",
                description="Taxe foncière", category="taxes"),
        Expense(id="plombier", user_id=USER_ID, property_id="studio-guillotiere", amount="1 150,00",
                date="2023-06-12", description="Remplacement chauffe-eau", category="maintenance"),
        Expense(id="gestion", user_id=USER_ID, property_id="studio-croix-rousse", amount=936, date="2023-12-31",
                description="Frais d'agence", category="management"),
        Expense(id="perso", user_id=USER_ID, property_id="studio-croix-rousse", amount=90, date="2023-04-02",
                description="Déplacement personnel", category="other", deductible=False),
    ]

    amortizations = [
        Amortization(id="murs-cr", user_id=USER_ID, property_id="studio-croix-rousse", item_name="Bâti",
                     category="travaux", purchase_date="2021-03-01", purchase_amount=120000,
                     useful_life_years=30, annual_amortization=4000),
        Amortization(id="cuisine", user_id=USER_ID, property_id="studio-guillotiere", item_name="Cuisine équipée",
                     category="amenagement", purchase_date="2023-07-01", purchase_amount=6000,
                     useful_life_years=10, annual_amortization=600),
        Amortization(id="canape", user_id=USER_ID, property_id="studio-guillotiere", item_name="Canapé",
                     category="mobilier", purchase_date="2023-01-01", purchase_amount=900,
                     useful_life_years=5, annual_amortization=180),
    ]

    return Repositories.in_memory(
        revenues=revenues,
        expenses=expenses,
        amortizations=amortizations,
        properties=properties,
    )


def print_section(title: str) -> None:
    print()
    print("=" * 70)
    print(title)
    print("=" * 70)


def main() -> None:
    config = load_config()
    configure_logging(config.log_level, json_output=config.json_logs)

    repositories = create_sample_repositories()
    period = AccountingPeriod.calendar_year(2023)

    # Accounting statements
    report = generate_accounting_reports(USER_ID, period, repositories)

    print_section("COMPTE DE RÉSULTAT 2023")
    for line in report.income_statement.revenues:
        print(f"  + {line.label:<30} {format_amount_fr(line.amount):>14} €")
    for line in report.income_statement.expenses:
        print(f"  - {line.label:<30} {format_amount_fr(line.amount):>14} €")
    print(f"  = {'Résultat net':<30} {format_amount_fr(report.income_statement.net_result):>14} €")

    print_section("BILAN SIMPLIFIÉ AU 31/12/2023")
    for line in report.balance_sheet.assets:
        print(f"  Actif   {line.label:<30} {format_amount_fr(line.amount):>14} €")
    for line in report.balance_sheet.liabilities:
        print(f"  Passif  {line.label:<30} {format_amount_fr(line.amount):>14} €")

    print_section("CONTRÔLES")
    for check in report.checks:
        print(f"  [{check.status.value:>7}] {check.message}")

    # Declaration and liasse
    service = DeclarationService(repositories)
    declaration = service.create_declaration(USER_ID, 2023)
    snapshot = service.generate_liasse(USER_ID, declaration)

    print_section(declaration.details.description.upper())
    for mapping in snapshot.mappings:
        print(f"  {mapping.title}")
        for case in mapping.cases:
            marker = "*" if case.overridden else " "
            print(f"    {case.code:<7}{marker} {case.label:<32} {format_amount_fr(case.value):>14}")
    for issue in snapshot.issues:
        form = getattr(issue.form, "value", issue.form)
        print(f"  ! {form}/{issue.code} ({issue.severity.value}): {issue.message}")

    # Exports
    output_dir = Path("exports")
    output_dir.mkdir(exist_ok=True)
    for exported in (
        export_balance_sheet(report, config=config.export),
        export_income_statement(report, config=config.export),
        export_ledger(report, config=config.export),
        export_liasse(declaration.year, snapshot.mappings, ExportFormat.CSV, config.export),
    ):
        (output_dir / exported.filename).write_text(exported.content, encoding="utf-8")
        print(f"  Exported {exported.filename}")


if __name__ == "__main__":
    main()
