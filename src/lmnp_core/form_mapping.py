"""Mapping of a declaration onto the cases of the LMNP liasse fiscale.

Each case of forms 2031, 2031 bis and 2033 is defined by a pure function of
the DeclarationContext. Evaluating the catalog yields an automatic value per
case; a finite user override takes precedence. Validation then re-derives
each form's arithmetic from the retained values, so overrides are checked
too.

Depreciation cases (5XE, 2058A3) are capped: under the LMNP regime,
depreciation may not create or enlarge a deficit, so the deductible amount
is ``clamp(revenue - expenses, 0, total_amortizations)``. The result cases
(5XF, 5ZK, 2058A4) carry the result after that capped depreciation.
"""

import datetime as dt
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Optional, Union

import structlog

from lmnp_core.models import (
    GLOBAL_FORM,
    CaseCategory,
    DeclarationContext,
    FormCaseValue,
    FormOverrides,
    FormValidationIssue,
    IssueSeverity,
    LiasseFormMapping,
    LiasseFormType,
    LiasseGenerationSnapshot,
)
from lmnp_core.numeric import format_amount_fr, round_two

logger = structlog.get_logger()

# Gap (in euros) tolerated between a stated result and its recomputation.
RESULT_TOLERANCE = 1.0
# Charges or depreciation above this multiple of revenue look implausible.
PLAUSIBILITY_RATIO = 2.0


@dataclass(frozen=True)
class FormCaseDefinition:
    """A case of the catalog and the function computing its value."""

    form: LiasseFormType
    code: str
    label: str
    description: str
    category: CaseCategory
    compute: Callable[[DeclarationContext], float]


def compute_amortization_cap(context: DeclarationContext) -> float:
    """Deductible depreciation: pre-depreciation profit, floored at 0, capped by the allowance."""
    totals = context.totals
    pre_amortization_result = totals.total_revenue - totals.total_expenses
    return min(max(pre_amortization_result, 0.0), totals.total_amortizations)


def _total_revenue(context: DeclarationContext) -> float:
    return context.totals.total_revenue


def _total_expenses(context: DeclarationContext) -> float:
    return context.totals.total_expenses


def _capped_result(context: DeclarationContext) -> float:
    totals = context.totals
    return round_two(
        totals.total_revenue - totals.total_expenses - compute_amortization_cap(context)
    )


def _property_count(context: DeclarationContext) -> float:
    return float(len(context.properties))


CASE_DEFINITIONS: tuple[FormCaseDefinition, ...] = (
    FormCaseDefinition(
        form=LiasseFormType.FORM_2031,
        code="5XC",
        label="Chiffre d'affaires (HT)",
        description="Total des loyers et recettes LMNP déclarés",
        category=CaseCategory.RECETTES,
        compute=_total_revenue,
    ),
    FormCaseDefinition(
        form=LiasseFormType.FORM_2031,
        code="5XD",
        label="Charges déductibles",
        description="Total des charges et dépenses déductibles",
        category=CaseCategory.CHARGES,
        compute=_total_expenses,
    ),
    FormCaseDefinition(
        form=LiasseFormType.FORM_2031,
        code="5XE",
        label="Amortissements déductibles",
        description="Plafonnés pour ne pas créer ou majorer un déficit (LMNP)",
        category=CaseCategory.AMORTISSEMENTS,
        compute=compute_amortization_cap,
    ),
    FormCaseDefinition(
        form=LiasseFormType.FORM_2031,
        code="5XF",
        label="Résultat fiscal LMNP",
        description="Résultat après charges et amortissements imputables",
        category=CaseCategory.RESULTAT,
        compute=_capped_result,
    ),
    FormCaseDefinition(
        form=LiasseFormType.FORM_2031_BIS,
        code="5ZG",
        label="Biens concernés",
        description="Nombre de biens LMNP dans le périmètre de la déclaration",
        category=CaseCategory.DIVERS,
        compute=_property_count,
    ),
    FormCaseDefinition(
        form=LiasseFormType.FORM_2031_BIS,
        code="5ZH",
        label="Total des recettes",
        description="Report du chiffre d'affaires (2031 - 5XC)",
        category=CaseCategory.RECETTES,
        compute=_total_revenue,
    ),
    FormCaseDefinition(
        form=LiasseFormType.FORM_2031_BIS,
        code="5ZK",
        label="Résultat imposable",
        description="Aligné sur le résultat fiscal de la 2031",
        category=CaseCategory.RESULTAT,
        compute=_capped_result,
    ),
    FormCaseDefinition(
        form=LiasseFormType.FORM_2033,
        code="2058A1",
        label="Produits d'exploitation",
        description="Recettes locatives et produits divers",
        category=CaseCategory.RECETTES,
        compute=_total_revenue,
    ),
    FormCaseDefinition(
        form=LiasseFormType.FORM_2033,
        code="2058A2",
        label="Charges d'exploitation",
        description="Dépenses déductibles (entretien, assurances, taxes...)",
        category=CaseCategory.CHARGES,
        compute=_total_expenses,
    ),
    FormCaseDefinition(
        form=LiasseFormType.FORM_2033,
        code="2058A3",
        label="Dotations aux amortissements",
        description="Amortissements LMNP imputés sur le résultat",
        category=CaseCategory.AMORTISSEMENTS,
        compute=compute_amortization_cap,
    ),
    FormCaseDefinition(
        form=LiasseFormType.FORM_2033,
        code="2058A4",
        label="Résultat fiscal simplifié",
        description="Résultat après charges et amortissements (2033-A)",
        category=CaseCategory.RESULTAT,
        compute=_capped_result,
    ),
)


def _form_key(form: Union[LiasseFormType, str]) -> str:
    return form.value if isinstance(form, LiasseFormType) else str(form)


def _finite_number(value: object) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if math.isfinite(value) else None


def get_override(
    overrides: Mapping[str, Mapping[str, Optional[float]]],
    form: Union[LiasseFormType, str],
    code: str,
) -> Optional[float]:
    """The finite override for ``(form, code)``, or None when none is set."""
    form_overrides = overrides.get(_form_key(form)) or {}
    return _finite_number(form_overrides.get(code))


def apply_override(
    overrides: Mapping[str, Mapping[str, Optional[float]]],
    form: Union[LiasseFormType, str],
    code: str,
    value: Optional[float],
) -> FormOverrides:
    """Return a copy of ``overrides`` with ``(form, code)`` set, or cleared when ``value`` is None.

    Non-finite values clear the entry as well. The input is left untouched.
    """
    updated: FormOverrides = {key: dict(codes) for key, codes in overrides.items()}
    form_overrides = updated.setdefault(_form_key(form), {})
    number = _finite_number(value)
    if number is None:
        form_overrides.pop(code, None)
    else:
        form_overrides[code] = number
    if not form_overrides:
        del updated[_form_key(form)]
    return updated


def build_form_mappings(
    context: DeclarationContext,
    overrides: Optional[Mapping[str, Mapping[str, Optional[float]]]] = None,
) -> list[LiasseFormMapping]:
    """Evaluate every case of the catalog, grouped by form in catalog order."""
    overrides = overrides or {}
    grouped: dict[LiasseFormType, list[FormCaseValue]] = {}

    for definition in CASE_DEFINITIONS:
        auto_value = round_two(definition.compute(context))
        override = get_override(overrides, definition.form, definition.code)
        grouped.setdefault(definition.form, []).append(
            FormCaseValue(
                form=definition.form,
                code=definition.code,
                label=definition.label,
                description=definition.description,
                category=definition.category,
                auto_value=auto_value,
                value=override if override is not None else auto_value,
                overridden=override is not None,
            )
        )

    return [
        LiasseFormMapping(form=form, title=form.form_title, cases=cases)
        for form, cases in grouped.items()
    ]


def _check_2031(mapping: LiasseFormMapping) -> Optional[FormValidationIssue]:
    recomputed = round_two(
        mapping.value_of("5XC") - mapping.value_of("5XD") - mapping.value_of("5XE")
    )
    if abs(mapping.value_of("5XF") - recomputed) <= RESULT_TOLERANCE:
        return None
    return FormValidationIssue(
        form=mapping.form,
        code="5XF",
        message=(
            f"Le résultat (5XF) devrait être proche de {format_amount_fr(recomputed)} "
            "compte tenu des montants saisis"
        ),
        severity=IssueSeverity.ERROR,
    )


def _check_2033(mapping: LiasseFormMapping) -> Optional[FormValidationIssue]:
    recomputed = round_two(
        mapping.value_of("2058A1") - mapping.value_of("2058A2") - mapping.value_of("2058A3")
    )
    if abs(mapping.value_of("2058A4") - recomputed) <= RESULT_TOLERANCE:
        return None
    return FormValidationIssue(
        form=mapping.form,
        code="2058A4",
        message="Le résultat 2033-A devrait correspondre aux produits moins charges et amortissements.",
        severity=IssueSeverity.WARNING,
    )


_FORM_CHECKS = {
    LiasseFormType.FORM_2031: _check_2031,
    LiasseFormType.FORM_2033: _check_2033,
}


def validate_form_mappings(
    mappings: list[LiasseFormMapping],
    context: DeclarationContext,
) -> list[FormValidationIssue]:
    """Check each form's arithmetic, plausibility, and the global result and cap.

    Per form: 5XF = 5XC - 5XD - 5XE (error) and 2058A4 = 2058A1 - 2058A2 -
    2058A3 (warning), both within one euro; charges or depreciation above
    twice the revenue (warning). Globally: the declared net result against
    revenue - expenses - cap (RESULT), and whether capping occurred (CAP).
    """
    issues: list[FormValidationIssue] = []
    totals = context.totals
    amortization_cap = compute_amortization_cap(context)
    revenue = totals.total_revenue
    expected_result = round_two(revenue - totals.total_expenses - amortization_cap)

    for mapping in mappings:
        form_check = _FORM_CHECKS.get(mapping.form)
        if form_check is not None:
            issue = form_check(mapping)
            if issue is not None:
                issues.append(issue)

        for case in mapping.cases:
            if (
                case.category in (CaseCategory.CHARGES, CaseCategory.AMORTISSEMENTS)
                and case.value > revenue * PLAUSIBILITY_RATIO
            ):
                issues.append(
                    FormValidationIssue(
                        form=mapping.form,
                        code=case.code,
                        message=(
                            f"Le montant de {case.label} paraît élevé par rapport "
                            "au chiffre d'affaires déclaré"
                        ),
                        severity=IssueSeverity.WARNING,
                    )
                )

    if abs(totals.net_result - expected_result) > RESULT_TOLERANCE:
        issues.append(
            FormValidationIssue(
                form=GLOBAL_FORM,
                code="RESULT",
                message=(
                    "Le résultat fiscal théorique (recettes - charges - amortissements "
                    "imputables) ne correspond pas au total déclaré"
                ),
                severity=IssueSeverity.WARNING,
            )
        )

    if amortization_cap < totals.total_amortizations:
        issues.append(
            FormValidationIssue(
                form=GLOBAL_FORM,
                code="CAP",
                message=(
                    "Les amortissements ont été plafonnés pour respecter les règles LMNP "
                    "(pas de déficit supplémentaire)"
                ),
                severity=IssueSeverity.WARNING,
            )
        )

    return issues


def build_generation_snapshot(
    context: DeclarationContext,
    overrides: Optional[Mapping[str, Mapping[str, Optional[float]]]] = None,
    *,
    generated_at: Optional[dt.datetime] = None,
) -> LiasseGenerationSnapshot:
    """Map, validate and timestamp a declaration for export or audit."""
    mappings = build_form_mappings(context, overrides)
    issues = validate_form_mappings(mappings, context)
    snapshot = LiasseGenerationSnapshot(
        mappings=mappings,
        issues=issues,
        generated_at=generated_at or dt.datetime.now(dt.timezone.utc),
    )
    logger.info(
        "liasse_snapshot_generated",
        declaration_id=context.declaration.id,
        year=context.declaration.year,
        overrides=sum(len(codes) for codes in (overrides or {}).values()),
        issues=len(issues),
    )
    return snapshot


__all__ = [
    "FormCaseDefinition",
    "CASE_DEFINITIONS",
    "compute_amortization_cap",
    "get_override",
    "apply_override",
    "build_form_mappings",
    "validate_form_mappings",
    "build_generation_snapshot",
]
