"""Tests for the liasse fiscale mapping engine."""

import datetime as dt
import math

import pytest

from lmnp_core.form_mapping import (
    CASE_DEFINITIONS,
    apply_override,
    build_form_mappings,
    build_generation_snapshot,
    compute_amortization_cap,
    get_override,
    validate_form_mappings,
)
from lmnp_core.models import (
    GLOBAL_FORM,
    Declaration,
    DeclarationContext,
    DeclarationTotals,
    IssueSeverity,
    LiasseFormType,
    Property,
)


def make_context(revenue, expenses, amortizations, net_result=None, property_count=1):
    if net_result is None:
        net_result = round(revenue - expenses - amortizations, 2)
    return DeclarationContext(
        declaration=Declaration(id="decl-2023", year=2023),
        totals=DeclarationTotals(
            total_revenue=revenue,
            total_expenses=expenses,
            total_amortizations=amortizations,
            net_result=net_result,
        ),
        properties=[Property(id=f"p{i}") for i in range(property_count)],
    )


def case(mappings, form, code):
    mapping = next(m for m in mappings if m.form == form)
    return mapping.get_case(code)


@pytest.fixture
def profitable_context() -> DeclarationContext:
    return make_context(1000, 200, 120)


class TestCatalog:
    def test_forms_and_codes(self, profitable_context):
        mappings = build_form_mappings(profitable_context)

        assert [(m.form, m.title) for m in mappings] == [
            (LiasseFormType.FORM_2031, "Formulaire 2031"),
            (LiasseFormType.FORM_2031_BIS, "2031 Bis"),
            (LiasseFormType.FORM_2033, "Liasse simplifiée 2033"),
        ]
        assert [c.code for c in mappings[0].cases] == ["5XC", "5XD", "5XE", "5XF"]
        assert [c.code for c in mappings[1].cases] == ["5ZG", "5ZH", "5ZK"]
        assert [c.code for c in mappings[2].cases] == ["2058A1", "2058A2", "2058A3", "2058A4"]
        assert len(CASE_DEFINITIONS) == 11

    def test_auto_values(self):
        context = make_context(1000, 200, 120, property_count=3)

        mappings = build_form_mappings(context)

        assert case(mappings, LiasseFormType.FORM_2031, "5XC").value == 1000
        assert case(mappings, LiasseFormType.FORM_2031, "5XD").value == 200
        assert case(mappings, LiasseFormType.FORM_2031, "5XE").value == 120
        assert case(mappings, LiasseFormType.FORM_2031, "5XF").value == 680
        assert case(mappings, LiasseFormType.FORM_2031_BIS, "5ZG").value == 3
        assert case(mappings, LiasseFormType.FORM_2033, "2058A3").value == 120
        assert not any(c.overridden for m in mappings for c in m.cases)


class TestAmortizationCap:
    """Test suite for the LMNP non-deficit depreciation cap."""

    @pytest.mark.parametrize(
        "revenue, expenses, amortizations, expected",
        [
            (1000, 200, 120, 120),
            (1000, 900, 300, 100),
            (500, 800, 100, 0),
            (1000, 1000, 50, 0),
        ],
    )
    def test_cap(self, revenue, expenses, amortizations, expected):
        assert compute_amortization_cap(make_context(revenue, expenses, amortizations)) == expected

    def test_capped_cases_and_warning(self):
        context = make_context(1000, 900, 300)

        mappings = build_form_mappings(context)
        issues = validate_form_mappings(mappings, context)

        assert case(mappings, LiasseFormType.FORM_2031, "5XE").value == 100
        assert case(mappings, LiasseFormType.FORM_2033, "2058A3").value == 100
        cap_issues = [i for i in issues if i.code == "CAP"]
        assert len(cap_issues) == 1
        assert cap_issues[0].form == GLOBAL_FORM
        assert cap_issues[0].severity == IssueSeverity.WARNING


class TestOverrides:
    """Test suite for override precedence."""

    def test_override_wins(self, profitable_context):
        overrides = {"2031": {"5XC": 1500.0}}

        mappings = build_form_mappings(profitable_context, overrides)
        value = case(mappings, LiasseFormType.FORM_2031, "5XC")

        assert value.value == 1500
        assert value.auto_value == 1000
        assert value.overridden

    def test_zero_is_a_real_override(self, profitable_context):
        mappings = build_form_mappings(profitable_context, {"2033": {"2058A2": 0}})

        value = case(mappings, LiasseFormType.FORM_2033, "2058A2")
        assert value.value == 0
        assert value.overridden

    @pytest.mark.parametrize("override", [None, math.nan, math.inf, True, "1500"])
    def test_non_finite_or_non_numeric_ignored(self, profitable_context, override):
        mappings = build_form_mappings(profitable_context, {"2031": {"5XC": override}})

        value = case(mappings, LiasseFormType.FORM_2031, "5XC")
        assert value.value == 1000
        assert not value.overridden

    def test_override_only_targets_its_form(self, profitable_context):
        mappings = build_form_mappings(profitable_context, {"2031": {"5XC": 1.0}})

        assert not case(mappings, LiasseFormType.FORM_2033, "2058A1").overridden

    def test_apply_and_reset(self, profitable_context):
        """Setting then clearing an override restores the automatic value."""
        original = {"2033": {"2058A1": 10.0}}

        overrides = apply_override(original, LiasseFormType.FORM_2031, "5XC", 1500.0)
        assert overrides == {"2033": {"2058A1": 10.0}, "2031": {"5XC": 1500.0}}
        assert original == {"2033": {"2058A1": 10.0}}

        overrides = apply_override(overrides, "2031", "5XC", None)
        assert overrides == {"2033": {"2058A1": 10.0}}
        value = case(build_form_mappings(profitable_context, overrides), LiasseFormType.FORM_2031, "5XC")
        assert value.value == value.auto_value == 1000

    def test_apply_non_finite_removes(self):
        overrides = apply_override({"2031": {"5XC": 5.0}}, "2031", "5XC", math.nan)

        assert overrides == {}

    def test_get_override_with_enum_key(self):
        overrides = {"2031bis": {"5ZG": 2}}

        assert get_override(overrides, LiasseFormType.FORM_2031_BIS, "5ZG") == 2.0
        assert get_override(overrides, LiasseFormType.FORM_2031, "5ZG") is None


class TestValidateFormMappings:
    """Test suite for validate_form_mappings."""

    def test_consistent_declaration_has_no_issue(self, profitable_context):
        mappings = build_form_mappings(profitable_context)

        assert validate_form_mappings(mappings, profitable_context) == []

    def test_result_override_breaks_2031_identity(self, profitable_context):
        mappings = build_form_mappings(profitable_context, {"2031": {"5XF": 900.0}})

        issues = validate_form_mappings(mappings, profitable_context)

        assert len(issues) == 1
        issue = issues[0]
        assert issue.form == LiasseFormType.FORM_2031
        assert issue.code == "5XF"
        assert issue.severity == IssueSeverity.ERROR
        assert issue.message == (
            "Le résultat (5XF) devrait être proche de 680,00 compte tenu des montants saisis"
        )

    def test_one_unit_tolerance(self, profitable_context):
        mappings = build_form_mappings(profitable_context, {"2031": {"5XF": 681.0}})

        assert validate_form_mappings(mappings, profitable_context) == []

    def test_2033_mismatch_is_warning(self, profitable_context):
        mappings = build_form_mappings(profitable_context, {"2033": {"2058A1": 1100.0}})

        issues = validate_form_mappings(mappings, profitable_context)

        assert [(i.form, i.code, i.severity) for i in issues] == [
            (LiasseFormType.FORM_2033, "2058A4", IssueSeverity.WARNING)
        ]

    def test_implausible_charges(self):
        context = make_context(100, 300, 0)

        issues = validate_form_mappings(build_form_mappings(context), context)

        assert [(i.form, i.code) for i in issues] == [
            (LiasseFormType.FORM_2031, "5XD"),
            (LiasseFormType.FORM_2033, "2058A2"),
        ]
        assert all(i.severity == IssueSeverity.WARNING for i in issues)
        assert issues[0].message == (
            "Le montant de Charges déductibles paraît élevé par rapport au chiffre d'affaires déclaré"
        )

    def test_capped_result_cases(self):
        """The forms carry the capped result; the stored total keeps the full depreciation."""
        context = make_context(1000, 900, 300)

        mappings = build_form_mappings(context)
        issues = validate_form_mappings(mappings, context)

        assert case(mappings, LiasseFormType.FORM_2031, "5XF").value == 0
        assert case(mappings, LiasseFormType.FORM_2031_BIS, "5ZK").value == 0
        assert case(mappings, LiasseFormType.FORM_2033, "2058A4").value == 0
        assert [(i.form, i.code, i.severity) for i in issues] == [
            (GLOBAL_FORM, "RESULT", IssueSeverity.WARNING),
            (GLOBAL_FORM, "CAP", IssueSeverity.WARNING),
        ]

    def test_validation_uses_overridden_values(self):
        """Overriding the result with the uncapped figure breaks both form identities."""
        context = make_context(1000, 900, 300)
        overrides = {"2031": {"5XF": -200.0}, "2033": {"2058A4": -200.0}}

        issues = validate_form_mappings(build_form_mappings(context, overrides), context)

        assert [(i.form, i.code, i.severity) for i in issues] == [
            (LiasseFormType.FORM_2031, "5XF", IssueSeverity.ERROR),
            (LiasseFormType.FORM_2033, "2058A4", IssueSeverity.WARNING),
            (GLOBAL_FORM, "RESULT", IssueSeverity.WARNING),
            (GLOBAL_FORM, "CAP", IssueSeverity.WARNING),
        ]


class TestGenerationSnapshot:
    def test_snapshot(self, profitable_context):
        generated_at = dt.datetime(2024, 4, 1, 9, 30, tzinfo=dt.timezone.utc)

        snapshot = build_generation_snapshot(
            profitable_context, {"2031": {"5XF": 0.0}}, generated_at=generated_at
        )

        assert snapshot.generated_at == generated_at
        assert len(snapshot.mappings) == 3
        assert snapshot.has_errors
        dumped = snapshot.model_dump(mode="json", by_alias=True)
        assert dumped["generatedAt"].startswith("2024-04-01T09:30:00")
        assert dumped["mappings"][0]["cases"][3]["autoValue"] == 680

    def test_default_timestamp_is_utc(self, profitable_context):
        snapshot = build_generation_snapshot(profitable_context)

        assert snapshot.generated_at.tzinfo is not None
        assert not snapshot.has_errors

    def test_deterministic(self, profitable_context):
        first = build_form_mappings(profitable_context, {"2031": {"5XC": 1.0}})
        second = build_form_mappings(profitable_context, {"2031": {"5XC": 1.0}})

        assert first == second
