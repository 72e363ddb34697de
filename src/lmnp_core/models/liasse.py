"""Tax-form (liasse fiscale) models: mapped cases, issues and snapshots."""

import datetime as dt
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import Field

from lmnp_core.models.reports import ReportModel


class LiasseFormType(str, Enum):
    """Forms of the LMNP liasse handled by the mapping engine."""

    FORM_2031 = "2031"
    FORM_2031_BIS = "2031bis"
    FORM_2033 = "2033"

    @property
    def form_title(self) -> str:
        return _FORM_TITLES[self]


_FORM_TITLES = {
    LiasseFormType.FORM_2031: "Formulaire 2031",
    LiasseFormType.FORM_2031_BIS: "2031 Bis",
    LiasseFormType.FORM_2033: "Liasse simplifiée 2033",
}


class CaseCategory(str, Enum):
    RECETTES = "recettes"
    CHARGES = "charges"
    AMORTISSEMENTS = "amortissements"
    RESULTAT = "resultat"
    DIVERS = "divers"


class IssueSeverity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


GLOBAL_FORM = "global"

FormOverrides = dict[str, dict[str, Optional[float]]]
"""Sparse overrides: form value -> case code -> amount. A missing key or a
None value both mean "use the automatic value"; 0.0 is a real override."""


class FormCaseValue(ReportModel):
    """One evaluated case of a form."""

    form: LiasseFormType
    code: str
    label: str
    description: str = ""
    category: CaseCategory
    auto_value: float = Field(description="Value computed from the declaration context")
    value: float = Field(description="Value retained: the override when set, else auto_value")
    overridden: bool = False


class LiasseFormMapping(ReportModel):
    form: LiasseFormType
    title: str
    cases: list[FormCaseValue] = Field(default_factory=list)

    def get_case(self, code: str) -> Optional[FormCaseValue]:
        return next((case for case in self.cases if case.code == code), None)

    def value_of(self, code: str) -> float:
        """Retained value of a case, 0.0 when the form has no such case."""
        case = self.get_case(code)
        return case.value if case is not None else 0.0


class FormValidationIssue(ReportModel):
    """Advisory finding on the mapped forms.

    ``form`` is ``"global"`` for checks that span the whole declaration.
    Both severities are informational; callers may block on ``error``.
    """

    form: Union[LiasseFormType, Literal["global"]]
    code: str
    message: str
    severity: IssueSeverity


class LiasseGenerationSnapshot(ReportModel):
    """Mappings and issues frozen at generation time, for export and audit."""

    mappings: list[LiasseFormMapping] = Field(default_factory=list)
    issues: list[FormValidationIssue] = Field(default_factory=list)
    generated_at: dt.datetime

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == IssueSeverity.ERROR for issue in self.issues)


__all__ = [
    "LiasseFormType",
    "CaseCategory",
    "IssueSeverity",
    "GLOBAL_FORM",
    "FormOverrides",
    "FormCaseValue",
    "LiasseFormMapping",
    "FormValidationIssue",
    "LiasseGenerationSnapshot",
]
