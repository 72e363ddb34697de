"""Ledger-like records consumed by the accounting core.

These models mirror the rows handed over by the storage layer: revenues,
expenses, depreciable assets, properties and yearly declarations. The core
only ever reads them; every derived value is a new object.

Amounts may arrive as wire strings, so numeric fields are normalized with
``to_number`` before validation. Dates that cannot be parsed are kept as
None rather than rejected: such a record simply never falls in a period.
"""

import datetime as dt
import re
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, computed_field, field_validator

from lmnp_core.numeric import to_number


def parse_date(value: Any) -> Optional[dt.date]:
    """Parse a date, datetime or ISO string; None when unparsable."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return dt.date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


class RevenueType(str, Enum):
    """Nature of a rental revenue."""

    RENT = "rent"
    DEPOSIT = "deposit"
    CHARGES = "charges"
    OTHER = "other"


class ExpenseCategory(str, Enum):
    """Categories of property expenses."""

    MAINTENANCE = "maintenance"
    INSURANCE = "insurance"
    TAXES = "taxes"
    MANAGEMENT = "management"
    OTHER = "other"


class AmortizationCategory(str, Enum):
    """Kinds of depreciable assets."""

    MOBILIER = "mobilier"
    ELECTROMENAGER = "electromenager"
    INFORMATIQUE = "informatique"
    TRAVAUX = "travaux"
    AMENAGEMENT = "amenagement"
    AUTRE = "autre"


class AmortizationStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    DISPOSED = "disposed"


class DeclarationStatus(str, Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SUBMITTED = "submitted"


class TaxRegime(str, Enum):
    MICRO = "micro"
    REAL = "real"


def _category_key(value: Union[Enum, str]) -> str:
    """Plain string key for an enum member or a raw category string."""
    return value.value if isinstance(value, Enum) else str(value)


class Revenue(BaseModel):
    """A revenue received for a property (rent, charges, deposit...)."""

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "rev-1",
                    "property_id": "property-1",
                    "amount": "1000.50",
                    "date": "2023-01-15",
                    "description": "Loyer janvier",
                    "type": "rent",
                }
            ]
        },
    }

    id: str
    user_id: Optional[str] = None
    property_id: Optional[str] = None
    amount: float = Field(default=0.0, description="Amount in euros, normalized")
    date: Optional[dt.date] = Field(default=None, description="Date the revenue was received")
    description: str = ""
    type: Union[RevenueType, str] = Field(default=RevenueType.RENT, union_mode="left_to_right")

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v):
        return to_number(v)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        return parse_date(v)

    @property
    def type_key(self) -> str:
        return _category_key(self.type)


class Expense(BaseModel):
    """An expense paid for a property.

    Only ``deductible`` expenses enter tax-relevant totals.
    """

    model_config = {"frozen": True}

    id: str
    user_id: Optional[str] = None
    property_id: Optional[str] = None
    amount: float = 0.0
    date: Optional[dt.date] = None
    description: str = ""
    category: Union[ExpenseCategory, str] = Field(
        default=ExpenseCategory.OTHER, union_mode="left_to_right"
    )
    deductible: bool = True
    receipt_url: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v):
        return to_number(v)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        return parse_date(v)

    @property
    def category_key(self) -> str:
        return _category_key(self.category)


class Amortization(BaseModel):
    """A depreciable asset attached to a property.

    ``annual_amortization`` is expected to equal
    ``purchase_amount / useful_life_years``; it is computed upstream and
    trusted as-is.
    """

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "amo-1",
                    "property_id": "property-1",
                    "item_name": "Canapé",
                    "category": "mobilier",
                    "purchase_date": "2023-01-01",
                    "purchase_amount": "1200",
                    "useful_life_years": 10,
                    "annual_amortization": "120",
                    "status": "active",
                }
            ]
        },
    }

    id: str
    user_id: Optional[str] = None
    property_id: Optional[str] = None
    item_name: str = ""
    category: Union[AmortizationCategory, str] = Field(
        default=AmortizationCategory.MOBILIER, union_mode="left_to_right"
    )
    purchase_date: Optional[dt.date] = None
    purchase_amount: float = 0.0
    useful_life_years: int = Field(default=10, ge=1)
    annual_amortization: float = 0.0
    accumulated_amortization: float = 0.0
    remaining_value: float = 0.0
    status: Union[AmortizationStatus, str] = Field(
        default=AmortizationStatus.ACTIVE, union_mode="left_to_right"
    )
    notes: Optional[str] = None

    @field_validator(
        "purchase_amount",
        "annual_amortization",
        "accumulated_amortization",
        "remaining_value",
        mode="before",
    )
    @classmethod
    def coerce_amounts(cls, v):
        return to_number(v)

    @field_validator("purchase_date", mode="before")
    @classmethod
    def coerce_purchase_date(cls, v):
        return parse_date(v)

    @property
    def is_active(self) -> bool:
        return self.status == AmortizationStatus.ACTIVE


class Property(BaseModel):
    """A rented property. Only ``id`` matters to the computations."""

    model_config = {"frozen": True}

    id: str
    user_id: Optional[str] = None
    address: str = ""
    description: Optional[str] = None
    monthly_rent: float = 0.0
    status: str = "active"

    @field_validator("monthly_rent", mode="before")
    @classmethod
    def coerce_rent(cls, v):
        return to_number(v)


_SIREN = re.compile(r"^\d{9}$")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE = re.compile(r"^[+\d][\d\s.-]{5,}$")
_DECLARANT_REQUIRED = (
    "company_name",
    "siren",
    "address_line1",
    "postal_code",
    "city",
    "country",
    "contact_email",
)


class Declarant(BaseModel):
    """Identity block printed on the liasse (company, SIREN, address)."""

    model_config = {"frozen": True}

    company_name: str = ""
    siren: str = ""
    vat_number: str = ""
    ape_code: str = ""
    address_line1: str = ""
    address_line2: str = ""
    postal_code: str = ""
    city: str = ""
    country: str = "France"
    contact_email: str = ""
    contact_phone: str = ""

    @computed_field
    @property
    def completeness(self) -> int:
        """Percentage (0-100) of required fields that are filled in."""
        filled = [name for name in _DECLARANT_REQUIRED if getattr(self, name).strip()]
        return round(len(filled) / len(_DECLARANT_REQUIRED) * 100)

    def validation_errors(self) -> dict[str, str]:
        """Field name -> user-facing message for every invalid field."""
        errors: dict[str, str] = {}
        if not self.company_name.strip():
            errors["company_name"] = "La raison sociale est requise."
        if not _SIREN.match(self.siren.strip()):
            errors["siren"] = "Le SIREN doit contenir 9 chiffres."
        if not self.address_line1.strip():
            errors["address_line1"] = "L'adresse est requise."
        if not self.postal_code.strip():
            errors["postal_code"] = "Le code postal est requis."
        if not self.city.strip():
            errors["city"] = "La ville est requise."
        if not _EMAIL.match(self.contact_email.strip()):
            errors["contact_email"] = "L'adresse e-mail est invalide."
        if self.contact_phone.strip() and not _PHONE.match(self.contact_phone.strip()):
            errors["contact_phone"] = "Le numéro de téléphone est invalide."
        return errors


class DeclarationDetails(BaseModel):
    """Free-form part of a declaration edited by the user."""

    model_config = {"frozen": True}

    created_automatically: bool = False
    description: str = ""
    regime: TaxRegime = TaxRegime.REAL
    first_declaration: bool = False
    notes: str = ""
    declarant: Optional[Declarant] = None


class Declaration(BaseModel):
    """Yearly LMNP declaration with a denormalized snapshot of its totals."""

    model_config = {"frozen": True}

    id: str
    user_id: Optional[str] = None
    year: int = Field(ge=1900, le=2100)
    status: DeclarationStatus = DeclarationStatus.DRAFT
    total_revenue: float = 0.0
    total_expenses: float = 0.0
    net_result: float = 0.0
    properties: list[str] = Field(default_factory=list)
    documents: list[str] = Field(default_factory=list)
    details: DeclarationDetails = Field(default_factory=DeclarationDetails)
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    @field_validator("total_revenue", "total_expenses", "net_result", mode="before")
    @classmethod
    def coerce_totals(cls, v):
        return to_number(v)


__all__ = [
    "parse_date",
    "RevenueType",
    "ExpenseCategory",
    "AmortizationCategory",
    "AmortizationStatus",
    "DeclarationStatus",
    "TaxRegime",
    "Revenue",
    "Expense",
    "Amortization",
    "Property",
    "Declarant",
    "DeclarationDetails",
    "Declaration",
]
