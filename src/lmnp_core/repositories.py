"""Data-access contracts consumed by the accounting core.

The core only ever needs user-scoped collections, so each repository exposes
a single ``get_by_user_id``. Any class with matching methods satisfies a
protocol; no inheritance is required.

The in-memory implementations back the tests and the demonstration script.
``InMemoryDeclarationRepository`` enforces one declaration per (user, year).

Example:
    ```python
    repositories = Repositories.in_memory(
        revenues=[Revenue(id="rev-1", user_id="u1", amount=1000, date="2023-03-01")],
    )
    report = generate_accounting_reports("u1", period, repositories)
    ```
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Generic, Optional, Protocol, TypeVar, runtime_checkable

from lmnp_core.exceptions import DeclarationConflictError, DeclarationNotFoundError
from lmnp_core.models import Amortization, Declaration, Expense, Property, Revenue


# =============================================================================
# PROTOCOLS
# =============================================================================


@runtime_checkable
class RevenueRepository(Protocol):
    """All revenues of a user, unfiltered by property or date."""

    def get_by_user_id(self, user_id: str) -> list[Revenue]: ...


@runtime_checkable
class ExpenseRepository(Protocol):
    """All expenses of a user, deductible or not."""

    def get_by_user_id(self, user_id: str) -> list[Expense]: ...


@runtime_checkable
class AmortizationRepository(Protocol):
    """All depreciable assets of a user, whatever their status."""

    def get_by_user_id(self, user_id: str) -> list[Amortization]: ...


@runtime_checkable
class PropertyRepository(Protocol):
    def get_by_user_id(self, user_id: str) -> list[Property]: ...


@runtime_checkable
class DeclarationRepository(Protocol):
    """CRUD over declarations.

    ``create`` raises DeclarationConflictError when the user already has a
    declaration for that year; ``update`` raises DeclarationNotFoundError
    for an unknown id.
    """

    def get_by_user_id(self, user_id: str) -> list[Declaration]: ...

    def get_by_id(self, declaration_id: str) -> Optional[Declaration]: ...

    def create(self, declaration: Declaration) -> Declaration: ...

    def update(self, declaration_id: str, **changes: Any) -> Declaration: ...

    def delete(self, declaration_id: str) -> bool: ...


# =============================================================================
# IN-MEMORY IMPLEMENTATIONS
# =============================================================================

RecordT = TypeVar("RecordT", Revenue, Expense, Amortization, Property)


class InMemoryRecordRepository(Generic[RecordT]):
    """List-backed repository filtering records on ``user_id``."""

    def __init__(self, records: Optional[Iterable[RecordT]] = None) -> None:
        self._records: list[RecordT] = list(records or [])

    def add(self, record: RecordT) -> RecordT:
        self._records.append(record)
        return record

    def get_by_user_id(self, user_id: str) -> list[RecordT]:
        return [record for record in self._records if record.user_id == user_id]


class InMemoryDeclarationRepository:
    """Dict-backed declaration store keyed by declaration id."""

    def __init__(self, declarations: Optional[Iterable[Declaration]] = None) -> None:
        self._declarations: dict[str, Declaration] = {}
        for declaration in declarations or []:
            self.create(declaration)

    def get_by_user_id(self, user_id: str) -> list[Declaration]:
        return sorted(
            (d for d in self._declarations.values() if d.user_id == user_id),
            key=lambda d: d.year,
            reverse=True,
        )

    def get_by_id(self, declaration_id: str) -> Optional[Declaration]:
        return self._declarations.get(declaration_id)

    def create(self, declaration: Declaration) -> Declaration:
        if any(
            d.user_id == declaration.user_id and d.year == declaration.year
            for d in self._declarations.values()
        ):
            raise DeclarationConflictError(
                user_id=declaration.user_id or "", year=declaration.year
            )
        self._declarations[declaration.id] = declaration
        return declaration

    def update(self, declaration_id: str, **changes: Any) -> Declaration:
        existing = self._declarations.get(declaration_id)
        if existing is None:
            raise DeclarationNotFoundError(declaration_id=declaration_id)
        # Round-trip through validation so coercions apply to the new values.
        updated = Declaration.model_validate({**existing.model_dump(), **changes})
        self._declarations[declaration_id] = updated
        return updated

    def delete(self, declaration_id: str) -> bool:
        return self._declarations.pop(declaration_id, None) is not None


@dataclass
class Repositories:
    """The five collaborators the orchestration helpers fetch from."""

    revenues: RevenueRepository
    expenses: ExpenseRepository
    amortizations: AmortizationRepository
    properties: PropertyRepository
    declarations: DeclarationRepository

    @classmethod
    def in_memory(
        cls,
        *,
        revenues: Iterable[Revenue] = (),
        expenses: Iterable[Expense] = (),
        amortizations: Iterable[Amortization] = (),
        properties: Iterable[Property] = (),
        declarations: Iterable[Declaration] = (),
    ) -> Repositories:
        return cls(
            revenues=InMemoryRecordRepository(revenues),
            expenses=InMemoryRecordRepository(expenses),
            amortizations=InMemoryRecordRepository(amortizations),
            properties=InMemoryRecordRepository(properties),
            declarations=InMemoryDeclarationRepository(declarations),
        )


__all__ = [
    "RevenueRepository",
    "ExpenseRepository",
    "AmortizationRepository",
    "PropertyRepository",
    "DeclarationRepository",
    "InMemoryRecordRepository",
    "InMemoryDeclarationRepository",
    "Repositories",
]
