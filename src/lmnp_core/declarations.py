"""Declaration lifecycle: creation, status and detail updates, liasse generation.

DeclarationService ties the repositories to the pure calculators. Totals are
recomputed from the raw collections on every write, so the denormalized
snapshot stored on a declaration always reflects the current records.

Conflicts (second declaration for a year, unknown id) are not raised to the
caller: the service logs them and returns None.
"""

import datetime as dt
import uuid
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

import structlog

from lmnp_core.calculations import build_declaration_context, calculate_declaration_totals
from lmnp_core.exceptions import DeclarationConflictError, DeclarationNotFoundError
from lmnp_core.form_mapping import build_generation_snapshot
from lmnp_core.models import (
    Declaration,
    DeclarationContext,
    DeclarationDetails,
    DeclarationStatus,
    DeclarationTotals,
    LiasseGenerationSnapshot,
    TaxRegime,
)
from lmnp_core.repositories import Repositories

logger = structlog.get_logger()

_OPEN_STATUSES = (DeclarationStatus.IN_PROGRESS, DeclarationStatus.DRAFT)


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class DeclarationService:
    """Yearly declaration workflow for one storage backend.

    Example:
        ```python
        service = DeclarationService(Repositories.in_memory(...))
        declaration = service.create_declaration("user-1", 2023)
        snapshot = service.generate_liasse("user-1", declaration)
        ```
    """

    def __init__(self, repositories: Repositories) -> None:
        self.repositories = repositories

    def _totals(self, user_id: str, year: int, property_ids: Optional[Sequence[str]]) -> DeclarationTotals:
        return calculate_declaration_totals(
            year,
            self.repositories.revenues.get_by_user_id(user_id),
            self.repositories.expenses.get_by_user_id(user_id),
            self.repositories.amortizations.get_by_user_id(user_id),
            property_ids,
        )

    def _totals_fields(self, totals: DeclarationTotals) -> dict[str, float]:
        return {
            "total_revenue": totals.total_revenue,
            "total_expenses": totals.total_expenses,
            "net_result": totals.net_result,
        }

    def _owned(self, user_id: str, declaration_id: str) -> Optional[Declaration]:
        declaration = self.repositories.declarations.get_by_id(declaration_id)
        if declaration is None or declaration.user_id != user_id:
            logger.warning(
                "declaration_not_found", user_id=user_id, declaration_id=declaration_id
            )
            return None
        return declaration

    def _persist(self, declaration_id: str, **changes: Any) -> Optional[Declaration]:
        try:
            return self.repositories.declarations.update(
                declaration_id, updated_at=_utc_now(), **changes
            )
        except DeclarationNotFoundError as e:
            logger.warning("declaration_update_failed", declaration_id=declaration_id, error=str(e))
            return None

    def list_declarations(self, user_id: str) -> list[Declaration]:
        return self.repositories.declarations.get_by_user_id(user_id)

    def current_declaration(self, user_id: str) -> Optional[Declaration]:
        """First open (in progress or draft) declaration, else the first listed one."""
        declarations = self.list_declarations(user_id)
        for declaration in declarations:
            if declaration.status in _OPEN_STATUSES:
                return declaration
        return declarations[0] if declarations else None

    def preview_totals(self, user_id: str, year: int) -> DeclarationTotals:
        """Totals for a year over all of the user's properties, before any declaration exists."""
        return self._totals(user_id, year, None)

    def create_declaration(self, user_id: str, year: int) -> Optional[Declaration]:
        """Create the draft declaration for ``year``.

        Returns:
            The new declaration, or None when one already exists for that year.
        """
        existing = self.list_declarations(user_id)
        if any(declaration.year == year for declaration in existing):
            logger.warning("declaration_already_exists", user_id=user_id, year=year)
            return None

        property_ids = [prop.id for prop in self.repositories.properties.get_by_user_id(user_id)]
        totals = self._totals(user_id, year, property_ids)
        now = _utc_now()
        draft = Declaration(
            id=str(uuid.uuid4()),
            user_id=user_id,
            year=year,
            status=DeclarationStatus.DRAFT,
            properties=property_ids,
            documents=[],
            details=DeclarationDetails(
                created_automatically=True,
                description=f"Déclaration {year + 1} des revenus {year}",
                regime=TaxRegime.REAL,
                first_declaration=not existing,
            ),
            created_at=now,
            updated_at=now,
            **self._totals_fields(totals),
        )

        try:
            declaration = self.repositories.declarations.create(draft)
        except DeclarationConflictError as e:
            logger.warning("declaration_already_exists", user_id=user_id, year=year, error=str(e))
            return None

        logger.info("declaration_created", declaration_id=declaration.id, year=year)
        return declaration

    def update_declaration_status(
        self,
        user_id: str,
        declaration_id: str,
        status: Union[DeclarationStatus, str],
    ) -> Optional[Declaration]:
        """Set the status and refresh the stored totals. Any transition is accepted."""
        declaration = self._owned(user_id, declaration_id)
        if declaration is None:
            return None

        totals = self._totals(user_id, declaration.year, declaration.properties)
        updated = self._persist(
            declaration_id, status=DeclarationStatus(status), **self._totals_fields(totals)
        )
        if updated is not None:
            logger.info("declaration_status_updated", declaration_id=declaration_id, status=updated.status.value)
        return updated

    def update_declaration_details(
        self,
        user_id: str,
        declaration_id: str,
        *,
        properties: Optional[Sequence[str]] = None,
        documents: Optional[Sequence[str]] = None,
        details: Optional[Union[DeclarationDetails, Mapping[str, Any]]] = None,
    ) -> Optional[Declaration]:
        """Merge ``details`` over the stored ones and update the property scope.

        Totals are recomputed since the property scope may have changed.
        """
        declaration = self._owned(user_id, declaration_id)
        if declaration is None:
            return None

        changes: dict[str, Any] = {}
        if properties is not None:
            changes["properties"] = list(properties)
        if documents is not None:
            changes["documents"] = list(documents)
        if details is not None:
            patch = (
                details.model_dump(exclude_unset=True)
                if isinstance(details, DeclarationDetails)
                else dict(details)
            )
            changes["details"] = DeclarationDetails.model_validate(
                {**declaration.details.model_dump(), **patch}
            )

        property_ids = changes.get("properties", declaration.properties)
        totals = self._totals(user_id, declaration.year, property_ids)
        updated = self._persist(declaration_id, **changes, **self._totals_fields(totals))
        if updated is not None:
            logger.info("declaration_details_updated", declaration_id=declaration_id)
        return updated

    def delete_declaration(self, user_id: str, declaration_id: str) -> bool:
        if self._owned(user_id, declaration_id) is None:
            return False
        deleted = self.repositories.declarations.delete(declaration_id)
        logger.info("declaration_deleted", declaration_id=declaration_id, deleted=deleted)
        return deleted

    def get_declaration_context(self, user_id: str, declaration: Declaration) -> DeclarationContext:
        return build_declaration_context(
            declaration,
            self.repositories.revenues.get_by_user_id(user_id),
            self.repositories.expenses.get_by_user_id(user_id),
            self.repositories.properties.get_by_user_id(user_id),
            self.repositories.amortizations.get_by_user_id(user_id),
        )

    def generate_liasse(
        self,
        user_id: str,
        declaration: Declaration,
        overrides: Optional[Mapping[str, Mapping[str, Optional[float]]]] = None,
    ) -> LiasseGenerationSnapshot:
        """Mapped and validated liasse for ``declaration``, with overrides applied."""
        context = self.get_declaration_context(user_id, declaration)
        return build_generation_snapshot(context, overrides)


__all__ = ["DeclarationService"]
