"""Custom exceptions for the LMNP accounting core.

Only precondition failures and repository conflicts are raised. Business-rule
findings (unbalanced sheet, capped depreciation, implausible form values) are
reported as ConsistencyCheck / FormValidationIssue records instead.

Example:
    try:
        report = generate_accounting_reports(user_id, period, repositories)
    except InvalidPeriodError as e:
        show_message(e.message)
    except LmnpError as e:
        logger.error("report_failed", error=str(e))
"""

from typing import Any, Optional


class LmnpError(Exception):
    """Base exception for all LMNP core errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(LmnpError):
    """Error raised when caller-supplied input breaks a precondition.

    Attributes:
        field: The field that failed validation.
        value: The invalid value.
        constraint: The validation constraint that was violated.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class InvalidPeriodError(ValidationError):
    """Accounting period whose start date falls after its end date.

    Example:
        >>> raise InvalidPeriodError(start_date="2024-12-31", end_date="2024-01-01")
        InvalidPeriodError: La date de début doit être antérieure à la date de fin
    """

    MESSAGE = "La date de début doit être antérieure à la date de fin"

    def __init__(
        self,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> None:
        super().__init__(
            self.MESSAGE,
            field="period",
            value=f"{start_date} > {end_date}",
            constraint="start_date <= end_date",
        )
        self.start_date = start_date
        self.end_date = end_date


class DeclarationConflictError(LmnpError):
    """A declaration already exists for this user and year."""

    def __init__(self, *, user_id: str, year: int) -> None:
        super().__init__(
            f"Une déclaration existe déjà pour l'année {year}",
            details={"user_id": user_id, "year": year},
            recoverable=True,
        )
        self.user_id = user_id
        self.year = year


class DeclarationNotFoundError(LmnpError):
    """No declaration matches the requested id."""

    def __init__(self, *, declaration_id: str) -> None:
        super().__init__(
            f"Déclaration introuvable : {declaration_id}",
            details={"declaration_id": declaration_id},
            recoverable=True,
        )
        self.declaration_id = declaration_id


class ConfigurationError(LmnpError):
    """Error raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "LmnpError",
    "ValidationError",
    "InvalidPeriodError",
    "DeclarationConflictError",
    "DeclarationNotFoundError",
    "ConfigurationError",
]
