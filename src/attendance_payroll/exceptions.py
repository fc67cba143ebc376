"""Typed exceptions for payroll computation.

Every error carries a machine-readable ``code`` so the API and CLI layers
can map it without parsing messages:

    PayrollError
    +-- ConfigurationError        non-positive pay rate, malformed schedule
    +-- InvalidInputError         negative hours, bad gross pay, bad period
    +-- EmployeeNotFoundError     unknown employee identifier
    +-- DuplicateEmployeeError    employee identifier already registered
    +-- UnknownContributionError  contribution name not in the registry

Missing attendance days and records with logout not after login are not
errors; they contribute zero hours.
"""

from __future__ import annotations


class PayrollError(Exception):
    """Base class for all payroll errors."""

    code: str = "PAYROLL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(PayrollError):
    """Raised when compensation or statutory configuration is unusable."""

    code = "CONFIGURATION_ERROR"


class InvalidInputError(PayrollError):
    """Raised when a computation receives values it must not coerce."""

    code = "INVALID_INPUT"


class EmployeeNotFoundError(PayrollError):
    """Raised when a provider has no employee with the given identifier."""

    code = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"No such employee: {employee_id}")


class DuplicateEmployeeError(PayrollError):
    """Raised when an employee identifier is already registered."""

    code = "DUPLICATE_EMPLOYEE"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"Employee already exists: {employee_id}")


class UnknownContributionError(PayrollError):
    """Raised when a statutory contribution name is not in the registry."""

    code = "UNKNOWN_CONTRIBUTION"

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unknown contribution: {kind}")
