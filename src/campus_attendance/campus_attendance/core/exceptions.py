class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConfigurationMissing(DomainError):
    """Raised when the term configuration has not been set up."""


class OutOfTermRange(DomainError):
    """Raised when a date falls outside the configured teaching weeks."""


class TransactionFailure(DomainError):
    """Raised when a batch job step fails and the whole run was rolled back."""


class InvariantViolation(DomainError):
    """Raised when stored data breaks a structural invariant (upstream corruption)."""
