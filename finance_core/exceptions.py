"""Domain-specific exceptions for the finance tracker ledger."""

class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class ConflictError(ValueError):
    """Raised when a mutation would break a ledger invariant."""


class DuplicateCategoryError(ConflictError):
    """Raised when a category with the same name and type already exists."""


class CategoryInUseError(ConflictError):
    """Raised when deleting a category that transactions still reference."""


class PersistenceError(IOError):
    """Raised when the persistence layer encounters unrecoverable issues."""
