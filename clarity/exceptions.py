"""Domain-specific exceptions for the expense ledger engine."""


class ValidationError(ValueError):
    """Raised when an expense draft does not meet validation requirements."""

    code = "validation_error"
    default_message = "Invalid expense"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class EmptyDescription(ValidationError):
    code = "empty_description"
    default_message = "Add a description"


class MissingDate(ValidationError):
    code = "missing_date"
    default_message = "Pick a date"


class InvalidAmount(ValidationError):
    code = "invalid_amount"
    default_message = "Enter a valid amount"


class InvalidDate(ValidationError):
    code = "invalid_date"
    default_message = "Enter a valid date (YYYY-MM-DD)"


class InvalidCategory(ValidationError):
    code = "invalid_category"
    default_message = "Pick a category from the list"


class RecordNotFoundError(LookupError):
    """Raised when an expense is looked up explicitly and cannot be located."""


class PersistenceError(IOError):
    """Raised when the blob store cannot be written."""
