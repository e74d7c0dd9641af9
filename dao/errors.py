# dao/errors.py


class ValidationError(ValueError):
    """Bad input or a quantity the ledger cannot honour; nothing was written."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(LookupError):
    def __init__(self, entity: str, key):
        super().__init__(f"{entity} #{key} not found.")
        self.entity = entity
        self.key = key


class InvariantViolation(RuntimeError):
    """A write would break a ledger invariant (negative stock, over-return)."""


class ItemInUseError(ValidationError):
    pass
