class AIUsageError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(AIUsageError):
    """Requested resource does not exist."""


class ConflictError(AIUsageError):
    """Operation conflicts with existing state (e.g. a backward status transition)."""


class ValidationError(AIUsageError):
    """Submitted input was rejected before a job was created."""


class SourceFileError(AIUsageError):
    """The source file could not be opened, decoded or parsed."""


class PersistenceError(AIUsageError):
    """Validated records could not be written to the store."""


class JobTimeoutError(AIUsageError):
    """An ingestion job exceeded its time bound."""


class FieldApplyError(AIUsageError):
    """A raw value could not be applied to a usage field."""

    def __init__(self, field: str, raw_value: str, reason: str) -> None:
        self.field = field
        self.raw_value = raw_value
        self.reason = reason
        super().__init__(f"{field}: {reason}")
