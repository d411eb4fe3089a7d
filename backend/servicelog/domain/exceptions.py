"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist (or is soft-deleted)."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(Exception):
    """Raised when attempting to create a duplicate entity within its uniqueness scope."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class DomainValidationError(Exception):
    """Raised when input violates a business rule before anything is written."""

    def __init__(self, entity_type: str, message: str):
        self.entity_type = entity_type
        self.message = message
        super().__init__(f"{entity_type}: {message}")


class PermissionDeniedError(Exception):
    """Raised when the acting user may not perform an operation on an entity."""

    def __init__(self, entity_type: str, entity_id: int | str, user_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.user_id = user_id
        super().__init__(
            f"User '{user_id}' is not authorized to modify {entity_type} '{entity_id}'"
        )


class InvalidStateTransitionError(Exception):
    """Raised when a lifecycle transition is not allowed from the current state."""

    def __init__(self, entity_type: str, entity_id: int | str, message: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} '{entity_id}' {message}")


class RepositoryError(Exception):
    """Wraps a storage failure with the operation and table it happened in.

    The original driver exception is always available as ``__cause__``.
    """

    def __init__(self, operation: str, table_name: str, detail: str = ""):
        self.operation = operation
        self.table_name = table_name
        message = f"Failed to {operation} {table_name}"
        if detail:
            message += f": {detail}"
        super().__init__(message)
