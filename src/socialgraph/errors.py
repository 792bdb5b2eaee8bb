"""
Error Types
===========
Validation failures raised by the network engine.

Every error is raised synchronously from the ingestion or mutation call that
detected it. The row being processed is left untouched; rows processed earlier
in the same table stay applied.
"""


class NetworkError(Exception):
    """Base class for all errors raised by the network engine."""


class MissingColumnError(NetworkError):
    """A required column is absent from an ingested table."""

    def __init__(self, column: str, kind: str) -> None:
        super().__init__(f"Column '{column}' missing in table with {kind}")
        self.column = column
        self.kind = kind


class NotFoundError(NetworkError):
    """An id addressed by a row does not exist in the current collection."""

    def __init__(self, kind: str, entity_id: object) -> None:
        super().__init__(f"{kind.capitalize()} with id {entity_id!r} not found")
        self.kind = kind
        self.entity_id = entity_id


class InvalidActionError(NetworkError):
    """A row carries an action other than create, update or delete."""

    def __init__(self, action: object) -> None:
        super().__init__(f"Unknown action {action!r}. Choose 'create', 'update', or 'delete'.")
        self.action = action


class InvalidArgumentError(NetworkError, ValueError):
    """A public call received a malformed argument."""
