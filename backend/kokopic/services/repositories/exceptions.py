"""Errors raised by the data access layer.

Stores never raise raw SQLAlchemy errors for expected conditions (missing
rows, unique violations); services translate these into ``ServiceError``
kinds.
"""


class RepositoryError(Exception):
    """Base exception for store operations."""


class NotFoundError(RepositoryError):
    """Row addressed by id does not exist."""

    def __init__(self, entity_type: str, identifier: str | int):
        self.entity_type = entity_type
        self.identifier = identifier
        super().__init__(f"{entity_type} not found: {identifier}")


class DuplicateError(RepositoryError):
    """Insert violated a unique constraint (e.g. ``users.email``)."""

    def __init__(self, entity_type: str, field: str, value: str | int | None = None):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        if value is None:
            super().__init__(f"{entity_type} violates unique {field}")
        else:
            super().__init__(f"{entity_type} with {field}={value} already exists")
