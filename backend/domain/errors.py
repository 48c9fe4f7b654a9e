"""
Persistence error taxonomy.

Repositories raise these instead of driver exceptions so the HTTP layer
never has to know which database engine produced a failure.
"""
from typing import Sequence


class PersistenceError(Exception):
    """Base class for every failure reported by a repository."""


class NotFoundError(PersistenceError):
    """The referenced row does not exist."""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class UniqueConstraintError(PersistenceError):
    """A value collides with a column (or column set) declared unique."""

    def __init__(self, fields: Sequence[str]):
        self.fields = list(fields)
        super().__init__(f"unique constraint violated on {', '.join(self.fields) or 'unknown field'}")

    @property
    def target(self) -> str:
        return ", ".join(self.fields)


class ForeignKeyViolationError(PersistenceError):
    """A row is still referenced elsewhere, or references a missing row."""


class UnclassifiedPersistenceError(PersistenceError):
    """Anything the storage layer raised that has no better classification."""
