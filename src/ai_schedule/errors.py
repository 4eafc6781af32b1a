"""Domain errors raised by the state layer.

Missing ids are not errors: ``update`` returns ``None`` and ``remove`` returns ``False``.
"""

from __future__ import annotations

from ai_schedule.domain.lifecycle import IllegalTransitionError


class DomainError(Exception):
    pass


class DuplicateIdError(DomainError):
    """An item with the same id already exists in the collection."""

    def __init__(self, collection: str, item_id: str) -> None:
        super().__init__(f"Duplicate id in {collection}: {item_id}")
        self.collection = collection
        self.item_id = item_id


class DanglingReferenceError(DomainError):
    """A reference does not resolve (strict reference mode only)."""

    def __init__(self, owner_id: str, field: str, target: str) -> None:
        super().__init__(f"{owner_id}.{field} references unknown id {target!r}")
        self.owner_id = owner_id
        self.field = field
        self.target = target


__all__ = [
    "DanglingReferenceError",
    "DomainError",
    "DuplicateIdError",
    "IllegalTransitionError",
]
