"""Storage interface consumed by the ingest core."""

from __future__ import annotations

from typing import Protocol, Sequence, Union

from core.types import Buffer, EntityKind, Message, Network, Sender

DimensionEntity = Union[Network, Buffer, Sender]
StoredEntity = Union[Network, Buffer, Sender, Message]


class LogStore(Protocol):
    """Transactional relational store for transcript data.

    Implementations raise ``IrclogStorageError`` for every failure.
    """

    @property
    def in_transaction(self) -> bool:
        """Return whether a batch transaction is open."""
        ...

    def load_all(self, kind: EntityKind) -> Sequence[DimensionEntity]:
        """Return every entity of a dimension table in ascending id order."""
        ...

    def insert(self, entity: StoredEntity) -> int:
        """Insert an entity, ignoring its ``id``, and return the assigned id."""
        ...

    def begin_transaction(self) -> None:
        """Open a batch transaction."""
        ...

    def commit_transaction(self) -> None:
        """Commit the open batch transaction."""
        ...

    def close(self) -> None:
        """Release the underlying connection."""
        ...
