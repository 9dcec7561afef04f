"""Store and key-extraction contracts for the record cache.

The cache reads its backing store exactly once, through fetch_all(). Any
record that call leaves out stays invisible to the cache for the life of the
process.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Sequence
from typing import Any, Protocol, TypeAlias

# Pure, stable function of a record; identifiers must not change after load.
KeyExtractor: TypeAlias = Callable[[Any], Hashable]


class RecordStore(Protocol):
    """Protocol for the backing store of one record type."""

    async def fetch_all(self) -> Sequence[Any]:
        """Return every record of the type, unfiltered."""
        ...
