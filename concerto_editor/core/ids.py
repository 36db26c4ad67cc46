"""
Node identity generation.

Each editor session owns one IdentityGenerator. Ids are decimal strings
issued in increasing order; "1" is reserved for the seed entity, so a
default generator starts at 2.
"""

from __future__ import annotations

import itertools

SEED_NODE_ID = "1"
FIRST_GENERATED_ID = 2


class IdentityGenerator:
    """Issues unique, monotonically increasing string ids.

    Not thread-safe; callers run on a single event loop.

    Example:
        >>> ids = IdentityGenerator()
        >>> ids.next_id(), ids.next_id()
        ('2', '3')
    """

    def __init__(self, start: int = FIRST_GENERATED_ID) -> None:
        if start < 0:
            raise ValueError(f"start must be non-negative, got {start}")
        self._counter = itertools.count(start)

    def next_id(self) -> str:
        """Return a fresh id, never returned before by this generator."""
        return str(next(self._counter))

