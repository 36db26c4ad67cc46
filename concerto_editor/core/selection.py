"""
Selection tracking for the properties panel.

At most one node is active. The tracker only stores an id; whether that
id still names a node is decided when it is read (resolve()), so a node
deleted by the canvas leaves a stale id that reads as "no selection".
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .store import GraphStore
    from .types import Entity

logger = logging.getLogger(__name__)


class SelectionTracker:
    """Two-state machine: Unselected (initial) or Selected(node_id)."""

    def __init__(self) -> None:
        self._active_id: str | None = None

    @property
    def active_id(self) -> str | None:
        """Raw active id, possibly stale."""
        return self._active_id

    def node_clicked(self, node_id: str) -> None:
        """Select a node, replacing any prior selection."""
        self._active_id = node_id

    def pane_clicked(self) -> None:
        """Clear the selection."""
        self._active_id = None

    def node_created(self, node_id: str) -> None:
        """Select a freshly created node."""
        self._active_id = node_id

    def resolve(self, store: GraphStore) -> Entity | None:
        """Return the selected node, or None if unselected or stale."""
        node = store.get_node(self._active_id)
        if node is None and self._active_id is not None:
            logger.debug(f"Selection {self._active_id!r} is stale")
        return node

    def live_id(self, store: GraphStore) -> str | None:
        """Active id if it still names a node, else None."""
        node = self.resolve(store)
        return node.id if node is not None else None
