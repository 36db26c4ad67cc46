"""
Entity mutation protocol.

Edits made in the properties panel apply to the selected node only. Each
operation reads the selected node's current field tuple, builds a new
tuple and hands the whole value to GraphStore.update_node_data() in a
single call.

Invariants:
    - Without a live selection every operation is a no-op and the store
      is not touched
    - Field tuples are never edited in place
    - remove_field() keeps the relative order of the remaining fields
    - Out-of-range indexes and unknown attribute keys are no-ops
"""

from __future__ import annotations

import logging
from dataclasses import replace

from .selection import SelectionTracker
from .store import GraphStore
from .types import DEFAULT_FIELD_NAME, DEFAULT_FIELD_TYPE, Entity, Field

logger = logging.getLogger(__name__)

# Field attributes editable through update_field()
EDITABLE_FIELD_KEYS = frozenset({"type", "name"})


class EntityMutations:
    """Rename / add / update / remove operations on the selected node."""

    def __init__(self, store: GraphStore, selection: SelectionTracker) -> None:
        self._store = store
        self._selection = selection

    def _selected(self, operation: str) -> Entity | None:
        node = self._selection.resolve(self._store)
        if node is None:
            logger.debug(f"{operation}: nothing selected, ignoring")
        return node

    def rename(self, label: str) -> None:
        """Set the selected node's label."""
        node = self._selected("rename")
        if node is None:
            return
        self._store.update_node_data(node.id, {"label": label})

    def add_field(self) -> None:
        """Append a default String field named "newProp".

        Repeated calls append duplicate names; nothing is renamed.
        """
        node = self._selected("add_field")
        if node is None:
            return
        fields = node.fields + (Field(DEFAULT_FIELD_TYPE, DEFAULT_FIELD_NAME),)
        self._store.update_node_data(node.id, {"fields": fields})

    def update_field(self, index: int, key: str, value: str) -> None:
        """Replace one attribute ("type" or "name") of the field at index."""
        node = self._selected("update_field")
        if node is None:
            return
        if key not in EDITABLE_FIELD_KEYS:
            logger.debug(f"update_field: unknown attribute {key!r}")
            return
        if not 0 <= index < len(node.fields):
            logger.debug(f"update_field: index {index} out of range for node {node.id}")
            return

        fields = list(node.fields)
        fields[index] = replace(fields[index], **{key: value})
        self._store.update_node_data(node.id, {"fields": tuple(fields)})

    def remove_field(self, index: int) -> None:
        """Delete the field at index, shifting later fields down by one."""
        node = self._selected("remove_field")
        if node is None:
            return
        if not 0 <= index < len(node.fields):
            logger.debug(f"remove_field: index {index} out of range for node {node.id}")
            return

        fields = tuple(f for i, f in enumerate(node.fields) if i != index)
        self._store.update_node_data(node.id, {"fields": fields})
