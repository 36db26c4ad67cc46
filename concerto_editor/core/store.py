"""
Graph state store for the Concerto editor.

The GraphStore holds the ordered node collection and the edge collection
of one editing session. Every mutation replaces the published tuples
rather than changing them, so a snapshot taken before a call is never
altered by it.

Invariants:
    - Node ids are unique (ids come from one IdentityGenerator)
    - update_node_data() changes at most one node; all other Entity
      instances in the new snapshot are the same objects as before
    - No operation raises for unknown ids; they are silent no-ops
    - Subscribers are notified once per state replacement, never for no-ops

How to change safely:
    - Route every label/field edit through update_node_data()
    - Keep merges shallow: a supplied "fields" value replaces the whole tuple
    - Publish through _publish() so subscribers see every change
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from typing import Any
from uuid import uuid4

from .ids import IdentityGenerator
from .types import (
    CONCERTO_KIND,
    ENTITY_DATA_KEYS,
    Connection,
    Entity,
    EntityData,
    Field,
    GraphSnapshot,
    Position,
)

logger = logging.getLogger(__name__)

Subscriber = Callable[[GraphSnapshot], None]


def _coerce_fields(value: Iterable[Any] | None) -> tuple[Field, ...]:
    return tuple(f if isinstance(f, Field) else Field.from_dict(f) for f in value or ())


def _coerce_position(value: Position | Mapping[str, Any]) -> Position:
    if isinstance(value, Position):
        return value
    return Position.from_dict(dict(value))


class GraphStore:
    """Ordered node collection plus edge collection with pure updates.

    Example:
        >>> store = GraphStore()
        >>> node_id = store.add_node(Position(0, 0), data=EntityData(label="Order"))
        >>> store.update_node_data(node_id, {"label": "PurchaseOrder"})
        >>> store.get_node(node_id).label
        'PurchaseOrder'
    """

    def __init__(
        self,
        id_generator: IdentityGenerator | None = None,
        nodes: Iterable[Entity] = (),
        edges: Iterable[Connection] = (),
    ) -> None:
        self._ids = id_generator or IdentityGenerator()
        self._nodes: tuple[Entity, ...] = tuple(nodes)
        self._edges: tuple[Connection, ...] = tuple(edges)
        self._subscribers: list[Subscriber] = []

        seen: set[str] = set()
        for node in self._nodes:
            if node.id in seen:
                raise ValueError(f"Duplicate node id '{node.id}' in initial nodes")
            seen.add(node.id)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> tuple[Entity, ...]:
        return self._nodes

    @property
    def edges(self) -> tuple[Connection, ...]:
        return self._edges

    def snapshot(self) -> GraphSnapshot:
        """Return the current node and edge collections."""
        return GraphSnapshot(nodes=self._nodes, edges=self._edges)

    def get_node(self, node_id: str | None) -> Entity | None:
        """Find a node by id, or None."""
        if node_id is None:
            return None
        for node in self._nodes:
            if node.id == node_id:
                return node
        return None

    def __contains__(self, node_id: object) -> bool:
        return any(node.id == node_id for node in self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    # -------------------------------------------------------------------------
    # Change notification
    # -------------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback invoked with each new snapshot.

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(
        self,
        nodes: tuple[Entity, ...] | None = None,
        edges: tuple[Connection, ...] | None = None,
    ) -> None:
        if nodes is not None:
            self._nodes = nodes
        if edges is not None:
            self._edges = edges

        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Store subscriber failed")

    # -------------------------------------------------------------------------
    # Node operations
    # -------------------------------------------------------------------------

    def add_node(
        self,
        position: Position | Mapping[str, Any],
        kind: str = CONCERTO_KIND,
        data: EntityData | None = None,
    ) -> str:
        """Append a new node with a freshly allocated id.

        Args:
            position: Canvas position of the node
            kind: Rendering variant
            data: Initial label and fields

        Returns:
            The new node id
        """
        node_id = self._ids.next_id()
        # Initial nodes may already hold ids the generator would issue
        while node_id in self:
            node_id = self._ids.next_id()

        node = Entity(
            id=node_id,
            kind=kind,
            position=_coerce_position(position),
            data=data or EntityData(),
        )
        self._publish(nodes=self._nodes + (node,))
        logger.debug(f"Added node {node.id} ({node.label!r})")
        return node.id

    def update_node_data(self, node_id: str | None, partial: Mapping[str, Any]) -> None:
        """Shallow-merge top-level data keys into one node.

        Keys present in ``partial`` replace the node's value entirely; keys
        absent are left untouched. A ``fields`` value always replaces the
        whole field sequence. Unknown node ids are ignored.

        Args:
            node_id: Target node id
            partial: Mapping with any of "label" and "fields"
        """
        changes: dict[str, Any] = {}
        for key, value in partial.items():
            if key not in ENTITY_DATA_KEYS:
                logger.debug(f"Ignoring unknown data key {key!r} for node {node_id}")
                continue
            changes[key] = _coerce_fields(value) if key == "fields" else value

        if not changes:
            return

        for index, node in enumerate(self._nodes):
            if node.id == node_id:
                break
        else:
            logger.debug(f"update_node_data: no node with id {node_id!r}")
            return

        updated = replace(node, data=replace(node.data, **changes))
        nodes = self._nodes[:index] + (updated,) + self._nodes[index + 1 :]
        self._publish(nodes=nodes)

    def remove_node(self, node_id: str) -> None:
        """Delete a node. Edges touching it are removed as well."""
        if node_id not in self:
            return
        nodes = tuple(n for n in self._nodes if n.id != node_id)
        edges = tuple(e for e in self._edges if node_id not in (e.source, e.target))
        self._publish(nodes=nodes, edges=edges)
        logger.debug(f"Removed node {node_id}")

    def apply_node_changes(self, changes: Iterable[Mapping[str, Any]]) -> None:
        """Apply canvas geometry events to the node collection.

        Supported change types:
            position: {"type": "position", "id": ..., "position": {"x", "y"}}
            dimensions: {"type": "dimensions", "id": ..., "dimensions": {"width", "height"}}
            remove: {"type": "remove", "id": ...}

        Other types (e.g. "select") and unknown ids are ignored. Edges are
        only dropped when a node they touch is removed in this batch. The
        batch is published as a single snapshot.
        """
        nodes = list(self._nodes)
        removed: set[str] = set()
        changed = False

        for change in changes:
            change_type = change.get("type")
            node_id = change.get("id")
            index = next((i for i, n in enumerate(nodes) if n.id == node_id), None)
            if index is None:
                logger.debug(f"Ignoring {change_type!r} change for unknown node {node_id!r}")
                continue

            if change_type == "position":
                if change.get("position") is None:
                    continue
                nodes[index] = replace(nodes[index], position=_coerce_position(change["position"]))
                changed = True
            elif change_type == "dimensions":
                dims = change.get("dimensions") or {}
                nodes[index] = replace(
                    nodes[index],
                    width=dims.get("width", nodes[index].width),
                    height=dims.get("height", nodes[index].height),
                )
                changed = True
            elif change_type == "remove":
                removed.add(nodes[index].id)
                del nodes[index]
                changed = True

        if not changed:
            return

        edges = None
        if removed:
            edges = tuple(e for e in self._edges if not {e.source, e.target} & removed)
        self._publish(nodes=tuple(nodes), edges=edges)

    # -------------------------------------------------------------------------
    # Edge operations
    # -------------------------------------------------------------------------

    def connect(
        self,
        source: str,
        target: str,
        edge_id: str | None = None,
        source_handle: str | None = None,
        target_handle: str | None = None,
    ) -> Connection:
        """Append a connection. Never rejects and never deduplicates.

        Args:
            source: Source node id
            target: Target node id
            edge_id: Id assigned by the canvas; generated when omitted
            source_handle: Canvas handle on the source node
            target_handle: Canvas handle on the target node

        Returns:
            The new Connection
        """
        edge = Connection(
            id=edge_id or f"edge-{source}-{target}-{uuid4().hex[:8]}",
            source=source,
            target=target,
            source_handle=source_handle,
            target_handle=target_handle,
        )
        self._publish(edges=self._edges + (edge,))
        return edge

    def apply_edge_changes(self, changes: Iterable[Mapping[str, Any]]) -> None:
        """Apply canvas edge events. Only "remove" changes the collection."""
        removed = {c.get("id") for c in changes if c.get("type") == "remove"}
        if not removed:
            return
        edges = tuple(e for e in self._edges if e.id not in removed)
        if len(edges) != len(self._edges):
            self._publish(edges=edges)
