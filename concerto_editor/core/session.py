"""
Editor session: one canvas, its selection and its edit protocol.

The EditorSession is the boundary the canvas talks to. It consumes the
canvas's interaction events (node click, pane click, drop, connect and
geometry changes) and routes them to the SelectionTracker, the
EntityMutations protocol or the GraphStore. Events are handled one at a
time, each to completion.

Example:
    >>> session = EditorSession()
    >>> new_id = session.on_drop(Position(100, 100), "Concept")
    >>> session.selection.active_id == new_id
    True
    >>> session.mutations.add_field()
    >>> [f.name for f in session.store.get_node(new_id).fields]
    ['newProp']
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from typing import Any

from .ids import SEED_NODE_ID, IdentityGenerator
from .mutations import EntityMutations
from .selection import SelectionTracker
from .store import GraphStore
from .types import (
    CONCERTO_KIND,
    Connection,
    DragSourceKind,
    Entity,
    EntityData,
    Field,
    FieldType,
    Position,
)

logger = logging.getLogger(__name__)

NO_SELECTION_INFO = "Click a node to edit properties."


def seed_entity() -> Entity:
    """The entity every new session starts with."""
    return Entity(
        id=SEED_NODE_ID,
        kind=CONCERTO_KIND,
        position=Position(250, 100),
        data=EntityData(
            label="Person",
            fields=(
                Field("String", "firstName"),
                Field("String", "lastName"),
                Field("Integer", "age"),
            ),
        ),
    )


@dataclass(frozen=True)
class PropertiesPanel:
    """Projection of the selected node for the properties editor."""

    node_id: str | None = None
    kind: str | None = None
    label: str | None = None
    fields: tuple[Field, ...] = ()
    field_type_options: list[dict[str, str]] = dataclass_field(default_factory=FieldType.options)

    @property
    def has_selection(self) -> bool:
        return self.node_id is not None

    @property
    def info(self) -> str:
        if self.node_id is None:
            return NO_SELECTION_INFO
        return f"ID: {self.node_id} • Type: {self.kind}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "selected": self.has_selection,
            "node_id": self.node_id,
            "kind": self.kind,
            "label": self.label,
            "fields": [f.to_dict() for f in self.fields],
            "field_type_options": self.field_type_options,
            "info": self.info,
        }


class EditorSession:
    """Wires the store, selection and mutation protocol for one canvas.

    Attributes:
        store: Node and edge collections
        selection: Active node tracker
        mutations: Properties-panel edit operations
    """

    def __init__(
        self,
        id_generator: IdentityGenerator | None = None,
        nodes: Iterable[Entity] | None = None,
        edges: Iterable[Connection] = (),
    ) -> None:
        initial = (seed_entity(),) if nodes is None else tuple(nodes)
        self.store = GraphStore(id_generator or IdentityGenerator(), nodes=initial, edges=edges)
        self.selection = SelectionTracker()
        self.mutations = EntityMutations(self.store, self.selection)

    @property
    def active_id(self) -> str | None:
        """Selected node id, or None when unselected or stale."""
        return self.selection.live_id(self.store)

    # -------------------------------------------------------------------------
    # Canvas events
    # -------------------------------------------------------------------------

    def on_node_click(self, node_id: str) -> None:
        self.selection.node_clicked(node_id)

    def on_pane_click(self) -> None:
        self.selection.pane_clicked()

    def on_drop(self, position: Position | Mapping[str, Any], payload: str | None) -> str | None:
        """Create a node from a palette drop and select it.

        Args:
            position: Canvas position of the drop
            payload: Drag payload ("Concept", "Asset" or "Enum")

        Returns:
            The new node id, or None if the payload was not recognized
        """
        source = DragSourceKind.from_payload(payload)
        if source is None:
            logger.debug(f"Ignoring drop with payload {payload!r}")
            return None

        node_id = self.store.add_node(
            position,
            kind=CONCERTO_KIND,
            data=EntityData(label=source.default_label, fields=()),
        )
        self.selection.node_created(node_id)
        return node_id

    def on_connect(
        self,
        source: str,
        target: str,
        edge_id: str | None = None,
        source_handle: str | None = None,
        target_handle: str | None = None,
    ) -> Connection:
        return self.store.connect(
            source,
            target,
            edge_id=edge_id,
            source_handle=source_handle,
            target_handle=target_handle,
        )

    def on_nodes_change(self, changes: Iterable[Mapping[str, Any]]) -> None:
        self.store.apply_node_changes(changes)

    def on_edges_change(self, changes: Iterable[Mapping[str, Any]]) -> None:
        self.store.apply_edge_changes(changes)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def properties(self) -> PropertiesPanel:
        """Project the selected node into the properties panel."""
        node = self.selection.resolve(self.store)
        if node is None:
            return PropertiesPanel()
        return PropertiesPanel(
            node_id=node.id,
            kind=node.kind,
            label=node.label,
            fields=node.fields,
        )

    def to_dict(self) -> dict[str, Any]:
        """Full state for the canvas to render."""
        result = self.store.snapshot().to_dict()
        result["active_id"] = self.active_id
        return result
