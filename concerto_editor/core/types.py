"""
Core value types for the Concerto editor graph.

This module defines the foundational types for the canvas model:
- Field: A named, typed attribute of an entity
- EntityData: The editable payload of a node (label + ordered fields)
- Entity: A node positioned on the canvas
- Connection: A directed link between two entities
- GraphSnapshot: One immutable view of the whole graph

Invariants:
    - All types are frozen; edits produce new instances
    - Entity.id and Entity.kind never change after creation
    - Field order inside EntityData.fields is display order
    - Field types are not validated (any string is stored as given)

How to change safely:
    - Add new optional attributes with defaults
    - Keep to_dict() output in the canvas wire shape (camelCase handles)
    - Never mutate a tuple or instance that has already been published

Example:
    >>> person = Entity(
    ...     id="1",
    ...     position=Position(250, 100),
    ...     data=EntityData(label="Person", fields=(Field("String", "firstName"),)),
    ... )
    >>> person.to_dict()["data"]["label"]
    'Person'
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum
from typing import Any

# Rendering variant used for every node in this editor
CONCERTO_KIND = "concerto"

DEFAULT_FIELD_TYPE = "String"
DEFAULT_FIELD_NAME = "newProp"


class FieldType(Enum):
    """Field types offered in the properties panel.

    Values are the type names stored on a Field; display labels are what
    the type selector shows.
    """

    STRING = "String"
    INTEGER = "Integer"
    BOOLEAN = "Boolean"
    DATETIME = "DateTime"
    DOUBLE = "Double"

    @property
    def display_label(self) -> str:
        """Label shown in the type selector."""
        if self is FieldType.DATETIME:
            return "Date"
        return self.value

    @classmethod
    def options(cls) -> list[dict[str, str]]:
        """Selector options in display order."""
        return [{"value": t.value, "label": t.display_label} for t in cls]


class DragSourceKind(Enum):
    """Draggable palette entries. The value is the drag payload."""

    CONCEPT = "Concept"
    ASSET = "Asset"
    ENUM = "Enum"

    @classmethod
    def from_payload(cls, payload: str | None) -> DragSourceKind | None:
        """Resolve a drag payload, or None if it is empty or unknown."""
        if not payload:
            return None
        for kind in cls:
            if kind.value == payload:
                return kind
        return None

    @property
    def default_label(self) -> str:
        """Label given to a node dropped from this palette entry."""
        return f"New {self.value}"


@dataclass(frozen=True)
class Position:
    """Canvas coordinates of a node."""

    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Position:
        return cls(x=float(data["x"]), y=float(data["y"]))


@dataclass(frozen=True)
class Field:
    """A single typed attribute of an entity.

    Attributes:
        type: Type name, normally one of FieldType values
        name: Field identifier as it should appear in the schema
    """

    type: str = DEFAULT_FIELD_TYPE
    name: str = DEFAULT_FIELD_NAME

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Field:
        return cls(
            type=data.get("type", DEFAULT_FIELD_TYPE),
            name=data.get("name", DEFAULT_FIELD_NAME),
        )


@dataclass(frozen=True)
class EntityData:
    """Editable payload of a node.

    Only these top-level keys take part in the shallow merge performed by
    GraphStore.update_node_data().
    """

    label: str = ""
    fields: tuple[Field, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "fields": [f.to_dict() for f in self.fields],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EntityData:
        return cls(
            label=data.get("label", ""),
            fields=tuple(Field.from_dict(f) for f in data.get("fields") or ()),
        )


# Keys accepted by a shallow data merge
ENTITY_DATA_KEYS = frozenset({"label", "fields"})


@dataclass(frozen=True)
class Entity:
    """A schema concept placed on the canvas.

    Attributes:
        id: Unique node identifier (immutable)
        position: Canvas position, changed only by drag events
        data: Label and ordered fields
        kind: Rendering variant (immutable)
        width: Measured width reported by the canvas, if any
        height: Measured height reported by the canvas, if any
    """

    id: str
    position: Position
    data: EntityData = dataclass_field(default_factory=EntityData)
    kind: str = CONCERTO_KIND
    width: float | None = None
    height: float | None = None

    @property
    def label(self) -> str:
        return self.data.label

    @property
    def fields(self) -> tuple[Field, ...]:
        return self.data.fields

    def to_dict(self) -> dict[str, Any]:
        """Convert to the canvas node shape."""
        result: dict[str, Any] = {
            "id": self.id,
            "type": self.kind,
            "position": self.position.to_dict(),
            "data": self.data.to_dict(),
        }
        if self.width is not None:
            result["width"] = self.width
        if self.height is not None:
            result["height"] = self.height
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Entity:
        """Create from the canvas node shape."""
        return cls(
            id=str(data["id"]),
            kind=data.get("type", CONCERTO_KIND),
            position=Position.from_dict(data["position"]),
            data=EntityData.from_dict(data.get("data") or {}),
            width=data.get("width"),
            height=data.get("height"),
        )


@dataclass(frozen=True)
class Connection:
    """A directed link between two entities.

    The id is opaque to the core. Source and target are not checked for
    existence, distinctness or duplication.
    """

    id: str
    source: str
    target: str
    source_handle: str | None = None
    target_handle: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the canvas edge shape."""
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "sourceHandle": self.source_handle,
            "targetHandle": self.target_handle,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Connection:
        return cls(
            id=str(data["id"]),
            source=str(data["source"]),
            target=str(data["target"]),
            source_handle=data.get("sourceHandle"),
            target_handle=data.get("targetHandle"),
        )


@dataclass(frozen=True)
class GraphSnapshot:
    """Immutable view of the node and edge collections at one instant."""

    nodes: tuple[Entity, ...] = ()
    edges: tuple[Connection, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }
