"""
Unit tests for editor value types.

Tests cover:
- Field defaults and wire shape
- Entity wire shape and immutability
- Connection wire shape
- Field type options and drag payloads
"""

import dataclasses

import pytest

from concerto_editor.core.types import (
    CONCERTO_KIND,
    Connection,
    DragSourceKind,
    Entity,
    EntityData,
    Field,
    FieldType,
    GraphSnapshot,
    Position,
)


class TestField:
    """Tests for Field."""

    def test_default_field(self):
        """Default field is String newProp."""
        f = Field()
        assert f.type == "String"
        assert f.name == "newProp"

    def test_field_to_dict(self):
        """Field serializes to type/name."""
        assert Field("Integer", "age").to_dict() == {"type": "Integer", "name": "age"}

    def test_field_from_dict(self):
        """Field can be created from the wire shape."""
        f = Field.from_dict({"type": "Boolean", "name": "active"})
        assert f == Field("Boolean", "active")

    def test_unlisted_type_is_kept(self):
        """Field types are stored as given, without validation."""
        assert Field("Money", "price").type == "Money"

    def test_field_is_frozen(self):
        """Fields cannot be edited in place."""
        f = Field()
        with pytest.raises(dataclasses.FrozenInstanceError):
            f.name = "other"  # type: ignore[misc]


class TestEntity:
    """Tests for Entity."""

    def test_entity_to_dict(self):
        """Entity serializes to the canvas node shape."""
        node = Entity(
            id="1",
            position=Position(250, 100),
            data=EntityData(label="Person", fields=(Field("String", "firstName"),)),
        )
        assert node.to_dict() == {
            "id": "1",
            "type": "concerto",
            "position": {"x": 250, "y": 100},
            "data": {"label": "Person", "fields": [{"type": "String", "name": "firstName"}]},
        }

    def test_entity_dimensions_included_when_known(self):
        """Measured dimensions appear only when reported."""
        node = Entity(id="1", position=Position(0, 0), width=150.0, height=80.0)
        d = node.to_dict()
        assert d["width"] == 150.0
        assert d["height"] == 80.0

    def test_entity_from_dict(self):
        """Entity can be created from the canvas node shape."""
        node = Entity.from_dict(
            {
                "id": "7",
                "type": "concerto",
                "position": {"x": 1, "y": 2},
                "data": {"label": "Order", "fields": [{"type": "Double", "name": "total"}]},
            }
        )
        assert node.id == "7"
        assert node.kind == CONCERTO_KIND
        assert node.position == Position(1.0, 2.0)
        assert node.label == "Order"
        assert node.fields == (Field("Double", "total"),)

    def test_entity_is_frozen(self):
        """Entity id cannot be reassigned."""
        node = Entity(id="1", position=Position(0, 0))
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.id = "2"  # type: ignore[misc]


class TestConnection:
    """Tests for Connection."""

    def test_connection_to_dict(self):
        """Connection uses camelCase handle keys."""
        edge = Connection(id="e1", source="1", target="2", source_handle="a")
        assert edge.to_dict() == {
            "id": "e1",
            "source": "1",
            "target": "2",
            "sourceHandle": "a",
            "targetHandle": None,
        }

    def test_connection_from_dict(self):
        """Connection can be created from the canvas edge shape."""
        edge = Connection.from_dict({"id": "e1", "source": "1", "target": "1"})
        assert edge.source == edge.target == "1"


class TestGraphSnapshot:
    """Tests for GraphSnapshot."""

    def test_empty_snapshot(self):
        """Empty snapshot serializes to empty lists."""
        assert GraphSnapshot().to_dict() == {"nodes": [], "edges": []}


class TestFieldType:
    """Tests for FieldType options."""

    def test_options_in_display_order(self):
        """Selector options list every type, DateTime shown as Date."""
        assert FieldType.options() == [
            {"value": "String", "label": "String"},
            {"value": "Integer", "label": "Integer"},
            {"value": "Boolean", "label": "Boolean"},
            {"value": "DateTime", "label": "Date"},
            {"value": "Double", "label": "Double"},
        ]


class TestDragSourceKind:
    """Tests for drag payload resolution."""

    @pytest.mark.parametrize("payload", ["Concept", "Asset", "Enum"])
    def test_known_payloads(self, payload):
        """Palette payloads resolve and seed a label."""
        kind = DragSourceKind.from_payload(payload)
        assert kind is not None
        assert kind.default_label == f"New {payload}"

    @pytest.mark.parametrize("payload", [None, "", "Widget", "concept"])
    def test_unknown_payloads(self, payload):
        """Empty or unknown payloads resolve to None."""
        assert DragSourceKind.from_payload(payload) is None
