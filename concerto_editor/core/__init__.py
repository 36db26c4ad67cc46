"""
Core model for the Concerto editor.

This package holds the canvas data model and its edit protocol:
- Value types (Entity, Field, Connection, GraphSnapshot)
- IdentityGenerator for node ids
- GraphStore for node/edge collections
- SelectionTracker for the active node
- EntityMutations for properties-panel edits
- EditorSession wiring the above to canvas events

Invariants:
    - Node ids are unique and never reused within a session
    - Node id and kind never change after creation
    - Every edit publishes a new immutable snapshot
    - Nothing in the core raises for stale ids or missing selection
"""

from .ids import IdentityGenerator
from .mutations import EntityMutations
from .selection import SelectionTracker
from .session import EditorSession, PropertiesPanel, seed_entity
from .store import GraphStore
from .types import (
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

__all__ = [
    # Types
    "CONCERTO_KIND",
    "Connection",
    "DragSourceKind",
    "Entity",
    "EntityData",
    "Field",
    "FieldType",
    "GraphSnapshot",
    "Position",
    # State
    "IdentityGenerator",
    "GraphStore",
    "SelectionTracker",
    "EntityMutations",
    # Session
    "EditorSession",
    "PropertiesPanel",
    "seed_entity",
]
