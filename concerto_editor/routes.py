"""
Editor API routes.

The canvas runs in the browser and reports every user gesture here:
- Session lifecycle (open, read, close)
- Canvas events (node click, pane click, drop, connect, geometry changes)
- Properties panel edits on the selected node

Every event response carries the full node/edge collections so the canvas
can re-render from a single consistent snapshot.
"""

import logging
from typing import Annotated, Any, Literal, Union

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, Field

from .core import DragSourceKind, EditorSession, FieldType, Position
from .sessions import SessionManager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Editor"])


# =============================================================================
# Request/Response Models
# =============================================================================


class PositionModel(BaseModel):
    """Canvas coordinates."""
    x: float
    y: float


class NodeClickRequest(BaseModel):
    """A node was clicked."""
    node_id: str = Field(..., description="Clicked node ID")


class DropRequest(BaseModel):
    """A palette entry was dropped on the canvas."""
    position: PositionModel = Field(..., description="Drop position in canvas coordinates")
    kind: str | None = Field(None, description="Drag payload: Concept, Asset or Enum")


class ConnectRequest(BaseModel):
    """A connection was drawn between two nodes."""
    source: str = Field(..., description="Source node ID")
    target: str = Field(..., description="Target node ID")
    id: str | None = Field(None, description="Edge ID assigned by the canvas")
    source_handle: str | None = Field(None, alias="sourceHandle")
    target_handle: str | None = Field(None, alias="targetHandle")

    model_config = {"populate_by_name": True}


class DimensionsModel(BaseModel):
    """Measured node size."""
    width: float
    height: float


class PositionChange(BaseModel):
    """A node was dragged. Position is omitted on drag end."""
    type: Literal["position"]
    id: str
    position: PositionModel | None = None
    dragging: bool | None = None


class DimensionsChange(BaseModel):
    """A node was measured or resized."""
    type: Literal["dimensions"]
    id: str
    dimensions: DimensionsModel | None = None
    resizing: bool | None = None


class RemoveChange(BaseModel):
    """A node or edge was deleted on the canvas."""
    type: Literal["remove"]
    id: str


class SelectChange(BaseModel):
    """Canvas-side selection highlight; not used for editing."""
    type: Literal["select"]
    id: str
    selected: bool = False


NodeChange = Annotated[
    Union[PositionChange, DimensionsChange, RemoveChange, SelectChange],
    Field(discriminator="type"),
]
EdgeChange = Annotated[Union[RemoveChange, SelectChange], Field(discriminator="type")]


class NodeChangesRequest(BaseModel):
    """Batch of node change events from the canvas."""
    changes: list[NodeChange] = Field(default_factory=list)


class EdgeChangesRequest(BaseModel):
    """Batch of edge change events from the canvas."""
    changes: list[EdgeChange] = Field(default_factory=list)


class RenameRequest(BaseModel):
    """New label for the selected node."""
    label: str


class UpdateFieldRequest(BaseModel):
    """Replace one attribute of a field."""
    key: Literal["type", "name"] = Field(..., description="Field attribute to replace")
    value: str


class SessionState(BaseModel):
    """Full state of one editor session."""
    session_id: str
    nodes: list[dict[str, Any]]
    edges: list[dict[str, Any]]
    active_id: str | None = None
    properties: dict[str, Any]


class DropResponse(SessionState):
    """Session state plus the id of the node created by a drop."""
    created_id: str | None = None


class PaletteResponse(BaseModel):
    """Drag sources and field type options."""
    drag_sources: list[str]
    field_types: list[dict[str, str]]


# =============================================================================
# Dependencies
# =============================================================================


def get_sessions(request: Request) -> SessionManager:
    """Get session manager from app state."""
    return request.app.state.sessions


def get_session(session_id: str, sessions: SessionManager = Depends(get_sessions)) -> EditorSession:
    """Resolve the session named in the path."""
    return sessions.get(session_id)


def _state(session_id: str, session: EditorSession) -> dict[str, Any]:
    state = session.to_dict()
    state["session_id"] = session_id
    state["properties"] = session.properties().to_dict()
    return state


# =============================================================================
# Session Endpoints
# =============================================================================


@router.get("/palette", response_model=PaletteResponse)
async def get_palette():
    """List the draggable node kinds and the field type selector options."""
    return PaletteResponse(
        drag_sources=[k.value for k in DragSourceKind],
        field_types=FieldType.options(),
    )


@router.post("/sessions", response_model=SessionState, status_code=201)
async def create_session(sessions: SessionManager = Depends(get_sessions)):
    """Open a new editor session with the seed entity."""
    session_id, session = sessions.create()
    return _state(session_id, session)


@router.get("/sessions/{session_id}", response_model=SessionState)
async def read_session(session_id: str, session: EditorSession = Depends(get_session)):
    """Read the current nodes, edges and selection."""
    return _state(session_id, session)


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str, sessions: SessionManager = Depends(get_sessions)):
    """Close an editor session."""
    sessions.delete(session_id)
    return Response(status_code=204)


# =============================================================================
# Canvas Event Endpoints
# =============================================================================


@router.post("/sessions/{session_id}/events/node-click", response_model=SessionState)
async def node_click(
    session_id: str,
    request: NodeClickRequest,
    session: EditorSession = Depends(get_session),
):
    """Select the clicked node."""
    session.on_node_click(request.node_id)
    return _state(session_id, session)


@router.post("/sessions/{session_id}/events/pane-click", response_model=SessionState)
async def pane_click(session_id: str, session: EditorSession = Depends(get_session)):
    """Clear the selection."""
    session.on_pane_click()
    return _state(session_id, session)


@router.post("/sessions/{session_id}/events/drop", response_model=DropResponse)
async def drop(
    session_id: str,
    request: DropRequest,
    session: EditorSession = Depends(get_session),
):
    """
    Create a node from a palette drop.

    The new node is labelled "New <kind>", has no fields and becomes the
    selection. Drops without a recognized kind create nothing.
    """
    created_id = session.on_drop(Position(request.position.x, request.position.y), request.kind)
    state = _state(session_id, session)
    state["created_id"] = created_id
    return state


@router.post("/sessions/{session_id}/events/connect", response_model=SessionState)
async def connect(
    session_id: str,
    request: ConnectRequest,
    session: EditorSession = Depends(get_session),
):
    """Record a connection between two nodes."""
    session.on_connect(
        request.source,
        request.target,
        edge_id=request.id,
        source_handle=request.source_handle,
        target_handle=request.target_handle,
    )
    return _state(session_id, session)


@router.post("/sessions/{session_id}/events/nodes-change", response_model=SessionState)
async def nodes_change(
    session_id: str,
    request: NodeChangesRequest,
    session: EditorSession = Depends(get_session),
):
    """Apply node geometry changes (move, resize, remove)."""
    session.on_nodes_change(c.model_dump(exclude_none=True) for c in request.changes)
    return _state(session_id, session)


@router.post("/sessions/{session_id}/events/edges-change", response_model=SessionState)
async def edges_change(
    session_id: str,
    request: EdgeChangesRequest,
    session: EditorSession = Depends(get_session),
):
    """Apply edge changes (remove)."""
    session.on_edges_change(c.model_dump(exclude_none=True) for c in request.changes)
    return _state(session_id, session)


# =============================================================================
# Properties Panel Endpoints
# =============================================================================


@router.get("/sessions/{session_id}/properties")
async def read_properties(session: EditorSession = Depends(get_session)):
    """Properties panel for the selected node."""
    return session.properties().to_dict()


@router.put("/sessions/{session_id}/properties/label", response_model=SessionState)
async def rename(
    session_id: str,
    request: RenameRequest,
    session: EditorSession = Depends(get_session),
):
    """Rename the selected node."""
    session.mutations.rename(request.label)
    return _state(session_id, session)


@router.post("/sessions/{session_id}/properties/fields", response_model=SessionState)
async def add_field(session_id: str, session: EditorSession = Depends(get_session)):
    """Append a default field to the selected node."""
    session.mutations.add_field()
    return _state(session_id, session)


@router.patch("/sessions/{session_id}/properties/fields/{index}", response_model=SessionState)
async def update_field(
    session_id: str,
    index: int,
    request: UpdateFieldRequest,
    session: EditorSession = Depends(get_session),
):
    """Change the type or name of one field of the selected node."""
    session.mutations.update_field(index, request.key, request.value)
    return _state(session_id, session)


@router.delete("/sessions/{session_id}/properties/fields/{index}", response_model=SessionState)
async def remove_field(
    session_id: str,
    index: int,
    session: EditorSession = Depends(get_session),
):
    """Remove one field from the selected node."""
    session.mutations.remove_field(index)
    return _state(session_id, session)
