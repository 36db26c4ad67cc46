"""
Integration tests for the editor HTTP API.

Tests cover:
- Session lifecycle
- Canvas events over HTTP
- Properties panel edits
- Error responses
"""

import pytest
from fastapi.testclient import TestClient

from concerto_editor.app import create_app
from concerto_editor.config import Settings


@pytest.fixture
def client():
    """Test client with lifespan started."""
    app = create_app(Settings(max_sessions=3))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def session_url(client):
    """URL of a freshly opened session."""
    resp = client.post("/api/v1/sessions")
    assert resp.status_code == 201
    return f"/api/v1/sessions/{resp.json()['session_id']}"


class TestSessions:
    """Session lifecycle endpoints."""

    def test_health(self, client):
        """Health endpoint responds."""
        assert client.get("/health").json()["status"] == "healthy"

    def test_create_session_has_seed(self, client):
        """New sessions contain the seed entity and no selection."""
        data = client.post("/api/v1/sessions").json()
        assert [n["id"] for n in data["nodes"]] == ["1"]
        assert data["nodes"][0]["data"]["label"] == "Person"
        assert data["edges"] == []
        assert data["active_id"] is None
        assert data["properties"]["selected"] is False

    def test_read_session(self, client, session_url):
        """Sessions can be read back."""
        resp = client.get(session_url)
        assert resp.status_code == 200
        assert resp.json()["nodes"][0]["type"] == "concerto"

    def test_delete_session(self, client, session_url):
        """Deleted sessions return 404 afterwards."""
        assert client.delete(session_url).status_code == 204
        resp = client.get(session_url)
        assert resp.status_code == 404
        assert resp.json()["error"] == "SESSION_NOT_FOUND"

    def test_unknown_session(self, client):
        """Unknown session ids map to 404."""
        resp = client.post("/api/v1/sessions/missing/events/pane-click")
        assert resp.status_code == 404

    def test_session_limit(self, client):
        """Opening past the limit returns 429."""
        for _ in range(3):
            client.post("/api/v1/sessions")
        resp = client.post("/api/v1/sessions")
        assert resp.status_code == 429
        assert resp.json()["details"] == {"limit": 3}

    def test_palette(self, client):
        """Palette lists drag sources and field types."""
        data = client.get("/api/v1/palette").json()
        assert data["drag_sources"] == ["Concept", "Asset", "Enum"]
        assert [t["value"] for t in data["field_types"]] == [
            "String",
            "Integer",
            "Boolean",
            "DateTime",
            "Double",
        ]


class TestCanvasEvents:
    """Canvas event endpoints."""

    def test_drop_creates_selected_node(self, client, session_url):
        """Drops create a node and select it."""
        resp = client.post(
            f"{session_url}/events/drop",
            json={"position": {"x": 100, "y": 100}, "kind": "Concept"},
        )
        data = resp.json()
        assert data["created_id"] == "2"
        assert data["active_id"] == "2"
        node = data["nodes"][1]
        assert node["data"] == {"label": "New Concept", "fields": []}
        assert node["position"] == {"x": 100.0, "y": 100.0}

    def test_drop_without_kind_ignored(self, client, session_url):
        """Drops with no payload create nothing."""
        data = client.post(
            f"{session_url}/events/drop", json={"position": {"x": 0, "y": 0}}
        ).json()
        assert data["created_id"] is None
        assert len(data["nodes"]) == 1

    def test_node_click_and_pane_click(self, client, session_url):
        """Clicks set and clear the selection."""
        data = client.post(f"{session_url}/events/node-click", json={"node_id": "1"}).json()
        assert data["active_id"] == "1"
        assert data["properties"]["info"] == "ID: 1 • Type: concerto"

        data = client.post(f"{session_url}/events/pane-click").json()
        assert data["active_id"] is None

    def test_connect_allows_duplicates(self, client, session_url):
        """Duplicate connections are kept."""
        body = {"source": "1", "target": "1", "sourceHandle": "s"}
        client.post(f"{session_url}/events/connect", json=body)
        data = client.post(f"{session_url}/events/connect", json=body).json()
        assert len(data["edges"]) == 2
        assert data["edges"][0]["sourceHandle"] == "s"

    def test_nodes_change_moves_node(self, client, session_url):
        """Position changes are stored."""
        data = client.post(
            f"{session_url}/events/nodes-change",
            json={"changes": [{"type": "position", "id": "1", "position": {"x": 5, "y": 7}}]},
        ).json()
        assert data["nodes"][0]["position"] == {"x": 5.0, "y": 7.0}

    def test_edges_change_removes_edge(self, client, session_url):
        """Edge remove events delete the edge."""
        client.post(f"{session_url}/events/connect", json={"source": "1", "target": "1", "id": "e"})
        data = client.post(
            f"{session_url}/events/edges-change",
            json={"changes": [{"type": "remove", "id": "e"}]},
        ).json()
        assert data["edges"] == []

    def test_malformed_drop_rejected(self, client, session_url):
        """Missing position is a validation error."""
        resp = client.post(f"{session_url}/events/drop", json={"kind": "Concept"})
        assert resp.status_code == 422

    @pytest.mark.parametrize(
        "change",
        [
            {"type": "position", "id": "1", "position": {"x": 1}},
            {"type": "dimensions", "id": "1", "dimensions": "big"},
            {"type": "resize", "id": "1"},
            {"id": "1"},
        ],
    )
    def test_malformed_node_change_rejected(self, client, session_url, change):
        """Badly shaped node changes are validation errors and change nothing."""
        resp = client.post(f"{session_url}/events/nodes-change", json={"changes": [change]})
        assert resp.status_code == 422
        assert client.get(session_url).json()["nodes"][0]["position"] == {"x": 250.0, "y": 100.0}

    def test_malformed_edge_change_rejected(self, client, session_url):
        """Edge changes must name a known type."""
        resp = client.post(
            f"{session_url}/events/edges-change",
            json={"changes": [{"type": "position", "id": "e"}]},
        )
        assert resp.status_code == 422

    def test_drag_keeps_dangling_edge(self, client, session_url):
        """Dragging a node keeps edges to nodes the store does not hold."""
        client.post(f"{session_url}/events/connect", json={"source": "1", "target": "99", "id": "e"})
        data = client.post(
            f"{session_url}/events/nodes-change",
            json={
                "changes": [
                    {"type": "position", "id": "1", "position": {"x": 3, "y": 4}, "dragging": True}
                ]
            },
        ).json()
        assert [e["id"] for e in data["edges"]] == ["e"]


class TestProperties:
    """Properties panel endpoints."""

    def test_edit_flow(self, client, session_url):
        """Drop, add, rename, retype, remove, deselect."""
        client.post(
            f"{session_url}/events/drop",
            json={"position": {"x": 100, "y": 100}, "kind": "Concept"},
        )

        data = client.post(f"{session_url}/properties/fields").json()
        assert data["nodes"][1]["data"]["fields"] == [{"type": "String", "name": "newProp"}]

        data = client.patch(
            f"{session_url}/properties/fields/0", json={"key": "name", "value": "age"}
        ).json()
        assert data["nodes"][1]["data"]["fields"] == [{"type": "String", "name": "age"}]

        data = client.patch(
            f"{session_url}/properties/fields/0", json={"key": "type", "value": "Integer"}
        ).json()
        assert data["nodes"][1]["data"]["fields"] == [{"type": "Integer", "name": "age"}]
        assert len(data["nodes"][0]["data"]["fields"]) == 3

        data = client.delete(f"{session_url}/properties/fields/0").json()
        assert data["nodes"][1]["data"]["fields"] == []

        client.post(f"{session_url}/events/pane-click")
        data = client.post(f"{session_url}/properties/fields").json()
        assert data["nodes"][1]["data"]["fields"] == []
        assert len(data["nodes"][0]["data"]["fields"]) == 3

    def test_rename(self, client, session_url):
        """Label edits apply to the selected node."""
        client.post(f"{session_url}/events/node-click", json={"node_id": "1"})
        data = client.put(f"{session_url}/properties/label", json={"label": "Customer"}).json()
        assert data["nodes"][0]["data"]["label"] == "Customer"
        assert data["properties"]["label"] == "Customer"

    def test_read_properties(self, client, session_url):
        """The panel reports the hint when nothing is selected."""
        data = client.get(f"{session_url}/properties").json()
        assert data["selected"] is False
        assert data["info"] == "Click a node to edit properties."

    def test_bad_field_key_rejected(self, client, session_url):
        """Only type and name are editable attributes."""
        client.post(f"{session_url}/events/node-click", json={"node_id": "1"})
        resp = client.patch(
            f"{session_url}/properties/fields/0", json={"key": "required", "value": "x"}
        )
        assert resp.status_code == 422
