"""
Concerto Editor Test Suite.

This package contains:
- unit/: Unit tests for the editing core and session registry
- integration/: HTTP API tests through FastAPI's TestClient
"""
