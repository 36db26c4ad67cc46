"""
Concerto Editor - backend for a visual schema concept editor.

Concepts are nodes on a canvas with an ordered list of typed fields;
connections link concepts. The browser canvas reports user gestures to
this service and renders the node and connection collections it returns.

Usage:
    uvicorn concerto_editor.app:app --port 8082
"""

__version__ = "1.0.0"
