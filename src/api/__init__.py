"""FastAPI host for the knowledge search interface.

Endpoints:
    - GET /health: Service health status
    - GET /: Knowledge search page (mounted by NiceGUI)
"""

from src.api.app import app, create_app

__all__ = ["app", "create_app"]
