"""Test package for Knowledge Search.

Structure:
    - unit/: Individual components of the session state machine
    - integration/: Whole-session journeys and the FastAPI host

Collaborators are in-memory fakes; no network access is needed.
Leverages pytest with pytest-asyncio and pytest-check for soft assertions.
"""
