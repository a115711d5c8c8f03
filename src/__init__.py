"""Knowledge Search - question answering over uploaded PDF documents.

Combines a single-flight session state machine with NiceGUI for
visualization, httpx for the answering service, and Pydantic for data
validation.

Components:
    - session: Documents, upload progress, query submission and history
    - agent: Configuration and HTTP access to the answering service
    - parsing: PDF filtering and page counts
    - ui: Web interface bound to a session
    - api: FastAPI host for the interface
    - models: Session and collaborator schemas
"""

__version__ = "0.1.0"
