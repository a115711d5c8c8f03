"""Access to the external knowledge search service.

Responsibilities:
    - Session configuration loaded from the environment
    - HTTP transport for PDF uploads to the knowledge base
    - HTTP transport for questions to the answering agent

Maintains clean separation between the session state machine and the network.
"""

from src.agent.config import SessionConfig, get_session_config
from src.agent.client import AgentApiClient

__all__ = ["AgentApiClient", "SessionConfig", "get_session_config"]
