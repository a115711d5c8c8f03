"""Unit tests for individual components in isolation.

Coverage:
    - session/: Registry, progress simulator, history, controller, response parsing
    - agent/: Configuration and HTTP client (httpx MockTransport)
    - parsing/ and ui/: PDF helpers and display formatting
"""
