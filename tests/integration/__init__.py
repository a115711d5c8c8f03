"""Integration tests for components working together as a system.

Coverage:
    - Full session journeys from upload to answer, failure and teardown
    - FastAPI host endpoints with real ASGI requests
"""
