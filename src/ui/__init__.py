"""NiceGUI interface - thin presentation layer over a KnowledgeSession.

Responsibilities:
    - Document sidebar with PDF upload, progress and delete
    - Conversation display with answers, sources and follow-ups
    - Suggested questions on an empty conversation
    - Error display and dismissal

Contains no session logic. Every user action is a call on the session object.
"""
