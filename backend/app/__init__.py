"""
Markpad Backend — Application Package Initializer
===================================================

Personal notes and bookmarks API.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, auth dependency
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← tags, queries, metadata, CRUD rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes stay thin; services can be tested with a mocked session and no HTTP.
"""

__version__ = "1.0.0"
