"""
Twitter Clone Backend - Application Package
============================================

What: Marks the `twitter_clone` directory as a Python package.
Who:  Imported by uvicorn (`twitter_clone.main:app`), pytest and the services.

Architecture Note:
    The backend is split into layers:

    ┌─────────────────────────────────────┐
    │    Routes + Auth Gate (API Layer)   │  ← HTTP concerns, bearer token check
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Visibility-scoped queries
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never build SQL; services never touch HTTP objects.
"""

__version__ = "1.0.0"
