"""
Foodbabes Backend: Application Package
========================================

What: HTTP API for the Foodbabes food-sharing and comment board.
Who:  Imported by uvicorn (`foodbabes.main:app`), Alembic and pytest.

Architecture Note:
    The backend is split into the same thin layers for every resource:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP status codes and shapes
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← validation, store calls
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database / Image Storage (I/O)    │  ← injected via app.state
    └─────────────────────────────────────┘

    Resources: food posts (with an uploaded image), comments (with likes)
    and users (registration, sessions, token authentication).
"""

__version__ = "1.0.0"
