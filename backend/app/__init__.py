"""
Gallery API — Application Package Initializer
===============================================

What: Marks the `app` directory as a Python package.
Why:  Enables module imports like `from app.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend is a thin layered service over two external systems:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     ProjectService (Orchestration)  │  ← upload → save, destroy → delete
    ├──────────────────┬──────────────────┤
    │  ProjectStore    │  AssetService    │  ← MongoDB (motor) / Cloudinary
    └──────────────────┴──────────────────┘

    Routes never talk to MongoDB or Cloudinary directly; both clients are
    built once at startup and injected through FastAPI dependencies.
"""

__version__ = "1.0.0"
