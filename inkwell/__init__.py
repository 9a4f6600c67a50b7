"""
Inkwell Backend - Application Package
=====================================

What: The blog API package (`uvicorn inkwell.main:app`).
Who:  Imported by uvicorn, pytest, and every module via `from inkwell...`.

Layers:

    ┌─────────────────────────────────────┐
    │        Routes (FastAPI routers)     │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │        Services (query logic)       │  ← Mongo queries, validation
    ├─────────────────────────────────────┤
    │        Schemas (Pydantic)           │  ← request/response contracts
    ├─────────────────────────────────────┤
    │        Database gateway (Motor)     │  ← one shared client, lazily opened
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
