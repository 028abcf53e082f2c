"""
StayPlaces API: Application Package Initializer
================================================

What: Marks the `stayplaces` directory as a Python package.
Who:  Imported by uvicorn (`stayplaces.main:app`), pytest and every module.

Architecture Note:
    The service is a thin layered stack around a single JSON file:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (validation, media,      │  ← place operations
    │             list/search/mutate)     │
    ├─────────────────────────────────────┤
    │        Schemas (API contract)       │  ← Pydantic
    ├─────────────────────────────────────┤
    │   Repository (JSON file on disk)    │  ← full read / full write
    └─────────────────────────────────────┘

    Routes handle status codes and request parsing, services own the rules,
    and the repository is the only code that touches the places file.
"""

__version__ = "1.0.0"
