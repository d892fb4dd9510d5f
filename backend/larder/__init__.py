"""
Larder Backend — Application Package Initializer
=================================================

What: Marks the `larder` directory as a Python package.
Who:  Used by uvicorn (`larder.main:app`), `python -m larder`, and pytest.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │  Routes + Dependencies (API Layer)  │  ← HTTP concerns, identity injection
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← validation, orchestration, error kinds
    ├─────────────────────────────────────┤
    │   Repository + Models (Persistence) │  ← async SQLAlchemy, one statement per call
    ├─────────────────────────────────────┤
    │   External clients                  │  ← Tesseract, Rekognition, Spoonacular
    └─────────────────────────────────────┘

    Every collaborator is built once in `create_app()` and stored on
    `app.state`, so tests swap in fakes without touching module globals.
"""

__version__ = "1.0.0"
