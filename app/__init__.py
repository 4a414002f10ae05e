"""
DocStore API — Application Package Initializer
==============================================

What: Marks the `app` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend is two thin layers over the Firestore SDK:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   FirestoreService (Data Access)    │  ← SDK passthroughs, error translation
    ├─────────────────────────────────────┤
    │     Firebase App (Credentials)      │  ← One-time SDK initialization
    └─────────────────────────────────────┘

    Documents are plain dicts end to end; Firestore owns every invariant.
"""

__version__ = "1.0.0"
