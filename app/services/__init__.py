# Services package init
"""
DocStore API — Services Layer
==============================

What:  Data-access layer sitting between routes (HTTP) and Firestore.
How:   Injected into routes via FastAPI's dependency injection
       (app.services.firestore_service.get_firestore_service).

Service Inventory:
    - FirestoreService: CRUD and query passthroughs over the Firestore async client
"""
