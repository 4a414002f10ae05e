# Routes package init
"""
DocStore API — API Routes Package
==================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - root.py:    GET  /                  (greeting)
    - users.py:   GET/POST /users, GET/PUT/DELETE /users/{id},
                  POST /users/query
    - health.py:  GET  /health            (Firestore connectivity)

Routes are thin: extract path/body, call FirestoreService, shape the response.
"""
