# Middleware package init
"""
DocStore API — Middleware Package
==================================

Middleware Chain (request direction):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

Request ID runs first so the access log line carries the correlation ID;
the response passes back through the same chain in reverse.
"""
