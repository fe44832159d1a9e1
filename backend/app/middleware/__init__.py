# Middleware package init
"""
Markpad Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation id for logs, error bodies and the response header
    2. Logging: one access line per request, using that id
    3. GZip / CORS: Starlette's stock middleware

    Responses pass back through the chain in reverse order, so the logging
    middleware sees the final status code and the request-id middleware
    stamps the header last.
"""
