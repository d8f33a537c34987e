# Middleware package init
"""
Loop API — Middleware Package
===============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and error bodies
    2. Logging: Log request details with the generated request ID
    3. GZip / CORS: Applied by Starlette's built-in middleware

    Authentication is not middleware: it is a per-route dependency
    (loop_api.auth), because the public endpoints skip it.
"""
