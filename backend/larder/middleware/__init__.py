# Middleware package init
"""
Larder Backend — Middleware Package
====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

    1. Request ID first, so every later log line can carry it
    2. Access log records method, path, status and duration
    3. GZip and CORS are Starlette's stock middleware

    Responses pass back through the same chain in reverse, which is where
    the X-Request-ID header and the duration are added.
"""
