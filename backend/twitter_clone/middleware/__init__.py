# Middleware package init
"""
Twitter Clone Backend - Middleware Package
===========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request context] → [GZip] → [CORS] → Route Handler

    Request context: validated correlation ID for logs, error bodies and the
    response header, plus one access-log line with status and duration.

Authentication is not middleware: it is a router-level FastAPI dependency
(see twitter_clone.auth) so public routes simply do not declare it.
"""
