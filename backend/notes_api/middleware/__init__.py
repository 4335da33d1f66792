# Middleware package init
"""
Notes API — Middleware Package
===============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and error bodies
    2. Logging: Log method, path, status and duration with that ID
    3. CORS: Answer OPTIONS with 204, add cross-origin headers to the rest

    The order is reversed for responses, so the access log sees the final
    status including the 204 produced for preflight requests.
"""
