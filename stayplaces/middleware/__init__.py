# Middleware package init
"""
StayPlaces API: Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs, error bodies and the response header
    2. Logging: one access line with status and duration
"""
