"""
Contacts API: Middleware Package
================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first, so every later log line and error body can include it
    - Logging measures the full downstream duration and the final status
    - CORS answers preflight requests before routing
"""
