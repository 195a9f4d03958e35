"""
CampusCare Backend — Middleware Package
========================================

Middleware chain (outermost first):
    Request → [Request ID] → [Rate Limit] → [Logging] → [GZip] → [CORS] → Route

The request ID is assigned first so a 429 from the rate limiter and the
access log line both carry it.
"""
