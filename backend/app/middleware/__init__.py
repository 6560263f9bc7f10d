"""
Snapgram Backend — Middleware Package
=======================================

Cross-cutting request handling shared by every route.

Execution order for an incoming request:
    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

Responses travel back through the same chain in reverse, which is where the
request id header is attached and the access log line (status + duration) is
written.
"""
