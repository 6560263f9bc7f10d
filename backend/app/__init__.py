"""
Snapgram Backend — Application Package
========================================

A photo-sharing API: accounts with bearer-token auth, image posts, likes,
comments and mutual friendships.

Layers:
    ┌─────────────────────────────────────┐
    │   Routes (FastAPI routers)          │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services                          │  ← business rules
    ├─────────────────────────────────────┤
    │   Models & Schemas                  │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database                          │  ← async engine, session per request
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
