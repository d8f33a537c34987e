"""
Loop API — Application Package Initializer
============================================

What: Server-side API of the Loop social network.

Architecture Note:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Auth dependencies (401 / 403)     │  ← bearer token, admin flag/role
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← one backend operation each
    ├─────────────────────────────────────┤
    │      Schemas (typed queries/API)    │  ← pydantic
    ├─────────────────────────────────────┤
    │   DataStore (hosted backend) │ Realtime │
    └─────────────────────────────────────┘

    The hosted backend owns every entity; this service never persists
    anything locally.
"""

__version__ = "1.0.0"
