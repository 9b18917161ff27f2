"""API Layer — FastAPI routes, guards and error handlers.

Invariants:
    - Routes registered explicitly per service in main.py (no auto-discovery)
    - All endpoints return structured JSON responses

Design Decisions:
    - Thin routes delegate to services/
"""
