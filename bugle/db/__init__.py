"""Database Infrastructure — SQLAlchemy declarative base for the shared store.

Invariants:
    - One logical store shared by all services; each service only writes its own tables
"""
