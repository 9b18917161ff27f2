"""Infrastructure Layer — store handle, outbound HTTP clients, logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Every handle is constructed in an app lifespan and closed there; nothing connects on import
"""
