"""Services Layer — store operations behind each service's routes.

Invariants:
    - Every function takes the AsyncSession it should use; none opens its own
    - Services raise BugleError subclasses; routes never translate store results
"""
