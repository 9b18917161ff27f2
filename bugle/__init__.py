"""Daily Bugle — content publishing platform split into four services.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
    - Services (identity, content, discussion, ads) share code, never process memory
"""
