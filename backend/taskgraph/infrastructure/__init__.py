"""Infrastructure Layer — database engine and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from core/ domain logic, except the error types
    - All driver exceptions mapped to DatabaseError

Design Decisions:
    - Thin wrappers over raw clients (single responsibility)
"""
