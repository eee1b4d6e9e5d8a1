"""Database Definitions — declarative Base and the metadata bootstrap.

Invariants:
    - Every ORM model inherits from db.base.Base
    - Engines and sessions live in infrastructure/database.py, not here

Design Decisions:
    - create_all only for local development; Alembic owns production schemas
"""
