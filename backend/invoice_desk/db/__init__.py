"""Database Infrastructure - SQLAlchemy declarative Base.

Invariants:
    - All ORM models share one metadata (db/base.py)
"""
