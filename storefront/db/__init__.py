"""Database Infrastructure — declarative Base shared by the ORM models.

Invariants:
    - Single async engine per storage handle
    - All sessions are async (AsyncSession)
"""
