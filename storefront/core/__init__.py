"""Core Layer — pure domain rules for inventory and order lifecycle.

Invariants:
    - Core never imports from services/, api/ or infrastructure/
    - Every function here is pure: no IO, no DB, no clock reads
"""
