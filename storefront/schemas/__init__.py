"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (caller input, API responses)
    - Domain enums from core/ used for status fields
"""
