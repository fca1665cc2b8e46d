"""Storefront Orders Package — order placement and inventory consistency service.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
