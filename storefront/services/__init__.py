"""Service Layer — transactional operations over the Inventory Store and Order Ledger.

Invariants:
    - Every service receives its storage handle at construction
    - Each public method runs inside exactly one unit of work
"""
