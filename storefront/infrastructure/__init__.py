"""Infrastructure Layer — storage session management and logging setup.

Invariants:
    - Infrastructure never imports from core/ domain rules except errors
    - All storage faults are mapped to StorageFailure before leaving this layer
"""
