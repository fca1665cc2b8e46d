"""Boundary Protocols — contract between the services and the storage shell.

Invariants:
    - Services NEVER look storage up globally; a StorageHandle is passed in at construction
    - session() yields one AsyncSession = one unit of work; uncommitted work is
      rolled back when the context exits
    - Storage faults leave session() only as StorageFailure

Design Decisions:
    - Protocol over ABC: structural subtyping, so test doubles need no inheritance
"""

from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class StorageHandle(Protocol):
    """Capability to open transactional sessions on the relational store."""

    def session(self) -> AbstractAsyncContextManager["AsyncSession"]: ...

    async def health_check(self) -> bool: ...
