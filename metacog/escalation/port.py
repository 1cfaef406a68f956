"""Collaboration port: how the oversight layer asks for a human.

This is the only thing metacog knows about human collaboration. Concrete
session services live outside the package and plug in by implementing
``CollaborationPort``; nothing under ``metacog`` imports one.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Protocol, runtime_checkable


@runtime_checkable
class CollaborationPort(Protocol):
    async def create_collaboration_session(
        self,
        session_name: str,
        description: str | None,
        participant_ids: Collection[str],
    ) -> None:
        """Open a review session; raise if the session cannot be created."""
        ...
