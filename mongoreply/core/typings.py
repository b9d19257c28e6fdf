# SPDX-License-Identifier: MIT
from __future__ import annotations

from typing import Any, Protocol, TypedDict

Document = dict[str, Any]


class CursorType(TypedDict, total=False):
    id: int
    ns: str
    firstBatch: list[Document]
    nextBatch: list[Document]


class Transport(Protocol):
    """Anything that can deliver a command and hand back the decoded reply body."""

    async def send(self, command: Document) -> None:
        """Send a command without waiting for a reply."""

    async def send_and_wait(self, command: Document) -> Document:
        """Send a command and wait for the matching reply body."""
