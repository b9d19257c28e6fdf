# SPDX-License-Identifier: MIT
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, NamedTuple

if TYPE_CHECKING:
    from .typings import CursorType, Document

MAX_WRITE_BATCH_SIZE = 1000


class Reply(NamedTuple):
    """A single server reply, as handed over by the decoding layer."""

    cursor_id: int
    number_returned: int
    documents: list[Document]

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> Reply:
        """Build a Reply from a decoded OP_MSG body.

        Cursor replies (find, aggregate, getMore) carry their documents in
        `firstBatch` or `nextBatch`. Anything else is a command reply and
        becomes a reply holding just the body.

        Args:
            body (Mapping[str, Any]): The decoded reply body.

        Returns:
            Reply: The reply.
        """
        cursor: CursorType | None = body.get("cursor")
        if cursor is None or body.get("ok") != 1:
            return cls(cursor_id=0, number_returned=1, documents=[dict(body)])

        batch = cursor.get("firstBatch")
        if batch is None:
            batch = cursor.get("nextBatch", [])

        return cls(
            cursor_id=int(cursor.get("id", 0)),
            number_returned=len(batch),
            documents=list(batch),
        )


class CollectionOptions(NamedTuple):
    max_write_batch_size: int = MAX_WRITE_BATCH_SIZE
    ordered: bool = True
    acknowledged: bool = True
    validate: bool = True
    batch_size: int | None = None
