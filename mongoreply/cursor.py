# SPDX-License-Identifier: MIT

"""A MongoDB cursor."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .core.errors import CursorIsEmptyError
from .core.results import OperationResult

if TYPE_CHECKING:
    from .collection import Collection
    from .core.models import Reply
    from .core.typings import Document


class Cursor:
    """A MongoDB cursor."""

    def __init__(self, collection: Collection, reply: Reply) -> None:
        """Create a new Cursor instance. This should not be called directly.

        Args:
            collection (Collection): The collection the cursor belongs to.
            reply (Reply): The first batch of the find operation.
        """
        self._collection = collection
        self._replies: list[Reply] = [reply]
        self._batch: list[Document] = list(reply.documents)

    def __aiter__(self) -> Cursor:
        """Get the cursor as an async iterator."""
        return self

    async def __anext__(self) -> Document:
        """Get the next document from the cursor."""
        try:
            return await self.next()
        except CursorIsEmptyError as e:
            raise StopAsyncIteration from e

    def __repr__(self) -> str:
        """Get the string representation of the cursor."""
        collection = self._collection
        return f"<Cursor {collection._db}.{collection._name}#{self.cursor_id}>"

    @property
    def cursor_id(self) -> int:
        """The id of the server cursor, 0 once it is exhausted."""
        return self._replies[-1].cursor_id

    @property
    def result(self) -> OperationResult:
        """The result of all batches received so far."""
        return OperationResult(self._replies)

    async def next(self) -> Document:
        """Get the next document from the cursor.

        Raises:
            CursorIsEmptyError: If there are no more documents in the cursor.

        Returns:
            Document: The next document.
        """
        while not self._batch:
            if not self.cursor_id:
                raise CursorIsEmptyError

            reply = await self._collection._get_more(self.cursor_id)
            self._replies.append(reply)
            self._batch = list(reply.documents)

        return self._batch.pop(0)

    async def to_result(self) -> OperationResult:
        """Fetch every remaining batch.

        Returns:
            OperationResult: The result of all batches, one reply per batch.
        """
        while self.cursor_id:
            reply = await self._collection._get_more(self.cursor_id)
            self._replies.append(reply)
            self._batch.extend(reply.documents)

        return self.result
