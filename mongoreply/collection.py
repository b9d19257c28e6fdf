# SPDX-License-Identifier: MIT

"""A MongoDB collection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bson import ObjectId

from .core.errors import CursorIsEmptyError, DatabaseError
from .core.models import CollectionOptions, Reply
from .core.results import (
    ERROR,
    ERROR_CODE,
    ERROR_MESSAGE,
    OK,
    WRITE_CONCERN_ERROR,
    WRITE_ERRORS,
    OperationResult,
)
from .cursor import Cursor

if TYPE_CHECKING:
    from .core.typings import Document, Transport

logger = logging.getLogger(__name__)

_COMMAND_ERROR_FIELDS = (OK, ERROR_MESSAGE, ERROR, ERROR_CODE)


def merge_batches(replies: list[Reply], offsets: list[int]) -> list[Reply]:
    """Fold the errors of every batch into the first document.

    A result reads its status from its first document only, so the write
    errors of later batches are copied there with their `index` shifted to
    the position in the whole document list. The first command error and
    the first write concern error of any batch are copied too.

    Args:
        replies (list[Reply]): One reply per batch, in the order they were sent.
        offsets (list[int]): The position of each batch's first document.

    Returns:
        list[Reply]: The replies, the first one carrying every batch's errors.
    """  # noqa: E501
    batches = [OperationResult(reply) for reply in replies]
    if not any(batch.write_failure for batch in batches[1:]):
        return replies

    first = dict(batches[0].first)
    command_failed = batches[0].command_failure
    write_errors: list[Document] = []

    for batch, offset in zip(batches, offsets):
        write_errors.extend(
            {**error, "index": error.get("index", 0) + offset}
            for error in batch.write_errors
        )

        if batch.command_failure and not command_failed:
            first.update(
                {k: batch.first[k] for k in _COMMAND_ERROR_FIELDS if k in batch.first}
            )
            command_failed = True

        if batch.has_write_concern_errors and not first.get(WRITE_CONCERN_ERROR):
            first[WRITE_CONCERN_ERROR] = batch.write_concern_error

    if write_errors:
        first[WRITE_ERRORS] = write_errors

    head = replies[0]
    return [head._replace(documents=[first, *head.documents[1:]]), *replies[1:]]


class Collection:
    """A MongoDB collection."""

    def __init__(
        self,
        transport: Transport,
        db: str,
        name: str,
        options: CollectionOptions | None = None,
    ) -> None:
        """Create a new Collection instance.

        Args:
            transport (Transport): The transport to send commands with.
            db (str): The name of the database.
            name (str): The name of the collection.
            options (CollectionOptions | None, optional): The collection options.
                Uses the defaults if None. Defaults to None.
        """
        self._transport = transport
        self._db = db
        self._name = name
        self._options = options or CollectionOptions()

    def __repr__(self) -> str:
        """Get the string representation of the collection."""
        return f"<Collection {self._db}.{self._name}>"

    @property
    def options(self) -> CollectionOptions:
        """The options the collection was created with."""
        return self._options

    async def _send_and_wait(self, command: Document) -> Document:
        command["$db"] = self._db
        logger.debug("> %s", command)
        body = await self._transport.send_and_wait(command)
        logger.debug("< %s", body)
        return body

    async def _command(self, command: Document) -> Reply:
        return Reply.from_body(await self._send_and_wait(command))

    async def _read(self, command: Document) -> Reply:
        body = await self._send_and_wait(command)

        # a cursor reply keeps its status out of the documents
        if body.get("ok") != 1:
            raise DatabaseError(body)
        return Reply.from_body(body)

    async def _send(self, command: Document) -> OperationResult:
        command["$db"] = self._db
        command["writeConcern"] = {"w": 0}
        logger.debug("> %s (unacknowledged)", command)
        await self._transport.send(command)
        return OperationResult()

    async def drop(self) -> None:
        """Drop the collection.

        Raises:
            DatabaseError: If the operation fails.
        """
        result = OperationResult(await self._command({"drop": self._name}))

        if not result.successful:
            raise DatabaseError(result.first)

    async def insert_many(self, documents: list[Document]) -> OperationResult:
        """Insert one or more documents.

        Documents without an `_id` get a new ObjectId. The documents are sent
        in batches of at most `max_write_batch_size`, one reply per batch.
        Ordered inserts stop after the first failing batch, unordered inserts
        send every batch. Errors of every batch are reported on the first
        document of the result, see `merge_batches`.

        Args:
            documents (list[Document]): The documents to insert.

        Raises:
            WriteFailure: If a batch fails and the collection validates writes.

        Returns:
            OperationResult: The result, made of one reply per batch that was sent.
        """  # noqa: E501
        for document in documents:
            document.setdefault("_id", ObjectId())

        size = self._options.max_write_batch_size
        replies: list[Reply] = []
        offsets: list[int] = []

        for idx in range(0, len(documents), size):
            command: Document = {
                "insert": self._name,
                "documents": documents[idx : idx + size],
                "ordered": self._options.ordered,
            }

            if not self._options.acknowledged:
                await self._send(command)
                continue

            reply = await self._command(command)
            replies.append(reply)
            offsets.append(idx)

            if self._options.ordered and OperationResult(reply).write_failure:
                logger.debug("stopping after failed batch at %d", idx)
                break

        result = OperationResult(merge_batches(replies, offsets))
        if self._options.validate:
            result.validate()
        return result

    async def insert_one(self, document: Document) -> OperationResult:
        """Insert a single document.

        Args:
            document (Document): The document to insert.

        Returns:
            OperationResult: The result.
        """
        return await self.insert_many([document])

    async def delete(self, q: Document, *, limit: int = 0) -> OperationResult:
        """Delete one or more documents.

        Args:
            q (Document): The query that matches documents to delete.
            limit (int, optional): The number of matching documents to delete.
                Specify 0 to delete all matching documents. Defaults to 0.

        Raises:
            WriteFailure: If the delete fails and the collection validates writes.

        Returns:
            OperationResult: The result. Its `written_count` is the number of documents deleted.
        """  # noqa: E501
        command: Document = {
            "delete": self._name,
            "deletes": [
                {
                    "q": q,
                    "limit": limit,
                },
            ],
            "ordered": self._options.ordered,
        }

        if not self._options.acknowledged:
            return await self._send(command)

        result = OperationResult(await self._command(command))
        if self._options.validate:
            result.validate()
        return result

    async def delete_one(self, q: Document) -> OperationResult:
        """Delete a single document.

        Args:
            q (Document): The query that matches the document to delete.

        Returns:
            OperationResult: The result.
        """
        return await self.delete(q, limit=1)

    async def find(
        self,
        q: Document,
        skip: int | None = None,
        limit: int = 0,
    ) -> Cursor:
        """Select documents from the collection.

        Args:
            q (Document): The query that matches documents to find.
            skip (int | None, optional): The number of documents to skip. Defaults to None.
            limit (int, optional): The maximum number of documents to return. Defaults to 0.

        Raises:
            DatabaseError: If the server rejects the query.

        Returns:
            Cursor: The cursor to iterate over the documents.
        """  # noqa: E501
        doc: Document = {
            "find": self._name,
            "filter": q,
            "limit": limit,
        }

        if skip is not None:
            doc["skip"] = skip

        if self._options.batch_size is not None:
            doc["batchSize"] = self._options.batch_size

        return Cursor(self, await self._read(doc))

    async def find_one(self, q: Document) -> Document | None:
        """Select a single document from the collection.

        Args:
            q (Document): The query that matches the document to find.

        Returns:
            Document | None: The document if found, otherwise None.
        """
        cursor = await self.find(q, limit=1)
        try:
            return await cursor.next()
        except CursorIsEmptyError:
            return None

    async def _get_more(self, cursor_id: int) -> Reply:
        command: Document = {
            "getMore": cursor_id,
            "collection": self._name,
        }

        if self._options.batch_size is not None:
            command["batchSize"] = self._options.batch_size

        return await self._read(command)
