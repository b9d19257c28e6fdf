# SPDX-License-Identifier: MIT

"""Interpretation of the replies returned for a single operation."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from numbers import Number
from typing import TYPE_CHECKING, Any, TypeVar, Union

from .errors import WriteFailure
from .models import Reply

if TYPE_CHECKING:
    from .typings import Document

T = TypeVar("T", bound="WriteResult")

logger = logging.getLogger(__name__)

N = "n"
"""The number of documents affected by a write."""

OK = "ok"
"""The status field of a command reply."""

ERROR = "$err"
"""The error message field of legacy replies."""

ERROR_MESSAGE = "errmsg"
"""The error message field of command replies."""

ERROR_CODE = "code"

WRITE_ERRORS = "writeErrors"

WRITE_CONCERN_ERROR = "writeConcernError"

Replies = Union[Reply, Sequence[Reply], None]


def _is_ok(value: Any) -> bool:
    # bool is a Number subclass, but servers never send it for `ok`
    if isinstance(value, bool) or not isinstance(value, Number):
        return False
    return value == 1


class OperationResult:
    """The outcome of one logical operation, built from its server replies.

    A result with no replies stands for an unacknowledged write: every
    count is zero, there are no documents and it is always successful.
    """

    def __init__(self, replies: Replies = None) -> None:
        """Create a new OperationResult instance.

        Args:
            replies (Reply | Sequence[Reply] | None, optional): The replies.
                A single reply is treated as a one element sequence.
                Defaults to None, an unacknowledged write.
        """
        if replies is None:
            self._replies: tuple[Reply, ...] = ()
        elif isinstance(replies, Reply):
            self._replies = (replies,)
        else:
            self._replies = tuple(replies)

    def __repr__(self) -> str:
        """Get the string representation of the result."""
        return f"<OperationResult documents={self.documents!r}>"

    def __iter__(self) -> Iterator[Document]:
        """Iterate over the documents in the replies."""
        return self.each()

    @property
    def replies(self) -> tuple[Reply, ...]:
        """The wrapped replies."""
        return self._replies

    @property
    def acknowledged(self) -> bool:
        """Whether the server replied at all."""
        return bool(self._replies)

    @property
    def multiple(self) -> bool:
        """Whether the result is made of more than one reply."""
        return len(self._replies) > 1

    @property
    def cursor_id(self) -> int:
        """The cursor id of the last reply, 0 if there is no cursor."""
        if not self.acknowledged:
            return 0
        return self._replies[-1].cursor_id

    @property
    def documents(self) -> list[Document]:
        """All documents of all replies, in order."""
        if not self.acknowledged:
            return []
        return [document for reply in self._replies for document in reply.documents]

    def each(self) -> Iterator[Document]:
        """Get a new iterator over the documents.

        Returns:
            Iterator[Document]: The iterator.
        """
        return iter(self.documents)

    @property
    def reply(self) -> Reply | None:
        """The first reply, or None if the result is unacknowledged."""
        if not self.acknowledged:
            return None
        return self._replies[0]

    @cached_property
    def first(self) -> Document:
        """The first document, where the server reports command status."""
        documents = self.documents
        return documents[0] if documents else {}

    @property
    def returned_count(self) -> int:
        """The number of documents the server returned."""
        if not self.acknowledged:
            return 0
        if self.multiple:
            return sum(reply.number_returned for reply in self._replies)
        return self._replies[0].number_returned

    @property
    def written_count(self) -> int:
        """The number of documents the server wrote."""
        if not self.acknowledged:
            return 0
        if self.multiple:
            # one `n` per batch, each in its own document
            return sum(document.get(N) or 0 for document in self.documents)
        return self.first.get(N) or 0

    n = written_count

    @property
    def successful(self) -> bool:
        """Whether the command succeeded. Unacknowledged writes always do."""
        if not self.acknowledged:
            return True
        return _is_ok(self.first.get(OK))

    @property
    def command_failure(self) -> bool:
        """Whether the server rejected the command itself."""
        return self.acknowledged and (not self.successful or self._errors)

    @property
    def _errors(self) -> bool:
        first = self.first
        message = first.get(ERROR_MESSAGE)
        if message is None:
            message = first.get(ERROR)
        # 0 and "" still count as present
        return message is not None and first.get(ERROR_CODE) is not None

    @property
    def write_errors(self) -> list[Document]:
        """The per-document write errors of the first document."""
        return self.first.get(WRITE_ERRORS) or []

    @property
    def has_write_errors(self) -> bool:
        """Whether the first document reports failed document writes."""
        return self.acknowledged and bool(self.write_errors)

    @property
    def write_concern_error(self) -> Document:
        """The write concern error of the first document."""
        return self.first.get(WRITE_CONCERN_ERROR) or {}

    @property
    def has_write_concern_errors(self) -> bool:
        """Whether the requested write concern was not satisfied."""
        return self.acknowledged and bool(self.write_concern_error)

    @property
    def write_failure(self) -> bool:
        """Whether any of the command, write or write concern checks failed."""
        return self.acknowledged and (
            self.command_failure
            or self.has_write_errors
            or self.has_write_concern_errors
        )

    def validate(self) -> OperationResult:
        """Check the result for errors.

        Raises:
            WriteFailure: If the write failed. The error carries the first document.

        Returns:
            OperationResult: The result itself. Useful for chaining and inline usage.
        """
        if self.write_failure:
            logger.debug("write failure: %s", self.first)
            raise WriteFailure(self.first)
        return self


@dataclass
class WriteResult:
    """A summary of a write operation."""

    ok: bool
    n: int
    """The number of documents written."""

    write_errors: list[Document] = field(default_factory=list)
    """A list of write errors."""

    write_concern_error: Document = field(default_factory=dict)
    """A write concern error."""

    acknowledged: bool = True

    @classmethod
    def from_result(cls: type[T], result: OperationResult, **kwargs: Any) -> T:
        return cls(
            ok=result.successful,
            n=result.written_count,
            write_errors=result.write_errors,
            write_concern_error=result.write_concern_error,
            acknowledged=result.acknowledged,
            **kwargs,
        )


@dataclass
class InsertResult(WriteResult):
    """The result of an insert operation."""

    inserted_ids: list[Any] = field(default_factory=list)


@dataclass
class DeleteResult(WriteResult):
    """The result of a delete operation."""

    @property
    def deleted_count(self) -> int:
        """The number of documents deleted."""
        return self.n
