# SPDX-License-Identifier: MIT

"""Errors raised by mongoreply."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .typings import Document


class DatabaseError(Exception):
    """Exception raised when an error occurs with the database."""

    def __init__(self, error: Document) -> None:
        """Create a new DatabaseError instance.

        Args:
            error (Document): The error document.
        """
        super().__init__(error)
        self.error = error


class WriteFailure(DatabaseError):
    """Raised by `OperationResult.validate` when a write did not go through.

    The payload is the first document of the result. It holds whichever of
    the command error fields, `writeErrors` or `writeConcernError` tripped
    the check.
    """


class CursorIsEmptyError(Exception):
    """Raised when a cursor is empty."""

    msg = "Cursor is empty."
