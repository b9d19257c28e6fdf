# SPDX-License-Identifier: MIT

"""mongoreply - Turns MongoDB server replies into operation results."""

__all__ = (
    "Collection",
    "CollectionOptions",
    "Cursor",
    "DatabaseError",
    "DeleteResult",
    "InsertResult",
    "OperationResult",
    "Reply",
    "WriteFailure",
    "WriteResult",
)

from .collection import Collection
from .core.errors import DatabaseError, WriteFailure
from .core.models import CollectionOptions, Reply
from .core.results import DeleteResult, InsertResult, OperationResult, WriteResult
from .cursor import Cursor
