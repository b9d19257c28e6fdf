from __future__ import annotations

import itertools
from typing import Any

import pytest
from bson.int64 import Int64

from mongoreply import Collection, CollectionOptions

Document = dict[str, Any]


def matches(document: Document, q: Document) -> bool:
    return all(document.get(key) == value for key, value in q.items())


class FakeTransport:
    """An in-memory server with a unique index on `_id`."""

    def __init__(self) -> None:
        self.data: dict[str, list[Document]] = {}
        self.cursors: dict[int, list[Document]] = {}
        self.commands: list[Document] = []
        self.unacknowledged: list[Document] = []
        self._ids = itertools.count(1000)

    async def send(self, command: Document) -> None:
        self.unacknowledged.append(command)
        self.handle(command)

    async def send_and_wait(self, command: Document) -> Document:
        self.commands.append(command)
        return self.handle(command)

    def handle(self, command: Document) -> Document:
        name = next(iter(command))
        handler = getattr(self, f"_{name}", None)
        if handler is None:
            return {"ok": 0.0, "errmsg": f"no such command: '{name}'", "code": 59}
        return handler(command)

    def _insert(self, command: Document) -> Document:
        coll = self.data.setdefault(command["insert"], [])
        n = 0
        write_errors: list[Document] = []

        for index, document in enumerate(command["documents"]):
            if any(existing["_id"] == document["_id"] for existing in coll):
                write_errors.append(
                    {
                        "index": index,
                        "code": 11000,
                        "errmsg": "E11000 duplicate key error",
                    }
                )
                if command.get("ordered", True):
                    break
                continue

            coll.append(dict(document))
            n += 1

        reply: Document = {"n": n, "ok": 1.0}
        if write_errors:
            reply["writeErrors"] = write_errors
        return reply

    def _delete(self, command: Document) -> Document:
        coll = self.data.setdefault(command["delete"], [])
        n = 0

        for spec in command["deletes"]:
            matched = [d for d in coll if matches(d, spec["q"])]
            if spec["limit"]:
                matched = matched[: spec["limit"]]
            for document in matched:
                coll.remove(document)
            n += len(matched)

        return {"n": n, "ok": 1.0}

    def _find(self, command: Document) -> Document:
        coll = self.data.get(command["find"], [])
        found = [d for d in coll if matches(d, command["filter"])]
        found = found[command.get("skip", 0) :]
        if command.get("limit"):
            found = found[: command["limit"]]

        batch, cursor_id = self._batch(found, command.get("batchSize"))
        return {
            "cursor": {
                "firstBatch": batch,
                "id": Int64(cursor_id),
                "ns": f"{command['$db']}.{command['find']}",
            },
            "ok": 1.0,
        }

    def _getMore(self, command: Document) -> Document:  # noqa: N802
        remaining = self.cursors.pop(command["getMore"], None)
        if remaining is None:
            return {"ok": 0.0, "errmsg": "cursor not found", "code": 43}

        batch, cursor_id = self._batch(remaining, command.get("batchSize"))
        return {
            "cursor": {
                "nextBatch": batch,
                "id": Int64(cursor_id),
                "ns": f"{command['$db']}.{command['collection']}",
            },
            "ok": 1.0,
        }

    def _drop(self, command: Document) -> Document:
        if self.data.pop(command["drop"], None) is None:
            return {"ok": 0.0, "errmsg": "ns not found", "code": 26}
        return {"ok": 1.0}

    def _batch(
        self, documents: list[Document], batch_size: int | None
    ) -> tuple[list[Document], int]:
        if batch_size is None or len(documents) <= batch_size:
            return documents, 0

        cursor_id = next(self._ids)
        self.cursors[cursor_id] = documents[batch_size:]
        return documents[:batch_size], cursor_id


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def collection(transport: FakeTransport) -> Collection:
    return Collection(transport, "data", "people")


@pytest.fixture()
def make_collection(transport: FakeTransport):
    def make(**options: Any) -> Collection:
        return Collection(transport, "data", "people", CollectionOptions(**options))

    return make
