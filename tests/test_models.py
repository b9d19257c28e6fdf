from bson.int64 import Int64

from mongoreply.core.models import MAX_WRITE_BATCH_SIZE, CollectionOptions, Reply


def test_command_body_becomes_single_document() -> None:
    body = {"n": 1, "ok": 1.0}
    reply = Reply.from_body(body)

    assert reply == Reply(cursor_id=0, number_returned=1, documents=[body])


def test_first_batch() -> None:
    reply = Reply.from_body(
        {
            "cursor": {
                "firstBatch": [{"a": 1}, {"a": 2}],
                "id": Int64(99),
                "ns": "data.people",
            },
            "ok": 1.0,
        }
    )

    assert reply.cursor_id == 99
    assert reply.number_returned == 2
    assert reply.documents == [{"a": 1}, {"a": 2}]


def test_next_batch() -> None:
    reply = Reply.from_body(
        {
            "cursor": {"nextBatch": [{"a": 3}], "id": Int64(0), "ns": "data.people"},
            "ok": 1,
        }
    )

    assert reply == Reply(cursor_id=0, number_returned=1, documents=[{"a": 3}])


def test_failed_cursor_reply_keeps_body() -> None:
    body = {"ok": 0.0, "errmsg": "cursor not found", "code": 43, "cursor": {}}
    reply = Reply.from_body(body)

    assert reply.cursor_id == 0
    assert reply.documents == [body]


def test_default_options() -> None:
    options = CollectionOptions()

    assert options.max_write_batch_size == MAX_WRITE_BATCH_SIZE
    assert options.ordered
    assert options.acknowledged
    assert options.validate
    assert options.batch_size is None
