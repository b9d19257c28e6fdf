from mongoreply import OperationResult, Reply, WriteFailure

# replies as the decoding layer hands them over, one per insert batch
batches = [
    {"n": 1000, "ok": 1.0},
    {
        "n": 499,
        "ok": 1.0,
        "writeErrors": [{"index": 3, "code": 11000, "errmsg": "E11000 duplicate key"}],
    },
]


def main() -> None:
    result = OperationResult([Reply.from_body(body) for body in batches])
    print(result.written_count)

    for body in batches:
        try:
            OperationResult(Reply.from_body(body)).validate()
        except WriteFailure as e:
            print(e.error["writeErrors"])


main()
