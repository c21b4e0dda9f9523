import base64

from passhash import weak_hash

EMPTY_SHA1 = "2jmj7l5rSw0yVb/vlWAYkK/YBwk="


def test_stable():
    assert weak_hash(["value"]) == weak_hash(["value"])


def test_none_hashes_empty_input():
    assert weak_hash() == EMPTY_SHA1
    assert weak_hash(None) == EMPTY_SHA1


def test_fixed_size():
    for value in ["", "x" * 10_000, {"a": [1, 2, 3]}, 0]:
        assert len(base64.b64decode(weak_hash(value))) == 20


def test_distinct_inputs():
    values = [["value"], ["value2"], "value", {"value": 1}, 1, 1.5, True, ""]
    assert len({weak_hash(v) for v in values}) == len(values)


def test_key_order_ignored():
    assert weak_hash({"a": 1, "b": 2}) == weak_hash({"b": 2, "a": 1})
