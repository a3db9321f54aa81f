import pytest
from markov_graph.models.ordered_map import OrderedMap


@pytest.fixture
def fruit_map():
    """Map with three distinct keys inserted in a known order."""
    return OrderedMap.from_pairs([("apple", 1), ("banana", 2), ("cherry", 3)])


def test_empty_map():
    m = OrderedMap()
    assert len(m) == 0
    assert list(m.items()) == []
    assert m.get("missing") is None
    assert not m.has("missing")


def test_insertion_order_preserved():
    m = OrderedMap()
    for key in ["z", "a", "m", "b"]:
        m.add(key, key.upper())
    m.insert("q", "Q")

    assert list(m.items()) == [
        ("z", "Z"), ("a", "A"), ("m", "M"), ("b", "B"), ("q", "Q")]
    assert list(m.keys()) == ["z", "a", "m", "b", "q"]
    assert list(m.values()) == ["Z", "A", "M", "B", "Q"]


def test_add_is_an_upsert():
    m = OrderedMap()
    m.add("k", 1)
    m.add("k", 2)

    assert len(m) == 1
    assert m.has("k")
    assert m.get("k") == 2


def test_add_keeps_original_position(fruit_map):
    fruit_map.add("apple", 10)
    assert list(fruit_map.keys()) == ["apple", "banana", "cherry"]
    assert fruit_map["apple"] == 10


def test_raw_insert_shadows_duplicate():
    m = OrderedMap()
    m.insert("k", "first")
    m.insert("k", "second")

    # Both entries are stored, but lookups see the first
    assert len(m) == 2
    assert m.get("k") == "first"
    assert m["k"] == "first"


def test_set_existing_key(fruit_map):
    assert fruit_map.set("banana", 20) is True
    assert fruit_map.get("banana") == 20


def test_set_missing_key_does_not_mutate(fruit_map):
    assert fruit_map.set("durian", 4) is False
    assert len(fruit_map) == 3
    assert not fruit_map.has("durian")


def test_set_only_touches_first_match():
    m = OrderedMap.from_pairs([("k", 1), ("k", 2)])
    m.set("k", 9)
    assert list(m.items()) == [("k", 9), ("k", 2)]


def test_get_default(fruit_map):
    assert fruit_map.get("durian", 0) == 0


def test_get_returns_copy():
    m = OrderedMap()
    m.add("words", ["the", "cat"])

    copied = m.get("words")
    copied.append("sat")

    assert m["words"] == ["the", "cat"]


def test_contains(fruit_map):
    assert "cherry" in fruit_map
    assert "durian" not in fruit_map


def test_indexed_read_missing_key_raises(fruit_map):
    with pytest.raises(KeyError):
        fruit_map["durian"]


def test_indexed_write_existing_key(fruit_map):
    fruit_map["cherry"] += 1
    assert fruit_map["cherry"] == 4


def test_indexed_write_missing_key_raises(fruit_map):
    with pytest.raises(KeyError):
        fruit_map["durian"] = 4
    assert len(fruit_map) == 3


def test_traversal_is_single_pass(fruit_map):
    items = fruit_map.items()
    assert next(items) == ("apple", 1)
    assert list(items) == [("banana", 2), ("cherry", 3)]

    # An exhausted traversal keeps yielding nothing
    assert list(items) == []
    assert next(items, None) is None

    # A fresh traversal starts over
    assert len(list(fruit_map)) == 3


def test_integer_keys():
    m = OrderedMap()
    m.add(2, 1)
    m.add(5, 1)
    m[2] += 1
    assert m.get(2) == 2
    assert m.get(5) == 1
    assert m.get(3) is None


def test_equality_and_repr():
    a = OrderedMap.from_pairs([("x", 1), ("y", 2)])
    b = OrderedMap.from_pairs([("x", 1), ("y", 2)])
    c = OrderedMap.from_pairs([("y", 2), ("x", 1)])

    assert a == b
    assert a != c
    assert repr(a) == "OrderedMap({'x': 1, 'y': 2})"
