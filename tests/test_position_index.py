from __future__ import annotations

from indexed_pq.position_index import PositionIndex


def test_lookup_any_returns_highest_position() -> None:
    index: PositionIndex[str] = PositionIndex()
    for position in (4, 0, 9, 2):
        index.add("x", position)

    assert index.lookup_any("x") == 9
    assert index.positions("x") == (0, 2, 4, 9)
    assert index.lookup_any("missing") is None


def test_remove_drops_empty_entries() -> None:
    index: PositionIndex[int] = PositionIndex()
    index.add(7, 0)
    index.add(7, 3)

    index.remove(7, 3)
    assert 7 in index
    index.remove(7, 0)
    assert 7 not in index
    assert len(index) == 0
    assert index.positions(7) == ()


def test_swap_distinct_values() -> None:
    index: PositionIndex[int] = PositionIndex()
    index.add(1, 0)
    index.add(2, 1)
    index.add(2, 4)

    index.swap(1, 2, 0, 4)

    assert index.positions(1) == (4,)
    assert index.positions(2) == (0, 1)
    assert index.total_positions() == 3


def test_swap_equal_values_shares_one_set() -> None:
    index: PositionIndex[int] = PositionIndex()
    index.add(5, 1)
    index.add(5, 2)

    index.swap(5, 5, 1, 2)
    assert index.positions(5) == (1, 2)

    index.swap(5, 5, 2, 2)
    assert index.positions(5) == (1, 2)


def test_clear_and_items() -> None:
    index: PositionIndex[str] = PositionIndex()
    index.add("a", 0)
    index.add("b", 1)
    assert dict(index.items()) == {"a": (0,), "b": (1,)}

    index.clear()
    assert len(index) == 0
    assert index.total_positions() == 0
