from __future__ import annotations

from typing import Generic, Hashable, Iterator, TypeVar

from sortedcontainers import SortedSet

T = TypeVar("T", bound=Hashable)


class PositionIndex(Generic[T]):
    """Maps each distinct heap value to the sorted set of positions holding it.

    Sets never stay empty: removing the last position of a value drops the
    value's entry altogether.
    """

    def __init__(self) -> None:
        self._positions: dict[T, SortedSet] = {}

    def __len__(self) -> int:
        return len(self._positions)

    def __contains__(self, value: object) -> bool:
        return value in self._positions

    def add(self, value: T, position: int) -> None:
        positions = self._positions.get(value)
        if positions is None:
            positions = SortedSet()
            self._positions[value] = positions
        positions.add(position)

    def remove(self, value: T, position: int) -> None:
        positions = self._positions[value]
        positions.discard(position)
        if not positions:
            del self._positions[value]

    def lookup_any(self, value: T) -> int | None:
        # Duplicates resolve to the highest position.
        positions = self._positions.get(value)
        if positions is None:
            return None
        return positions[-1]

    def swap(self, value_a: T, value_b: T, pos_a: int, pos_b: int) -> None:
        # value_a moves from pos_a to pos_b and value_b the other way round.
        # Equal values share one set, so remove both before adding either.
        set_a = self._positions[value_a]
        set_b = self._positions[value_b]
        set_a.discard(pos_a)
        set_b.discard(pos_b)
        set_a.add(pos_b)
        set_b.add(pos_a)

    def positions(self, value: T) -> tuple[int, ...]:
        positions = self._positions.get(value)
        return tuple(positions) if positions is not None else ()

    def total_positions(self) -> int:
        return sum(len(positions) for positions in self._positions.values())

    def items(self) -> Iterator[tuple[T, tuple[int, ...]]]:
        for value, positions in self._positions.items():
            yield value, tuple(positions)

    def clear(self) -> None:
        self._positions.clear()
