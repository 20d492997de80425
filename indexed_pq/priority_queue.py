from __future__ import annotations

from collections.abc import Sized
from typing import Hashable, Iterable, Sequence, TypeVar

from .heap import ROOT, IndexedHeap

T = TypeVar("T", bound=Hashable)


class PriorityQueue(IndexedHeap[T]):
    """Min priority queue with O(log n) removal of arbitrary elements.

    Alongside the heap array, a map from value to the positions holding
    that value gives O(1) ``contains`` and lets ``remove`` locate its
    target without a linear scan. Elements must be hashable, and their
    hash/equality must agree with their ordering.

    ``None`` is never stored. ``add(None)`` raises ``ValueError`` while
    ``contains(None)`` and ``remove(None)`` simply return ``False``.
    """

    def __init__(self, capacity_hint: int = 1) -> None:
        if capacity_hint < 0:
            raise ValueError(f"capacity_hint must be non-negative, got {capacity_hint}")
        super().__init__()
        self.capacity_hint = capacity_hint

    @classmethod
    def from_sequence(cls, elements: Sequence[T]) -> "PriorityQueue[T]":
        """Build a queue in O(n) by heapifying ``elements`` in place order."""
        if any(element is None for element in elements):
            raise ValueError("PriorityQueue does not accept None elements")
        queue = cls(len(elements))
        for position, element in enumerate(elements):
            queue._index.add(element, position)
            queue._heap.append(element)
        queue._heapify()
        return queue

    @classmethod
    def from_iterable(cls, elements: Iterable[T]) -> "PriorityQueue[T]":
        """Build a queue in O(n log n) by adding elements one at a time."""
        queue = cls(len(elements) if isinstance(elements, Sized) else 1)
        for element in elements:
            queue.add(element)
        return queue

    def __len__(self) -> int:
        return self.size()

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __contains__(self, element: object) -> bool:
        return self.contains(element)

    def __str__(self) -> str:
        return str(self._heap)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._heap!r})"

    def size(self) -> int:
        return len(self._heap)

    def is_empty(self) -> bool:
        return self.size() == 0

    def clear(self) -> None:
        self._heap.clear()
        self._index.clear()

    def peek(self) -> T | None:
        if self.is_empty():
            return None
        return self._heap[ROOT]

    def poll(self) -> T | None:
        return self._remove_at(ROOT)

    def contains(self, element: object) -> bool:
        if element is None:
            return False
        return element in self._index

    def add(self, element: T) -> None:
        if element is None:
            raise ValueError("PriorityQueue does not accept None elements")
        position = len(self._heap)
        # Index first: an unhashable element fails here with the heap untouched.
        self._index.add(element, position)
        self._heap.append(element)
        try:
            self._swim(position)
        except Exception:
            self._discard_appended(element, position)
            raise

    def remove(self, element: T | None) -> bool:
        if element is None:
            return False
        position = self._index.lookup_any(element)
        if position is None:
            return False
        self._remove_at(position)
        return True
