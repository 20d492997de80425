from __future__ import annotations

from typing import Generic, Hashable, TypeVar

from .position_index import PositionIndex

T = TypeVar("T", bound=Hashable)

ROOT = 0


def parent(index: int) -> int:
    return (index - 1) // 2


def left_child(index: int) -> int:
    return 2 * index + 1


def right_child(index: int) -> int:
    return 2 * index + 2


class IndexedHeap(Generic[T]):
    """Array-backed binary min-heap kept in lockstep with a PositionIndex.

    Elements are only ever compared with ``<``. Every move of an element
    between positions goes through ``_swap`` so the index always describes
    the current array.
    """

    def __init__(self) -> None:
        self._heap: list[T] = []
        self._index: PositionIndex[T] = PositionIndex()

    # ---------- heap operations ----------

    def _less(self, i: int, j: int) -> bool:
        return self._heap[i] < self._heap[j]

    def _swap(self, i: int, j: int) -> None:
        heap = self._heap
        first, second = heap[i], heap[j]
        heap[i], heap[j] = second, first
        self._index.swap(first, second, i, j)

    def _swim(self, index: int) -> int:
        while index > ROOT:
            up = parent(index)
            if not self._less(index, up):
                break
            self._swap(index, up)
            index = up
        return index

    def _sink(self, index: int) -> int:
        n = len(self._heap)
        while True:
            left = left_child(index)
            if left >= n:
                break
            right = right_child(index)
            smallest = left
            if right < n and self._less(right, left):
                smallest = right
            if not self._less(smallest, index):
                break
            self._swap(smallest, index)
            index = smallest
        return index

    def _remove_at(self, index: int) -> T | None:
        if not self._heap:
            return None
        last = len(self._heap) - 1
        removed = self._heap[index]
        self._swap(index, last)

        self._heap.pop()
        self._index.remove(removed, last)

        if index == last:
            return removed

        # The tail element now sits at index; it can only be out of place
        # in one direction.
        if self._sink(index) == index:
            self._swim(index)
        return removed

    def _heapify(self) -> None:
        for index in range(max(ROOT, len(self._heap) // 2 - 1), ROOT - 1, -1):
            self._sink(index)

    def _discard_appended(self, element: T, position: int) -> None:
        """Drop ``element`` appended at ``position`` after its swim failed midway.

        Completed swaps only moved it up its ancestor chain, so walking that
        chain back down restores every displaced ancestor.
        """
        path = [position]
        while self._heap[path[-1]] is not element:
            path.append(parent(path[-1]))
        for lower, upper in zip(reversed(path[:-1]), reversed(path[1:])):
            self._swap(lower, upper)
        self._heap.pop()
        self._index.remove(element, position)

    # ---------- audits ----------

    def is_min_heap(self, start_index: int = ROOT) -> bool:
        """Recursively check the min-heap property below ``start_index``.

        Positions past the end of the heap are vacuously valid.
        """
        if start_index < ROOT:
            raise ValueError(f"start_index must be non-negative, got {start_index}")
        n = len(self._heap)
        if start_index >= n:
            return True
        left = left_child(start_index)
        right = right_child(start_index)
        if left < n and self._less(left, start_index):
            return False
        if right < n and self._less(right, start_index):
            return False
        return self.is_min_heap(left) and self.is_min_heap(right)

    def is_index_consistent(self) -> bool:
        """Check that the position index describes the heap array exactly."""
        heap = self._heap
        for position, value in enumerate(heap):
            if position not in self._index.positions(value):
                return False
        for value, positions in self._index.items():
            if not positions:
                return False
            for position in positions:
                if position >= len(heap) or heap[position] != value:
                    return False
        return self._index.total_positions() == len(heap)
