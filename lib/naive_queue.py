from __future__ import annotations

import heapq
from typing import Any


class NaiveQueue:
    """heapq-backed baseline: O(log n) add/poll, O(n) remove and contains."""

    def __init__(self, elements: list[Any] | None = None) -> None:
        self.heap = list(elements or [])
        heapq.heapify(self.heap)

    # ---------- public API ----------

    def add(self, element: Any) -> None:
        if element is None:
            raise ValueError("NaiveQueue does not accept None elements")
        heapq.heappush(self.heap, element)

    def peek(self) -> Any | None:
        return self.heap[0] if self.heap else None

    def poll(self) -> Any | None:
        if not self.heap:
            return None
        return heapq.heappop(self.heap)

    def contains(self, element: Any) -> bool:
        if element is None:
            return False
        return element in self.heap

    def remove(self, element: Any) -> bool:
        if element is None:
            return False
        try:
            idx = self.heap.index(element)
        except ValueError:
            return False
        last = self.heap.pop()
        if idx < len(self.heap):
            self.heap[idx] = last
            heapq.heapify(self.heap)
        return True

    def size(self) -> int:
        return len(self.heap)

    def __len__(self) -> int:
        return len(self.heap)
