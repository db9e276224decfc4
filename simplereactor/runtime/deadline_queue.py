# simplereactor/runtime/deadline_queue.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import heapq
from typing import Any, Dict, List, Optional, Tuple

from simplereactor.core.components import PollableRegistration
from simplereactor.core.errors import InvariantViolationError, QueueEmptyError

Bucket = Dict[int, PollableRegistration]


class DeadlineQueue:
    """Time-ordered mapping from deadline to the components due at it.

    Deadlines live in a binary heap, each backed by a bucket of components
    keyed by identity. A secondary index maps every queued component to its
    deadline so removal does not scan the buckets.

    Class Invariants:
    1. A component appears in at most one bucket
    2. The index and the buckets always agree
    3. No empty bucket is kept

    Heap entries whose bucket has been emptied by remove() are left in
    place and discarded lazily when they reach the top.

    Performance Characteristics:
    1. O(log n) insert of a new deadline, O(1) into an existing bucket
    2. O(log n) amortized extraction
    3. O(1) removal
    """

    def __init__(self) -> None:
        self._heap: List[int] = []
        self._buckets: Dict[int, Bucket] = {}
        self._index: Dict[int, int] = {}

    def __len__(self) -> int:
        """Number of scheduled components, across all buckets."""
        return len(self._index)

    def __bool__(self) -> bool:
        return bool(self._index)

    def __contains__(self, component: Any) -> bool:
        return id(component) in self._index

    def insert(self, registration: PollableRegistration, deadline: int) -> None:
        """Add a component to the bucket for an exact deadline.

        Args:
            registration: The pollable registration to schedule
            deadline: Absolute tick at which it is due

        Raises:
            InvariantViolationError: If the component is already scheduled
        """
        if registration.key in self._index:
            raise InvariantViolationError(
                "Component is already scheduled",
                registration.component,
                {"deadline": self._index[registration.key], "requested": deadline},
            )

        bucket = self._buckets.get(deadline)
        if bucket is None:
            bucket = self._buckets[deadline] = {}
            heapq.heappush(self._heap, deadline)
        bucket[registration.key] = registration
        self._index[registration.key] = deadline

    def extract_earliest(self) -> Tuple[int, Bucket]:
        """Remove and return the earliest deadline with its bucket.

        Returns:
            A (deadline, bucket) pair; the bucket maps component identity
            to its registration

        Raises:
            QueueEmptyError: If nothing is scheduled
        """
        self._discard_stale()
        if not self._heap:
            raise QueueEmptyError("No deadline is scheduled")

        deadline = heapq.heappop(self._heap)
        bucket = self._buckets.pop(deadline)
        for key in bucket:
            del self._index[key]
        return deadline, bucket

    def peek_earliest(self) -> Optional[int]:
        """Return the earliest deadline without removing it, or None."""
        self._discard_stale()
        return self._heap[0] if self._heap else None

    def remove(self, component: Any) -> Optional[int]:
        """Remove a component from whichever bucket holds it.

        Returns:
            The deadline it was scheduled at, or None if it was not queued
        """
        deadline = self._index.pop(id(component), None)
        if deadline is None:
            return None

        bucket = self._buckets[deadline]
        del bucket[id(component)]
        if not bucket:
            del self._buckets[deadline]
            self._compact()
        return deadline

    def deadline_of(self, component: Any) -> Optional[int]:
        return self._index.get(id(component))

    def snapshot(self) -> List[Tuple[int, List[Any]]]:
        """Return (deadline, components) pairs in ascending deadline order."""
        return [
            (deadline, [registration.component for registration in self._buckets[deadline].values()])
            for deadline in sorted(self._buckets)
        ]

    def clear(self) -> None:
        self._heap.clear()
        self._buckets.clear()
        self._index.clear()

    def _discard_stale(self) -> None:
        while self._heap and self._heap[0] not in self._buckets:
            heapq.heappop(self._heap)

    def _compact(self) -> None:
        # Rebuild once stale entries dominate the heap.
        if len(self._heap) > 2 * len(self._buckets) + 16:
            self._heap = sorted(self._buckets)
