"""Indexed min-priority queue.

Binary heap over externally addressed entries: every entry is identified by an
integer index in ``[0, capacity)`` and its key can be changed in place, which
is what Prim's algorithm needs for decrease-key in O(log V).

Heap storage is 1-based (position 0 is never used), so the parent of ``i`` is
``i // 2`` and its children are ``2 * i`` and ``2 * i + 1``.
"""

import typing as t


class PriorityQueueError(Exception):
    def __str__(self) -> str:
        # NOTE: keeps KeyError subclasses from quoting the message.
        return BaseException.__str__(self)


class InvalidIndexError(PriorityQueueError, IndexError):
    pass


class DuplicateIndexError(PriorityQueueError, KeyError):
    pass


class MissingIndexError(PriorityQueueError, KeyError):
    pass


class UnderflowError(PriorityQueueError, IndexError):
    pass


class HeapInvariantError(PriorityQueueError, AssertionError):
    pass


_ROOT = 1


class IndexMinPQ:
    """Min-priority queue with decrease-key addressed by a stable index.

    Parameters
    ----------
    capacity : int
        Maximum number of distinct indices. Valid indices are ``0..capacity-1``.
    """

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f"Capacity must be non-negative, got {capacity=}.")

        self._capacity = int(capacity)
        self._size = 0
        self._keys: t.List[t.Any] = [None] * self._capacity
        self._heap_to_idx: t.List[int] = [0] * (self._capacity + 1)
        # NOTE: None marks an index that is not in the queue.
        self._idx_to_heap: t.List[t.Optional[int]] = [None] * self._capacity

    @property
    def capacity(self) -> int:
        return self._capacity

    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def __contains__(self, idx: int) -> bool:
        return self.contains(idx)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(capacity={self._capacity}, size={self._size})"

    def top(self) -> int:
        if not self._size:
            raise UnderflowError("Priority queue underflow.")
        return self._heap_to_idx[_ROOT]

    def top_key(self) -> t.Any:
        return self._keys[self.top()]

    def pop(self) -> int:
        if not self._size:
            raise UnderflowError("Cannot pop from an empty priority queue.")

        idx = self._heap_to_idx[_ROOT]
        self._idx_to_heap[idx] = None
        self._keys[idx] = None

        last = self._heap_to_idx[self._size]
        self._size -= 1

        if self._size:
            self._heap_to_idx[_ROOT] = last
            self._idx_to_heap[last] = _ROOT
            self._sift_down(_ROOT)

        return idx

    def push(self, key: t.Any, idx: int) -> None:
        self._check_index(idx)
        if self._idx_to_heap[idx] is not None:
            raise DuplicateIndexError(f"Index {idx} is already in the priority queue.")

        self._size += 1
        self._heap_to_idx[self._size] = idx
        self._idx_to_heap[idx] = self._size
        self._keys[idx] = key
        self._sift_up(self._size)

    def contains(self, idx: int) -> bool:
        self._check_index(idx)
        return self._idx_to_heap[idx] is not None

    def key_of(self, idx: int) -> t.Any:
        if not self.contains(idx):
            raise MissingIndexError(f"Index {idx} is not in the priority queue.")
        return self._keys[idx]

    def change_key(self, key: t.Any, idx: int) -> None:
        if not self.contains(idx):
            raise MissingIndexError(f"Index {idx} is not in the priority queue.")

        self._keys[idx] = key
        # NOTE: at most one of the two moves does anything.
        self._sift_up(self._idx_to_heap[idx])
        self._sift_down(self._idx_to_heap[idx])

    def check_invariants(self) -> None:
        """Walk the whole heap and raise HeapInvariantError on the first violation.

        Debugging aid only, O(size).
        """
        for pos in range(_ROOT, self._size + 1):
            idx = self._heap_to_idx[pos]
            if self._idx_to_heap[idx] != pos:
                raise HeapInvariantError(
                    f"Position map mismatch: heap position {pos} holds index {idx}, "
                    f"but index {idx} maps to position {self._idx_to_heap[idx]}."
                )

        n_present = sum(pos is not None for pos in self._idx_to_heap)
        if n_present != self._size:
            raise HeapInvariantError(f"{n_present} indices mapped to the heap, but size is {self._size}.")

        self._check_heap_order(_ROOT)

    def _check_heap_order(self, i: int) -> None:
        if not self._is_node(i):
            return

        parent = i // 2
        if i != _ROOT and self._greater(parent, i):
            parent_idx, child_idx = self._heap_to_idx[parent], self._heap_to_idx[i]
            raise HeapInvariantError(
                f"Heap order error: parent ({parent}: {parent_idx}, {self._keys[parent_idx]!r}) "
                f"bigger than child ({i}: {child_idx}, {self._keys[child_idx]!r})."
            )

        self._check_heap_order(2 * i)
        self._check_heap_order(2 * i + 1)

    def _check_index(self, idx: int) -> None:
        if not 0 <= idx < self._capacity:
            raise InvalidIndexError(f"Index {idx} out of range for capacity {self._capacity}.")

    def _is_node(self, i: int) -> bool:
        return i <= self._size

    def _greater(self, i: int, j: int) -> bool:
        return self._keys[self._heap_to_idx[i]] > self._keys[self._heap_to_idx[j]]

    def _swap(self, i: int, j: int) -> None:
        heap = self._heap_to_idx
        heap[i], heap[j] = heap[j], heap[i]
        self._idx_to_heap[heap[i]] = i
        self._idx_to_heap[heap[j]] = j

    def _sift_up(self, i: int) -> None:
        while i != _ROOT and self._greater(i // 2, i):
            self._swap(i // 2, i)
            i //= 2

    def _sift_down(self, i: int) -> None:
        while self._is_node(2 * i):
            child = 2 * i
            if self._is_node(child + 1) and self._greater(child, child + 1):
                child += 1

            if not self._greater(i, child):
                break

            self._swap(i, child)
            i = child
