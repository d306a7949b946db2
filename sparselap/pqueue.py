from collections.abc import Sequence

__all__ = ['MutableHeap']


class MutableHeap:
    """
    Mutable d-ary min-heap of integer items, ordered by `keys[item]`.

    The keys are not stored in the heap: `keys` is a reference to an external sequence
    (typically a list of tentative distances), which may be modified by the caller.
    After decreasing (or increasing) the key of an item, `update` must be called with
    the item's handle to restore the heap order. Items with equal keys are ordered
    by their index, such that the pop order is deterministic.

    The handle returned by `push` is the item itself, and remains valid
    as long as the item is in the heap.
    """
    def __init__(self, keys: Sequence[int], arity: int = 4):
        if arity < 2:
            raise ValueError(f'heap arity must be at least 2, received {arity}')
        self.keys = keys
        self.arity = arity
        self._heap = []
        # position of each item in '_heap'
        self._pos = {}

    def __len__(self):
        return len(self._heap)

    def __bool__(self):
        return bool(self._heap)

    def __contains__(self, item):
        return item in self._pos

    def clear(self):
        """
        Remove all items.
        """
        self._heap.clear()
        self._pos.clear()

    def push(self, item: int) -> int:
        """
        Insert `item` and return its handle.
        """
        if item in self._pos:
            raise ValueError(f'item {item} is already contained in the heap')
        self._heap.append(item)
        self._pos[item] = len(self._heap) - 1
        self._sift_up(len(self._heap) - 1)
        return item

    def top(self) -> int:
        """
        Item with the smallest key.
        """
        if not self._heap:
            raise IndexError('top of empty heap')
        return self._heap[0]

    def pop(self) -> int:
        """
        Remove and return the item with the smallest key.
        """
        if not self._heap:
            raise IndexError('pop from empty heap')
        item = self._heap[0]
        last = self._heap.pop()
        del self._pos[item]
        if self._heap:
            self._heap[0] = last
            self._pos[last] = 0
            self._sift_down(0)
        return item

    def update(self, handle: int):
        """
        Restore the heap order after the key of the item identified by `handle` has changed.
        """
        self._sift_up(self._pos[handle])
        self._sift_down(self._pos[handle])

    def _less(self, a: int, b: int) -> bool:
        ka = self.keys[a]
        kb = self.keys[b]
        return ka < kb or (ka == kb and a < b)

    def _sift_up(self, slot: int):
        heap = self._heap
        item = heap[slot]
        while slot > 0:
            parent = (slot - 1) // self.arity
            if not self._less(item, heap[parent]):
                break
            heap[slot] = heap[parent]
            self._pos[heap[slot]] = slot
            slot = parent
        heap[slot] = item
        self._pos[item] = slot

    def _sift_down(self, slot: int):
        heap = self._heap
        n = len(heap)
        item = heap[slot]
        while True:
            first = self.arity * slot + 1
            if first >= n:
                break
            # smallest child
            best = first
            for c in range(first + 1, min(first + self.arity, n)):
                if self._less(heap[c], heap[best]):
                    best = c
            if not self._less(heap[best], item):
                break
            heap[slot] = heap[best]
            self._pos[heap[slot]] = slot
            slot = best
        heap[slot] = item
        self._pos[item] = slot
