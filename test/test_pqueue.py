import unittest
import numpy as np
import sparselap as slp


class TestMutableHeap(unittest.TestCase):

    def test_pop_order(self):

        rng = np.random.default_rng()

        for arity in (2, 3, 4, 7):
            keys = rng.integers(-20, 20, size=50).tolist()
            heap = slp.MutableHeap(keys, arity)
            for item in rng.permutation(len(keys)).tolist():
                self.assertEqual(heap.push(item), item)
            self.assertEqual(len(heap), len(keys))
            order = [heap.pop() for _ in range(len(keys))]
            # sorted by key, ties broken by item index
            self.assertEqual(order, sorted(range(len(keys)), key=lambda k: (keys[k], k)))
            self.assertFalse(heap)

    def test_update(self):

        rng = np.random.default_rng()

        keys = rng.integers(0, 100, size=40).tolist()
        heap = slp.MutableHeap(keys)
        handles = [heap.push(item) for item in range(len(keys))]
        # interleave key changes in both directions with pops
        popped = []
        for _ in range(10):
            popped.append(heap.pop())
            for _ in range(5):
                item = int(rng.integers(len(keys)))
                if item in heap:
                    keys[item] += int(rng.integers(-50, 50))
                    heap.update(handles[item])
            self.assertEqual(heap.top(), min((k for k in range(len(keys)) if k in heap),
                                             key=lambda k: (keys[k], k)))
        remaining = [heap.pop() for _ in range(len(heap))]
        self.assertEqual(remaining, sorted(remaining, key=lambda k: (keys[k], k)))
        self.assertEqual(sorted(popped + remaining), list(range(len(keys))))

    def test_decrease_key(self):

        keys = [5, 3, 8, 6]
        heap = slp.MutableHeap(keys)
        for item in range(4):
            heap.push(item)
        self.assertEqual(heap.top(), 1)
        keys[2] = 1
        heap.update(2)
        self.assertEqual(heap.top(), 2)
        # equal keys: smaller item first
        keys[3] = 1
        heap.update(3)
        self.assertEqual([heap.pop() for _ in range(4)], [2, 3, 1, 0])

    def test_errors(self):

        keys = [0, 1]
        heap = slp.MutableHeap(keys)
        with self.assertRaises(IndexError):
            heap.pop()
        with self.assertRaises(IndexError):
            heap.top()
        heap.push(0)
        with self.assertRaises(ValueError):
            heap.push(0)
        heap.push(1)
        heap.clear()
        self.assertEqual(len(heap), 0)
        self.assertFalse(0 in heap)
        # items can be pushed again after clearing
        heap.push(0)
        self.assertEqual(heap.top(), 0)
        with self.assertRaises(ValueError):
            slp.MutableHeap(keys, arity=1)


if __name__ == '__main__':
    unittest.main()
