import unittest
import numpy as np
import sparselap as slp


class TestAugmentation(unittest.TestCase):

    def test_reset(self):

        data = slp.AugmentationData(5)
        # leave some state behind
        data.in_todo[1] = True
        data.is_ready[3] = True
        data.prev[2] = 4
        data.dist[0] = 7
        data.pq.push(0)
        data.ready.append(3)
        data.scan.append(3)

        data.reset(2)
        state = snapshot(data)
        self.assertEqual(data.in_todo, 5 * [False])
        self.assertEqual(data.is_ready, 5 * [False])
        self.assertEqual(data.prev, 5 * [2])
        self.assertEqual(len(data.pq), 0)
        self.assertEqual(data.ready, [])
        self.assertEqual(data.scan, [])
        # resetting again with the same start row has no effect
        data.reset(2)
        self.assertEqual(snapshot(data), state)
        # heap still orders by the scratch distances
        self.assertIs(data.pq.keys, data.dist)

    def test_augment_small(self):

        # row 0 assigned to column 0, row 1 free
        matrix = slp.SparseCostMatrix(2, [(0, 0, 1), (0, 1, 2), (1, 0, 1), (1, 1, 3)])
        v = [1, 2]
        rowsol = [0, -1]
        colsol = [0, -1]
        data = slp.AugmentationData(2)
        slp.augment(data, matrix, v, 1, rowsol, colsol)
        self.assertEqual(rowsol, [1, 0])
        self.assertEqual(colsol, [1, 0])
        self.assertEqual(v, [1, 2])
        self.assertEqual(data.ready, [0])

    def test_augment_decrease_key(self):

        # label of the queued free column 2 drops from 10 to 1 via row 0
        matrix = slp.SparseCostMatrix(3, [(0, 0, 0), (0, 2, 1), (1, 1, 0), (2, 0, 0), (2, 2, 10)])
        v = [0, 0, 0]
        rowsol = [0, 1, -1]
        colsol = [0, 1, -1]
        data = slp.AugmentationData(3)
        slp.augment(data, matrix, v, 2, rowsol, colsol)
        self.assertEqual(data.dist[2], 1)
        self.assertEqual(data.prev[2], 0)
        self.assertEqual(rowsol, [2, 1, 0])
        self.assertEqual(colsol, [2, 1, 0])
        self.assertEqual(v, [-1, 0, 0])
        self.assertEqual(data.ready, [0])

    def test_augment_reassigns_freed_row(self):

        rng = np.random.default_rng(42)

        for n in (5, 12, 30):
            matrix = random_feasible_matrix(n, 0.3, rng)
            sol = slp.lap(matrix)
            data = slp.AugmentationData(n)
            for i in rng.choice(n, size=3, replace=False).tolist():
                # unassign a single row, keeping all column duals
                rowsol = sol.rowsol.tolist()
                colsol = sol.colsol.tolist()
                v = sol.v.tolist()
                colsol[rowsol[i]] = -1
                rowsol[i] = -1
                slp.augment(data, matrix, v, i, rowsol, colsol)
                u = [matrix.cost(k, rowsol[k]) - v[rowsol[k]] for k in range(n)]
                cost = sum(matrix.cost(k, rowsol[k]) for k in range(n))
                sol2 = slp.Solution(cost, rowsol, colsol, u, v)
                self.assertTrue(sol2.is_consistent(matrix, verbose=True))
                self.assertEqual(sol2.cost, sol.cost)

    def test_augment_infeasible(self):

        # rows 0 and 1 compete for column 0
        matrix = slp.SparseCostMatrix(3, [(0, 0, 1), (1, 0, 2), (2, 1, 0), (2, 2, 0)])
        v = [1, 0, 0]
        rowsol = [0, -1, 1]
        colsol = [0, 2, -1]
        with self.assertRaises(slp.InfeasibleProblemError):
            slp.augment(slp.AugmentationData(3), matrix, v, 1, rowsol, colsol)


def snapshot(data: slp.AugmentationData):
    """
    Copy of the internal state which is defined after a reset.
    """
    return (list(data.in_todo), list(data.is_ready), list(data.prev),
            len(data.pq), list(data.ready), list(data.scan))


def random_feasible_matrix(n: int, density: float, rng: np.random.Generator):
    """
    Construct a random sparse integer cost matrix admitting a complete assignment.
    """
    mask = rng.uniform(size=(n, n)) < density
    # ensure existence of a perfect matching
    mask[np.arange(n), rng.permutation(n)] = True
    costs = rng.integers(-20, 100, size=(n, n))
    return slp.SparseCostMatrix.from_dense(costs, mask=mask)


if __name__ == '__main__':
    unittest.main()
