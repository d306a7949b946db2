"""
Compare a cold solve of a sparse linear assignment problem with the re-optimization
of a previous solution after unassigning a fraction of the rows, and with the
dense solver from SciPy as reference.
"""

import time
import numpy as np
from scipy.optimize import linear_sum_assignment
import sparselap as slp


def random_feasible_matrix(n: int, density: float, rng: np.random.Generator):
    mask = rng.uniform(size=(n, n)) < density
    mask[np.arange(n), rng.permutation(n)] = True
    costs = rng.integers(0, 1000, size=(n, n))
    return slp.SparseCostMatrix.from_dense(costs, mask=mask)


def main():

    rng = np.random.default_rng(42)

    density = 0.02
    fraction_free = 0.05

    print(' dimension   cold [s]   delta [s]   scipy [s]')
    for n in (250, 500, 1000, 2000):
        matrix = random_feasible_matrix(n, density, rng)

        t0 = time.perf_counter()
        sol = slp.lap(matrix)
        t_cold = time.perf_counter() - t0

        free_rows = rng.choice(n, size=max(1, int(fraction_free * n)), replace=False)
        u, v, rowsol, colsol = slp.partial_assignment(sol, free_rows.tolist())
        t0 = time.perf_counter()
        sol_delta = slp.delta_lap(matrix, u, v, rowsol, colsol)
        t_delta = time.perf_counter() - t0
        assert sol_delta.cost == sol.cost

        a = matrix.toarray(fill=np.inf)
        t0 = time.perf_counter()
        r, c = linear_sum_assignment(a)
        t_scipy = time.perf_counter() - t0
        assert int(a[r, c].sum()) == sol.cost

        print(f'{n:10d} {t_cold:10.4f} {t_delta:11.4f} {t_scipy:11.4f}')


if __name__ == '__main__':
    main()
