"""
Jonker-Volgenant algorithm for the linear assignment problem with a sparse integer cost matrix,
and re-optimization of a partial solution ("delta" analysis).

Reference:
    R. Jonker, A. Volgenant
    A shortest augmenting path algorithm for dense and sparse linear assignment problems
    Computing 38, 325-340 (1987)
"""

from collections.abc import Sequence
import logging
import time
import warnings
import numpy as np
from .cost_matrix import SparseCostMatrix
from .augmentation import AugmentationData, InfeasibleProblemError, augment

__all__ = ['Solution', 'lap', 'delta_lap', 'partial_assignment']

logger = logging.getLogger(__name__)


class Solution:
    """
    Solution of a linear assignment problem: total cost, row -> column assignment `rowsol`,
    column -> row assignment `colsol` and the dual variables `u` (rows) and `v` (columns).

    Unassigned rows and columns are indicated by -1. The dual variables are stored
    as arrays of Python integers, since they may exceed the range of 64-bit integers
    for matrices with very large costs.
    """
    def __init__(self, cost: int, rowsol: Sequence[int], colsol: Sequence[int],
                 u: Sequence[int], v: Sequence[int]):
        self.cost = cost
        self.rowsol = np.array(rowsol, dtype=np.int64)
        self.colsol = np.array(colsol, dtype=np.int64)
        self.u = np.array([int(x) for x in u], dtype=object)
        self.v = np.array([int(x) for x in v], dtype=object)

    @property
    def dimension(self) -> int:
        """
        Number of rows (and columns) of the underlying cost matrix.
        """
        return len(self.rowsol)

    def matching(self) -> list[tuple[int, int]]:
        """
        Assigned (row, column) pairs, sorted by row.
        """
        return [(i, int(j)) for i, j in enumerate(self.rowsol) if j >= 0]

    def is_consistent(self, matrix: SparseCostMatrix, verbose: bool = False) -> bool:
        """
        Check that the solution is a complete assignment for `matrix` certified optimal
        by its dual variables: all reduced costs `cost(i, j) - u[i] - v[j]` of stored entries
        are non-negative and vanish for assigned pairs.
        """
        n = matrix.dimension
        for name in ('rowsol', 'colsol', 'u', 'v'):
            if len(getattr(self, name)) != n:
                if verbose:
                    print(f'Consistency check failed: length of {name} does not match matrix dimension {n}.')
                return False
        if sorted(self.rowsol.tolist()) != list(range(n)):
            if verbose:
                print('Consistency check failed: row assignment is not a permutation.')
            return False
        for i, j in enumerate(self.rowsol.tolist()):
            if self.colsol[j] != i:
                if verbose:
                    print(f'Consistency check failed: row {i} is assigned to column {j}, '
                          f'but column {j} is assigned to row {self.colsol[j]}.')
                return False
        u = self.u.tolist()
        v = self.v.tolist()
        total = 0
        for i, row in matrix.rows():
            for (j, c) in row:
                red = c - u[i] - v[j]
                if red < 0:
                    if verbose:
                        print(f'Consistency check failed: negative reduced cost {red} of entry ({i}, {j}).')
                    return False
                if j == self.rowsol[i]:
                    if red != 0:
                        if verbose:
                            print(f'Consistency check failed: non-zero reduced cost {red} of assigned entry ({i}, {j}).')
                        return False
                    total += c
        if total != self.cost:
            if verbose:
                print(f'Consistency check failed: cost {self.cost} does not match assignment cost {total}.')
            return False
        return True

    def __repr__(self):
        return (f'solution {{ cost={self.cost}, rowsol={self.rowsol.tolist()}, colsol={self.colsol.tolist()}, '
                f'u={self.u.tolist()}, v={self.v.tolist()} }}')


def _finalize(matrix: SparseCostMatrix, v: list, rowsol: list, colsol: list) -> Solution:
    """
    Compute the row duals and the total cost of a complete assignment.
    """
    u = matrix.dimension * [0]
    total = 0
    for i, j in enumerate(rowsol):
        c = matrix.cost(i, j)
        u[i] = c - v[j]
        total += c
    return Solution(total, rowsol, colsol, u, v)


def lap(matrix: SparseCostMatrix, check: bool = False) -> Solution:
    """
    Solve the linear assignment problem defined by the square cost matrix `matrix`,
    i.e., find a one-to-one assignment of rows to columns with minimal total cost.

    The matrix must admit a complete assignment of finite cost. If `check` is set,
    this is verified in advance, otherwise an infeasible problem is detected
    during the augmenting path search.
    """
    tstart = time.perf_counter()
    if check and not matrix.has_perfect_matching():
        raise InfeasibleProblemError('cost matrix admits no complete assignment of finite cost')

    n = matrix.dimension
    big = matrix.infinity
    v = n * [0]
    rowsol = n * [-1]
    colsol = n * [-1]
    # number of columns claiming each row during column reduction
    matches = n * [0]

    # column reduction, reverse order gives better results
    for j in reversed(range(n)):
        imin = matrix.smallest_cost_row(j)
        v[j] = matrix.cost(imin, j)
        matches[imin] += 1
        if matches[imin] == 1:
            # assign row to column when claimed for the first time
            rowsol[imin] = j
            colsol[j] = imin

    # reduction transfer from rows assigned exactly once
    free = []
    for i, row in matrix.rows():
        if matches[i] == 0:
            free.append(i)
        elif matches[i] == 1:
            j1 = rowsol[i]
            dmin = big
            for (j, c) in row:
                if j != j1:
                    dmin = min(dmin, c - v[j])
            v[j1] -= dmin

    # augmenting row reduction, two passes
    numfree = len(free)
    for _ in range(2):
        k = 0
        prvnumfree = numfree
        # start list of rows still free after this pass
        numfree = 0
        while k < prvnumfree:
            i = free[k]
            k += 1
            # minimum and second minimum reduced cost over the columns of row i
            row = matrix.row(i)
            j1 = row[0][0]
            umin = row[0][1] - v[j1]
            j2 = -1
            usubmin = big
            for (j, c) in row[1:]:
                h = c - v[j]
                if h < usubmin:
                    if h >= umin:
                        usubmin = h
                        j2 = j
                    else:
                        usubmin = umin
                        umin = h
                        j2 = j1
                        j1 = j
            i0 = colsol[j1]
            if umin < usubmin:
                # raise the minimum reduced cost of the row to the second minimum
                v[j1] -= usubmin - umin
            elif i0 >= 0 and j2 >= 0:
                # minimum column is assigned, switch to second minimum column which may be free
                j1 = j2
                i0 = colsol[j2]
            # (re-)assign i to j1, possibly de-assigning i0
            rowsol[i] = j1
            colsol[j1] = i
            if i0 >= 0:
                rowsol[i0] = -1
                if umin < usubmin:
                    # continue the augmenting path i - j1 with i0 right away
                    k -= 1
                    free[k] = i0
                else:
                    # defer i0 to the next pass
                    free[numfree] = i0
                    numfree += 1
        del free[numfree:]

    logger.debug('LAP initialization done, %d of %d rows unassigned', numfree, n)

    # augment solution for each free row
    data = AugmentationData(n)
    for i in free:
        augment(data, matrix, v, i, rowsol, colsol)

    sol = _finalize(matrix, v, rowsol, colsol)
    logger.debug('solved LAP of dimension %d in %.6f s', n, time.perf_counter() - tstart)
    return sol


def delta_lap(matrix: SparseCostMatrix, u: Sequence[int], v: Sequence[int],
              rowsol: Sequence[int], colsol: Sequence[int]) -> Solution:
    """
    Complete a partial solution of the linear assignment problem defined by `matrix`,
    starting from the dual variables `u`, `v` and the partial assignment `rowsol`, `colsol`
    (unassigned rows and columns indicated by -1).

    The assigned pairs must be tight, i.e., `cost(i, rowsol[i]) == u[i] + v[rowsol[i]]`,
    and all reduced costs in assigned rows non-negative. Only the unassigned rows are augmented.
    The input sequences are not modified.
    """
    tstart = time.perf_counter()
    n = matrix.dimension
    for name, seq in (('u', u), ('v', v), ('rowsol', rowsol), ('colsol', colsol)):
        if len(seq) != n:
            raise ValueError(f'length of {name} must match matrix dimension {n}, received {len(seq)}')
    u_prior = [int(x) for x in u]
    v = [int(x) for x in v]
    rowsol = [int(x) for x in rowsol]
    colsol = [int(x) for x in colsol]

    for i, j in enumerate(rowsol):
        if j >= n or (j >= 0 and colsol[j] != i):
            raise ValueError(f'row {i} is assigned to column {j}, which is not assigned back to it')
    for j, i in enumerate(colsol):
        if i >= n or (i >= 0 and rowsol[i] != j):
            raise ValueError(f'column {j} is assigned to row {i}, which is not assigned back to it')
        if i >= 0 and matrix.cost(i, j) != u_prior[i] + v[j]:
            warnings.warn(
                f'dual variables are not tight on assigned entry ({i}, {j}); '
                'the resulting assignment might not be optimal', RuntimeWarning)

    # recompute duals of unassigned columns
    for j in range(n):
        if colsol[j] < 0:
            v[j] = min(c - u_prior[i] for (i, c) in matrix.column(j))

    free = [i for i in range(n) if rowsol[i] < 0]
    logger.debug('delta analysis on %d of %d unassigned rows', len(free), n)

    data = AugmentationData(n)
    for i in free:
        augment(data, matrix, v, i, rowsol, colsol)

    sol = _finalize(matrix, v, rowsol, colsol)
    logger.debug('completed delta LAP of dimension %d in %.6f s', n, time.perf_counter() - tstart)
    return sol


def partial_assignment(solution: Solution, free_rows: Sequence[int] = (), dimension: int = None):
    """
    Prepare a warm start for `delta_lap` from a previous solution.

    The rows in `free_rows` and their columns are unassigned. If `dimension` exceeds
    the dimension of the solution, rows and columns are appended as unassigned,
    with zero dual variables.

    Returns:
        tuple: (u, v, rowsol, colsol) as lists
    """
    n_prev = solution.dimension
    if dimension is None:
        dimension = n_prev
    if dimension < n_prev:
        raise ValueError(f'cannot shrink solution of dimension {n_prev} to {dimension}')
    pad = dimension - n_prev
    u = solution.u.tolist() + pad * [0]
    v = solution.v.tolist() + pad * [0]
    rowsol = solution.rowsol.tolist() + pad * [-1]
    colsol = solution.colsol.tolist() + pad * [-1]
    for i in free_rows:
        if not 0 <= i < dimension:
            raise ValueError(f'row index {i} out of range for dimension {dimension}')
        j = rowsol[i]
        if j >= 0:
            colsol[j] = -1
            rowsol[i] = -1
    return u, v, rowsol, colsol
