"""
Shortest augmenting path search of the Jonker-Volgenant algorithm for sparse cost matrices.

Reference:
    R. Jonker, A. Volgenant
    A shortest augmenting path algorithm for dense and sparse linear assignment problems
    Computing 38, 325-340 (1987)
"""

from collections.abc import MutableSequence
from .cost_matrix import SparseCostMatrix
from .pqueue import MutableHeap

__all__ = ['InfeasibleProblemError', 'AugmentationData', 'augment']


class InfeasibleProblemError(ValueError):
    """
    Raised if the cost matrix does not admit a complete assignment of finite cost.
    """


class AugmentationData:
    """
    Scratch space of the augmenting path search, allocated once per solver call
    and reset before each augmentation.
    """
    def __init__(self, dimension: int, arity: int = 4):
        self.dimension = dimension
        # whether a column is in the frontier, i.e., its label can still improve
        self.in_todo = dimension * [False]
        # whether the shortest path label of a column is final
        self.is_ready = dimension * [False]
        # finalized columns, in the order they were finalized
        self.ready = []
        # finalized columns not yet expanded
        self.scan = []
        # predecessor row of each column on the alternating path
        self.prev = dimension * [0]
        # tentative shortest path labels; only valid for columns touched in the current search
        self.dist = dimension * [0]
        self.pq = MutableHeap(self.dist, arity)

    def reset(self, start: int):
        """
        Prepare for a new search rooted at row `start`.
        """
        # in-place updates, since the heap refers to 'dist'
        self.in_todo[:] = self.dimension * [False]
        self.is_ready[:] = self.dimension * [False]
        self.prev[:] = self.dimension * [start]
        self.pq.clear()
        self.ready.clear()
        self.scan.clear()

    def finalize(self, j: int):
        """
        Fix the label of column `j` and schedule it for expansion.
        """
        self.in_todo[j] = False
        self.is_ready[j] = True
        self.ready.append(j)
        self.scan.append(j)


def augment(data: AugmentationData, matrix: SparseCostMatrix, v: MutableSequence[int], start: int,
            rowsol: MutableSequence[int], colsol: MutableSequence[int]):
    """
    Find a shortest alternating path from the unassigned row `start` to an unassigned column
    with respect to the reduced costs `cost(i, j) - v[j]`, and augment the assignment along it.

    The column duals `v` are updated such that all reduced costs stay non-negative
    and reduced costs of assigned pairs are tight.
    """
    assert rowsol[start] < 0, f'row {start} is already assigned'
    data.reset(start)

    dist = data.dist
    in_todo = data.in_todo
    is_ready = data.is_ready
    prev = data.prev
    pq = data.pq
    scan = data.scan

    for (j, c) in matrix.row(start):
        dist[j] = c - v[j]
        pq.push(j)
        in_todo[j] = True

    end = -1
    dmin = 0
    while end < 0:
        if not scan:
            # skip entries finalized after being queued
            while pq and not in_todo[pq.top()]:
                pq.pop()
            if not pq:
                raise InfeasibleProblemError(
                    f'no augmenting path from row {start}: cost matrix admits no complete assignment')
            dmin = dist[pq.top()]
            # finalize all columns with the current minimum label at once
            while pq and (dist[pq.top()] == dmin or not in_todo[pq.top()]):
                j = pq.pop()
                if not in_todo[j]:
                    continue
                if colsol[j] < 0:
                    end = j
                    break
                data.finalize(j)
            if end >= 0:
                break

        # expand a finalized column via the row currently assigned to it
        j1 = scan.pop()
        i = colsol[j1]
        h = matrix.cost(i, j1) - v[j1]
        for (j, c) in matrix.row(i):
            if is_ready[j]:
                continue
            c_red = c - v[j] - h
            if not in_todo[j] or dmin + c_red < dist[j]:
                dist[j] = dmin + c_red
                prev[j] = i
                if in_todo[j]:
                    pq.update(j)
                if c_red == 0:
                    if colsol[j] < 0:
                        end = j
                        break
                    data.finalize(j)
                elif not in_todo[j]:
                    pq.push(j)
                    in_todo[j] = True

    # update column prices
    for j in data.ready:
        v[j] += dist[j] - dmin

    # flip assignments along the path
    while True:
        i = prev[end]
        colsol[end] = i
        end, rowsol[i] = rowsol[i], end
        if i == start:
            break
