from collections.abc import Sequence
import numpy as np
from scipy import sparse
from .matching import BipartiteGraph, has_perfect_matching

__all__ = ['SparseCostMatrix']


class SparseCostMatrix:
    """
    Square integer cost matrix storing only the finite entries of each row.

    Entries which are not stored have "infinite" cost, represented by the sentinel
    value `infinity`. By default the sentinel is `dimension * (max |cost| + 1) + 1`,
    which exceeds the absolute value of the total cost of any complete assignment.

    Args:
        dimension:  number of rows and columns
        entries:    sequence of (row, column, cost) triples
        infinity:   optional explicit value of the "infinite" cost sentinel
    """
    def __init__(self, dimension: int, entries: Sequence[tuple[int, int, int]], infinity: int = None):
        if dimension < 1:
            raise ValueError(f'matrix dimension must be positive, received {dimension}')
        entries = list(entries)
        if not entries:
            raise ValueError('cost matrix must store at least one entry per row')
        rows = np.array([e[0] for e in entries], dtype=np.int64)
        cols = np.array([e[1] for e in entries], dtype=np.int64)
        costs = np.array([e[2] for e in entries])
        self._init_from_coo(dimension, rows, cols, costs, infinity)

    def _init_from_coo(self, dimension: int, rows: np.ndarray, cols: np.ndarray, costs: np.ndarray, infinity):
        """
        Validate the coordinate representation and set up the internal storage.
        """
        if np.any(rows < 0) or np.any(rows >= dimension) or np.any(cols < 0) or np.any(cols >= dimension):
            raise ValueError(f'entry index out of range for a {dimension} x {dimension} matrix')
        if costs.dtype.kind == 'f':
            if not np.all(np.isfinite(costs)) or np.any(costs != np.round(costs)):
                raise ValueError('costs must be finite integers')
        elif costs.dtype.kind not in 'iub':
            raise ValueError(f'costs must be integers, received data type {costs.dtype}')
        costs = costs.astype(np.int64)
        linear = rows * dimension + cols
        if len(np.unique(linear)) != len(linear):
            raise ValueError('duplicate (row, column) entries in cost matrix')
        self.dimension = int(dimension)
        # explicitly stored zeros are retained by the COO -> CSR conversion
        self._csr = sparse.csr_matrix((costs, (rows, cols)), shape=(dimension, dimension), dtype=np.int64)
        self._csr.sort_indices()
        self._csc = self._csr.tocsc()
        self._csc.sort_indices()
        if np.any(np.diff(self._csr.indptr) == 0):
            raise ValueError('every row of the cost matrix must store at least one entry')
        if np.any(np.diff(self._csc.indptr) == 0):
            raise ValueError('every column of the cost matrix must store at least one entry')
        # row-wise (column, cost) pairs as Python integers, for fast iteration
        indptr = self._csr.indptr
        indices = self._csr.indices.tolist()
        data = self._csr.data.tolist()
        self._rows = [tuple(zip(indices[indptr[i]:indptr[i+1]], data[indptr[i]:indptr[i+1]]))
                      for i in range(dimension)]
        self._lookup = [dict(r) for r in self._rows]
        bound = self.dimension * (int(np.max(np.abs(costs))) + 1) + 1
        if infinity is None:
            infinity = bound
        elif infinity < bound:
            raise ValueError(f'infinity sentinel {infinity} must be at least {bound} for this matrix')
        self.infinity = int(infinity)

    @classmethod
    def from_dense(cls, a, mask=None, infinity: int = None):
        """
        Construct from a dense square array, storing the entries selected by `mask`
        (by default all finite entries).
        """
        a = np.asarray(a)
        if a.ndim != 2 or a.shape[0] != a.shape[1]:
            raise ValueError(f'expecting a square matrix, received array of shape {a.shape}')
        if mask is None:
            mask = np.isfinite(a) if a.dtype.kind == 'f' else np.ones(a.shape, dtype=bool)
        mask = np.asarray(mask, dtype=bool)
        if mask.shape != a.shape:
            raise ValueError(f'mask shape {mask.shape} does not match matrix shape {a.shape}')
        rows, cols = np.nonzero(mask)
        obj = cls.__new__(cls)
        obj._init_from_coo(a.shape[0], rows.astype(np.int64), cols.astype(np.int64), a[rows, cols], infinity)
        return obj

    @classmethod
    def from_sparse(cls, s, infinity: int = None):
        """
        Construct from a `scipy.sparse` matrix, storing all explicitly stored entries
        (including explicit zeros). Duplicate entries are summed.
        """
        if s.shape[0] != s.shape[1]:
            raise ValueError(f'expecting a square matrix, received shape {s.shape}')
        s = sparse.csr_matrix(s)
        s.sum_duplicates()
        coo = s.tocoo()
        obj = cls.__new__(cls)
        obj._init_from_coo(s.shape[0], coo.row.astype(np.int64), coo.col.astype(np.int64), coo.data, infinity)
        return obj

    @property
    def nnz(self) -> int:
        """
        Number of stored entries.
        """
        return self._csr.nnz

    def cost(self, row: int, col: int) -> int:
        """
        Cost of entry (row, col), or `infinity` if the entry is not stored.
        """
        return self._lookup[row].get(col, self.infinity)

    def __getitem__(self, key):
        row, col = key
        return self.cost(row, col)

    def row(self, i: int):
        """
        Stored (column, cost) pairs of row `i`, in ascending column order.
        """
        return self._rows[i]

    def rows(self):
        """
        Iterate over (row index, stored (column, cost) pairs) for all rows.
        """
        return enumerate(self._rows)

    def column(self, j: int):
        """
        Stored (row, cost) pairs of column `j`, in ascending row order.
        """
        start, stop = self._csc.indptr[j], self._csc.indptr[j+1]
        return list(zip(self._csc.indices[start:stop].tolist(), self._csc.data[start:stop].tolist()))

    def smallest_cost_row(self, col: int) -> int:
        """
        Row attaining the minimum cost in column `col`; ties resolve to the lowest row index.
        """
        start, stop = self._csc.indptr[col], self._csc.indptr[col+1]
        # 'argmin' returns the first occurrence, and row indices are sorted
        return int(self._csc.indices[start + np.argmin(self._csc.data[start:stop])])

    def toarray(self, fill=None) -> np.ndarray:
        """
        Dense representation, with entries which are not stored set to `fill`
        (`infinity` by default).
        """
        if fill is None:
            fill = self.infinity
        a = np.full((self.dimension, self.dimension), fill)
        coo = self._csr.tocoo()
        a[coo.row, coo.col] = coo.data
        return a

    def sparsity_graph(self) -> BipartiteGraph:
        """
        Bipartite graph with an edge for each stored entry.
        """
        return BipartiteGraph(self.dimension, self.dimension,
                              ((i, j) for i, r in enumerate(self._rows) for (j, _) in r))

    def has_perfect_matching(self) -> bool:
        """
        Whether the matrix admits a complete assignment of finite cost.
        """
        return has_perfect_matching(self.sparsity_graph())

    def __repr__(self):
        return f'SparseCostMatrix(dimension={self.dimension}, nnz={self.nnz})'
