"""
Structural feasibility of assignment problems via the Hopcroft-Karp algorithm, based on
https://en.wikipedia.org/wiki/Hopcroft%E2%80%93Karp_algorithm

A cost matrix admits a finite-cost complete assignment if and only if the bipartite
graph formed by its stored entries has a perfect matching.
"""

from collections import deque
from collections.abc import Iterable

__all__ = ['BipartiteGraph', 'HopcroftKarp', 'has_perfect_matching']


class BipartiteGraph:
    """
    Bipartite graph between rows and columns of a cost matrix,
    with an edge for each stored entry.

    Rows and columns are assumed to be sequentially indexed: 0, 1, ...
    """
    def __init__(self, num_rows: int, num_cols: int, edges: Iterable[tuple[int, int]]):
        if num_rows < 1 or num_cols < 1:
            raise ValueError(f'graph requires at least one row and one column, received {num_rows} x {num_cols}')
        self.num_rows = num_rows
        self.num_cols = num_cols
        adj = [set() for _ in range(num_rows)]
        for (i, j) in edges:
            if not (0 <= i < num_rows and 0 <= j < num_cols):
                raise ValueError(f'edge ({i}, {j}) out of range for {num_rows} x {num_cols} graph')
            adj[i].add(j)
        # adjacency lists in ascending column order
        self.adj_rows = [sorted(a) for a in adj]


class HopcroftKarp:
    """
    Maximum-cardinality matching of a bipartite graph,
    storing the temporary data for running the algorithm.
    """
    def __init__(self, graph: BipartiteGraph):
        self.graph = graph
        # unmatched vertices are indexed by -1
        self.match_row = graph.num_rows * [-1]
        self.match_col = graph.num_cols * [-1]
        self.dist = graph.num_rows * [0]
        self._dist_free = 0
        self._next_edge = graph.num_rows * [0]

    def _build_layers(self) -> bool:
        """
        Breadth-first search from all unmatched rows, assigning layer indices to rows
        and recording the length of the shortest augmenting path.
        """
        inf_dist = self.graph.num_rows + 1  # formally "infinite" distance
        queue = deque()
        for i in range(self.graph.num_rows):
            if self.match_row[i] == -1:
                self.dist[i] = 0
                queue.append(i)
            else:
                self.dist[i] = inf_dist
        self._dist_free = inf_dist
        while queue:
            i = queue.popleft()
            if self.dist[i] >= self._dist_free:
                continue
            for j in self.graph.adj_rows[i]:
                k = self.match_col[j]
                if k == -1:
                    if self._dist_free == inf_dist:
                        self._dist_free = self.dist[i] + 1
                elif self.dist[k] == inf_dist:
                    self.dist[k] = self.dist[i] + 1
                    queue.append(k)
        return self._dist_free != inf_dist

    def _add_augmenting_path(self, root: int) -> bool:
        """
        Depth-first search along the layers starting at the unmatched row `root`,
        flipping the matching along the first shortest augmenting path found.
        """
        inf_dist = self.graph.num_rows + 1
        stack = [root]
        path = []
        while stack:
            i = stack[-1]
            adj = self.graph.adj_rows[i]
            descended = False
            while self._next_edge[i] < len(adj):
                j = adj[self._next_edge[i]]
                self._next_edge[i] += 1
                k = self.match_col[j]
                if k == -1:
                    if self._dist_free == self.dist[i] + 1:
                        path.append(j)
                        for (r, c) in zip(stack, path):
                            self.match_row[r] = c
                            self.match_col[c] = r
                        return True
                elif self.dist[k] == self.dist[i] + 1:
                    path.append(j)
                    stack.append(k)
                    descended = True
                    break
            if not descended:
                # do not visit the same row multiple times
                self.dist[i] = inf_dist
                stack.pop()
                if path:
                    path.pop()
        return False

    def __call__(self) -> list[tuple[int, int]]:
        """
        Run the Hopcroft-Karp algorithm and return the matched (row, column) pairs.
        """
        self.match_row = self.graph.num_rows * [-1]
        self.match_col = self.graph.num_cols * [-1]
        while self._build_layers():
            self._next_edge = self.graph.num_rows * [0]
            for i in range(self.graph.num_rows):
                if self.match_row[i] == -1:
                    self._add_augmenting_path(i)
        return [(i, j) for i, j in enumerate(self.match_row) if j != -1]


def has_perfect_matching(graph: BipartiteGraph) -> bool:
    """
    Whether every row and every column of `graph` can be matched simultaneously.
    """
    if graph.num_rows != graph.num_cols:
        return False
    return len(HopcroftKarp(graph)()) == graph.num_rows
