import math
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Dict, Iterator, List, Optional

from maze_search.core.events import EVT_FRONTIER, EVT_VISITED, ProgressEvent
from maze_search.core.grid import Coord, Grid
from maze_search.core.result import SearchMode, SearchResult


class Solver(ABC):
    mode = SearchMode.CLASSICAL.value

    def __init__(self, grid: Grid, mark_grid: bool = True):
        self.grid = grid
        # When False the solver never writes the grid's visited/path flags
        self.mark_grid = mark_grid
        self.path: List[Coord] = []
        self.steps = 0
        self.finished = False

    def _endpoints(self, start: Optional[Coord], end: Optional[Coord]):
        start = start if start is not None else self.grid.start
        end = end if end is not None else self.grid.end
        if start is None or end is None:
            raise ValueError("Grid has no start/end cell")
        return start, end

    def mark_path(self):
        if self.mark_grid:
            for x, y in self.path:
                self.grid.set_path(x, y)

    @abstractmethod
    def run(self, start: Optional[Coord] = None, end: Optional[Coord] = None) -> Iterator[ProgressEvent]:
        pass

    def run_all(self, start: Optional[Coord] = None, end: Optional[Coord] = None) -> SearchResult:
        for _ in self.run(start, end):
            pass
        return self.result()

    def result(self) -> SearchResult:
        if not self.finished:
            raise RuntimeError(f"{type(self).__name__} has not finished")
        return SearchResult(path=tuple(self.path), steps=self.steps, mode=self.mode)


class BFS(Solver):
    def run(self, start: Optional[Coord] = None, end: Optional[Coord] = None) -> Iterator[ProgressEvent]:
        start, end = self._endpoints(start, end)
        self.path = []
        self.steps = 0
        self.finished = False

        queue: Deque[Coord] = deque([start])
        # Parent stored when a node is queued; start has none
        parents: Dict[Coord, Optional[Coord]] = {start: None}
        found = False

        while queue:
            current = queue.popleft()
            cx, cy = current
            self.steps += 1

            if self.mark_grid:
                self.grid.set_visited(cx, cy)
            yield ProgressEvent(EVT_VISITED, cx, cy, len(queue), self.mode)

            if current == end:
                found = True
                break

            for neighbor in self.grid.get_open_neighbors(cx, cy):
                if neighbor not in parents:
                    parents[neighbor] = current
                    queue.append(neighbor)
                    yield ProgressEvent(EVT_FRONTIER, neighbor[0], neighbor[1], len(queue), self.mode)

        if found:
            self.reconstruct_path(parents, end)
            self.mark_path()
        self.finished = True

    def reconstruct_path(self, parents: Dict[Coord, Optional[Coord]], end: Coord):
        curr: Optional[Coord] = end
        while curr is not None:
            self.path.append(curr)
            curr = parents[curr]
        self.path.reverse()


class QuantumSearch(Solver):
    """
    Emulates the step profile of Grover search over the N = width * height cells.

    Only the step count is quantum flavoured: floor(sqrt(N)) oracle iterations.
    The path is whatever a classical BFS verified on the same grid, so it is always
    feasible. The verifying BFS is not counted and does not touch the grid flags.
    """
    mode = SearchMode.QUANTUM.value

    @staticmethod
    def iterations(cell_count: int) -> int:
        return math.isqrt(cell_count)

    def run(self, start: Optional[Coord] = None, end: Optional[Coord] = None) -> Iterator[ProgressEvent]:
        start, end = self._endpoints(start, end)
        self.path = []
        self.steps = 0
        self.finished = False

        verifier = BFS(self.grid, mark_grid=False)
        verified = verifier.run_all(start, end)

        total = self.iterations(len(self.grid))
        path = list(verified.path)

        for i in range(total):
            if path:
                # Walk along the verified path as iterations progress
                x, y = path[round((i + 1) * (len(path) - 1) / total)]
            else:
                x, y = end
            self.steps += 1
            if self.mark_grid:
                self.grid.set_visited(x, y)
            yield ProgressEvent(EVT_VISITED, x, y, total - i - 1, self.mode)

        self.path = path
        self.mark_path()
        self.finished = True


SOLVERS = {
    SearchMode.CLASSICAL: BFS,
    SearchMode.QUANTUM: QuantumSearch,
}


def bfs(grid: Grid) -> SearchResult:
    """Shortest start -> end path by breadth-first search. Leaves the grid's flags alone."""
    return BFS(grid, mark_grid=False).run_all()


def quantum_search(grid: Grid) -> SearchResult:
    return QuantumSearch(grid, mark_grid=False).run_all()
