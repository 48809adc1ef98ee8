import math
import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_search.core.events import EVT_FRONTIER, EVT_VISITED
from maze_search.core.grid import Grid
from maze_search.algo.generator import MazeGenerator
from maze_search.algo.solvers import BFS, QuantumSearch, bfs, quantum_search


def open_grid(size):
    grid = Grid(size, size)
    grid.set_start(0, 0)
    grid.set_end(size - 1, size - 1)
    return grid


def true_distance(grid: Grid):
    """
    Shortest start -> end edge count by repeated relaxation over every cell.
    Slow and dumb on purpose so it shares nothing with BFS. None if unreachable.
    """
    inf = float("inf")
    dist = {(x, y): inf for y in range(grid.height) for x in range(grid.width) if not grid.is_wall(x, y)}
    dist[grid.start] = 0
    changed = True
    while changed:
        changed = False
        for (x, y), d in list(dist.items()):
            for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
                n = (x + dx, y + dy)
                if n in dist and dist[n] + 1 < d:
                    d = dist[n] + 1
                    dist[(x, y)] = d
                    changed = True
    d = dist[grid.end]
    return None if d == inf else d


class TestSolvers(unittest.TestCase):
    def assertValidPath(self, grid, path):
        self.assertEqual(path[0], grid.start)
        self.assertEqual(path[-1], grid.end)
        for x, y in path:
            self.assertFalse(grid.is_wall(x, y))
        for (x1, y1), (x2, y2) in zip(path, path[1:]):
            self.assertEqual(abs(x2 - x1) + abs(y2 - y1), 1)

    def test_open_5x5(self):
        grid = open_grid(5)
        result = bfs(grid)
        # 4 right + 4 down
        self.assertEqual(result.path_length, 8)
        self.assertEqual(len(result.path), 9)
        self.assertLessEqual(result.steps, 25)
        # End is the single farthest cell, so everything gets expanded first
        self.assertEqual(result.steps, 25)
        self.assertValidPath(grid, result.path)

        quantum = quantum_search(grid)
        self.assertEqual(quantum.steps, 5)
        self.assertEqual(quantum.path, result.path)

    def test_neighbor_order_picks_down_first(self):
        grid = open_grid(3)
        self.assertEqual(bfs(grid).path, ((0, 0), (0, 1), (0, 2), (1, 2), (2, 2)))

    def test_bfs_optimality_exhaustive(self):
        gen = MazeGenerator(seed=99)
        for trial in range(60):
            density = (0.1, 0.3, 0.5)[trial % 3]
            grid = gen.generate(5, wall_density=density)
            result = bfs(grid)
            self.assertEqual(result.path_length, true_distance(grid), f"trial {trial}")
            self.assertValidPath(grid, result.path)

    def test_bfs_optimality_parsed_corridor(self):
        # 0,0 -> 0,1 -> 0,2 -> 1,2 -> 2,2 -> 3,2 -> 4,2 -> 4,3 -> 4,4
        grid = open_grid(5)
        for x, y in [(1, 0), (2, 0), (3, 0), (4, 0), (1, 1), (2, 1), (3, 1), (4, 1),
                     (0, 3), (1, 3), (2, 3), (3, 3), (0, 4), (1, 4), (2, 4), (3, 4)]:
            grid.set_wall(x, y)
        result = bfs(grid)
        self.assertEqual(len(result.path), 9)
        self.assertEqual(result.path[0], (0, 0))
        self.assertEqual(result.path[-1], (4, 4))

    def test_walled_carve_has_no_shortcut(self):
        for seed in range(10):
            gen = MazeGenerator(seed=seed)
            grid = gen.generate(12)
            carve = set(gen.last_carve)
            for y in range(12):
                for x in range(12):
                    if (x, y) not in carve:
                        grid.set_wall(x, y)
            self.assertEqual(len(bfs(grid).path), len(gen.last_carve))

    def test_walled_backtracker_carve_is_upper_bound(self):
        gen = MazeGenerator(seed=3, carve="backtracker")
        grid = gen.generate(12)
        carve = set(gen.last_carve)
        for y in range(12):
            for x in range(12):
                if (x, y) not in carve:
                    grid.set_wall(x, y)
        result = bfs(grid)
        self.assertTrue(result.found)
        self.assertLessEqual(len(result.path), len(gen.last_carve))

    def test_no_path(self):
        grid = open_grid(5)
        # Box the end in
        grid.set_wall(4, 3)
        grid.set_wall(3, 4)
        result = bfs(grid)
        self.assertEqual(result.path, ())
        self.assertFalse(result.found)
        self.assertEqual(result.path_length, 0)
        # Every reachable cell was expanded
        self.assertEqual(result.steps, 22)

        quantum = quantum_search(grid)
        self.assertEqual(quantum.path, ())
        self.assertEqual(quantum.steps, 5)

    def test_quantum_matches_classical(self):
        gen = MazeGenerator(seed=1234)
        for size in range(10, 26):
            grid = gen.generate(size)
            classical = bfs(grid)
            quantum = quantum_search(grid)
            self.assertEqual(quantum.path, classical.path)
            self.assertEqual(quantum.steps, math.floor(math.sqrt(size * size)))
            self.assertEqual(quantum.mode, "quantum")
            self.assertEqual(classical.mode, "classical")

    def test_quantum_steps_non_square(self):
        grid = Grid(3, 5)
        grid.set_start(0, 0)
        grid.set_end(2, 4)
        self.assertEqual(quantum_search(grid).steps, 3) # floor(sqrt(15))

    def test_pure_functions_leave_flags(self):
        grid = MazeGenerator(seed=5).generate(10)
        before = grid.cells.tobytes()
        bfs(grid)
        quantum_search(grid)
        self.assertEqual(grid.cells.tobytes(), before)

    def test_bfs_events_and_flags(self):
        grid = open_grid(4)
        solver = BFS(grid)
        events = list(solver.run())

        self.assertEqual(events[0].type, EVT_VISITED)
        self.assertEqual((events[0].x, events[0].y, events[0].frontier_size), (0, 0, 0))
        visited = [e for e in events if e.type == EVT_VISITED]
        queued = [e for e in events if e.type == EVT_FRONTIER]
        self.assertEqual(len(visited), solver.steps)
        self.assertEqual((visited[-1].x, visited[-1].y), (3, 3))
        # Every cell except start is queued exactly once
        self.assertEqual(len(queued), 15)

        for x, y in solver.path:
            self.assertTrue(grid.is_path(x, y))
        self.assertTrue(all(grid.is_visited(e.x, e.y) for e in visited))
        self.assertTrue(grid.cell(0, 0).is_start)

    def test_quantum_events(self):
        grid = open_grid(6)
        solver = QuantumSearch(grid)
        events = list(solver.run())

        self.assertEqual(len(events), 6)
        self.assertEqual([e.frontier_size for e in events], [5, 4, 3, 2, 1, 0])
        self.assertTrue(all(e.mode == "quantum" for e in events))
        path = set(solver.path)
        self.assertTrue(all((e.x, e.y) in path for e in events))
        self.assertEqual((events[-1].x, events[-1].y), (5, 5))

    def test_result_before_finish(self):
        solver = BFS(open_grid(3))
        with self.assertRaises(RuntimeError):
            solver.result()

    def test_missing_endpoints(self):
        with self.assertRaises(ValueError):
            bfs(Grid(3, 3))


if __name__ == '__main__':
    unittest.main()
