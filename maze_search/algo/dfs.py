from typing import Iterator, List

from maze_search.core.grid import Coord, Grid
from maze_search.algo.base import Generator


class BacktrackerCarve(Generator):
    """
    Randomized depth-first walk from start that stops as soon as it reaches the end.
    The stack at that moment is a self-avoiding start -> end path; its walls are cleared.
    Less diagonal than the staircase carve, same reachability guarantee.
    """
    def run(self) -> Iterator[str]:
        start, end = self.grid.start, self.grid.end
        if start is None or end is None:
            raise ValueError("Grid needs a start and an end before carving")

        self.grid.set_visited(*start)
        stack: List[Coord] = [start]

        while stack:
            cx, cy = stack[-1]
            if (cx, cy) == end:
                break

            # Walls don't matter here, every in-bounds cell is a candidate
            neighbors = [
                (nx, ny) for nx, ny in self.grid.get_neighbors(cx, cy)
                if not self.grid.is_visited(nx, ny)
            ]

            if neighbors:
                nx, ny = self.rng.choice(neighbors)
                self.grid.set_visited(nx, ny)
                stack.append((nx, ny))
                self.step_count += 1

                if self.step_count % 100 == 0:
                    yield f"Walking... Stack: {len(stack)}"
            else:
                # Backtrack
                stack.pop()

        for x, y in stack:
            self.grid.set_wall(x, y, False)
        self.carved = stack
        yield "Done"
