import logging
import random
from typing import Iterator, List, Optional

from maze_search.core.errors import InvalidSizeError
from maze_search.core.grid import Coord, Grid
from maze_search.algo.base import Generator
from maze_search.algo.dfs import BacktrackerCarve

logger = logging.getLogger(__name__)

DEFAULT_WALL_DENSITY = 0.3

# Interactive size range; the generator itself only needs room for two endpoints
MIN_SIZE = 10
MAX_SIZE = 25

DIFFICULTY_SIZES = {
    "easy": 10,
    "medium": 15,
    "hard": 20,
}


def clamp_density(wall_density: float) -> float:
    return max(0.0, min(1.0, float(wall_density)))


class RandomWalls(Generator):
    def __init__(self, grid: Grid, wall_density: float = DEFAULT_WALL_DENSITY, seed: Optional[int] = None,
                 rng: Optional[random.Random] = None):
        super().__init__(grid, seed=seed, rng=rng)
        self.wall_density = clamp_density(wall_density)

    def run(self) -> Iterator[str]:
        for y in range(self.grid.height):
            for x in range(self.grid.width):
                # Endpoints are exempt
                if (x, y) == self.grid.start or (x, y) == self.grid.end:
                    continue
                if self.rng.random() < self.wall_density:
                    self.grid.set_wall(x, y)
                    self.step_count += 1
            yield f"Row {y}: {self.step_count} walls"
        yield "Done"


class StaircaseCarve(Generator):
    """
    Clears a monotone path from (0,0) to the bottom-right corner, stepping right or down.
    Random tie-break when both moves are legal, forced on the last row/column.
    """
    def run(self) -> Iterator[str]:
        x, y = 0, 0
        last_x, last_y = self.grid.width - 1, self.grid.height - 1
        path: List[Coord] = []

        while True:
            self.grid.set_wall(x, y, False)
            path.append((x, y))
            if x == last_x and y == last_y:
                break

            can_right = x < last_x
            can_down = y < last_y
            if can_right and (not can_down or self.rng.random() < 0.5):
                x += 1
            else:
                y += 1
            self.step_count += 1

        self.carved = path
        yield "Done"


CARVES = {
    "staircase": StaircaseCarve,
    "backtracker": BacktrackerCarve,
}


class MazeGenerator:
    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None, carve: str = "staircase"):
        if carve not in CARVES:
            raise ValueError(f"Unknown carve '{carve}', expected one of {sorted(CARVES)}")
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.carve = carve
        self.last_carve: List[Coord] = []

    def generate(self, size: int, wall_density: float = DEFAULT_WALL_DENSITY) -> Grid:
        if size < 2:
            raise InvalidSizeError(f"Maze size must be at least 2, got {size}")

        grid = Grid(size, size)
        grid.set_start(0, 0)
        grid.set_end(size - 1, size - 1)

        RandomWalls(grid, wall_density, rng=self.rng).run_all()

        carver = CARVES[self.carve](grid, rng=self.rng)
        carver.run_all()
        self.last_carve = list(carver.carved)
        logger.debug("Generated %dx%d maze, %s carve of %d cells", size, size, self.carve, len(self.last_carve))

        grid.reset()
        return grid

    def generate_difficulty(self, difficulty: str, wall_density: float = DEFAULT_WALL_DENSITY) -> Grid:
        if difficulty not in DIFFICULTY_SIZES:
            raise ValueError(f"Unknown difficulty '{difficulty}', expected one of {sorted(DIFFICULTY_SIZES)}")
        return self.generate(DIFFICULTY_SIZES[difficulty], wall_density)


def generate(size: int, wall_density: float = DEFAULT_WALL_DENSITY, seed: Optional[int] = None,
             carve: str = "staircase") -> Grid:
    return MazeGenerator(seed=seed, carve=carve).generate(size, wall_density)
