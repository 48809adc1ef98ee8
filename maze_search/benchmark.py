import math
from dataclasses import asdict, dataclass
from typing import Iterable, List, Optional

from maze_search.algo.generator import DEFAULT_WALL_DENSITY, MazeGenerator
from maze_search.core.result import RunConfig, SearchMode
from maze_search.core.runner import SearchRunner


@dataclass
class ScaleRow:
    size: int
    cells: int
    trials: int
    classical_steps: float
    quantum_steps: float
    path_length: float
    classical_ms: float
    quantum_ms: float

    @property
    def speedup(self) -> float:
        return self.classical_steps / self.quantum_steps if self.quantum_steps else 0.0

    def as_dict(self):
        data = asdict(self)
        data["speedup"] = self.speedup
        return data


def compare_sizes(sizes: Iterable[int], trials: int = 5, seed: Optional[int] = None,
                  wall_density: float = DEFAULT_WALL_DENSITY, carve: str = "staircase") -> List[ScaleRow]:
    """Averages classical vs quantum-emulated step counts over `trials` mazes per size."""
    if trials < 1:
        raise ValueError(f"trials must be >= 1, got {trials}")

    generator = MazeGenerator(seed=seed, carve=carve)
    runner = SearchRunner()
    config = RunConfig(mode=SearchMode.BOTH)
    rows = []

    for size in sizes:
        totals = {"classical": 0, "quantum": 0, "path": 0, "classical_ms": 0.0, "quantum_ms": 0.0}
        for _ in range(trials):
            grid = generator.generate(size, wall_density)
            outcome = runner.run(grid, config)
            totals["classical"] += outcome.classical.steps
            totals["quantum"] += outcome.quantum.steps
            totals["path"] += outcome.classical.path_length
            totals["classical_ms"] += outcome.classical.duration_ms
            totals["quantum_ms"] += outcome.quantum.duration_ms

        rows.append(ScaleRow(
            size=size,
            cells=size * size,
            trials=trials,
            classical_steps=totals["classical"] / trials,
            quantum_steps=totals["quantum"] / trials,
            path_length=totals["path"] / trials,
            classical_ms=totals["classical_ms"] / trials,
            quantum_ms=totals["quantum_ms"] / trials,
        ))
    return rows


def format_table(rows: List[ScaleRow]) -> str:
    lines = [
        f"{'SIZE':<7} | {'N':<5} | {'sqrt(N)':<7} | {'BFS STEPS':<10} | {'QUANTUM':<8} | {'PATH':<6} | {'SPEEDUP':<7}",
        "-" * 68,
    ]
    for row in rows:
        lines.append(
            f"{row.size:>2}x{row.size:<4} | {row.cells:<5} | {math.isqrt(row.cells):<7} | "
            f"{row.classical_steps:<10.1f} | {row.quantum_steps:<8.1f} | {row.path_length:<6.1f} | "
            f"{row.speedup:<7.2f}"
        )
    return "\n".join(lines)
