from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from maze_search.core.grid import Coord

# Pacing used when a human is watching. Tests and headless runs use none.
INTERACTIVE_STEP_DELAY = 0.05


class SearchMode(str, Enum):
    CLASSICAL = "classical"
    QUANTUM = "quantum"
    BOTH = "both"

    def expand(self) -> Tuple["SearchMode", ...]:
        """Concrete searches to run, in execution order."""
        if self is SearchMode.BOTH:
            return (SearchMode.CLASSICAL, SearchMode.QUANTUM)
        return (self,)


@dataclass(frozen=True)
class SearchResult:
    path: Tuple[Coord, ...]
    steps: int
    duration_ms: float = 0.0
    mode: str = SearchMode.CLASSICAL.value

    @property
    def found(self) -> bool:
        return len(self.path) > 0

    @property
    def path_length(self) -> int:
        """Edge count of the path, 0 if unreachable."""
        return max(0, len(self.path) - 1)

    def with_duration(self, duration_ms: float) -> "SearchResult":
        return replace(self, duration_ms=duration_ms)


@dataclass(frozen=True)
class RunOutcome:
    classical: Optional[SearchResult] = None
    quantum: Optional[SearchResult] = None

    @property
    def speedup(self) -> Optional[float]:
        if self.classical is None or self.quantum is None or self.quantum.steps == 0:
            return None
        return self.classical.steps / self.quantum.steps

    def results(self) -> Tuple[SearchResult, ...]:
        return tuple(r for r in (self.classical, self.quantum) if r is not None)


@dataclass(frozen=True)
class RunConfig:
    mode: SearchMode = SearchMode.BOTH
    step_delay: float = 0.0

    def __post_init__(self):
        # Accept plain strings from the CLI
        object.__setattr__(self, "mode", SearchMode(self.mode))
        if self.step_delay < 0:
            raise ValueError(f"step_delay must be >= 0, got {self.step_delay}")

    @classmethod
    def interactive(cls, mode=SearchMode.BOTH) -> "RunConfig":
        return cls(mode=mode, step_delay=INTERACTIVE_STEP_DELAY)
