import itertools
import logging
import threading
import time
from enum import Enum
from typing import Dict, Iterator, Optional

from maze_search.algo.solvers import SOLVERS
from maze_search.core.errors import AlreadyRunningError, EmptyGridError, MissingEndpointsError
from maze_search.core.events import ProgressEvent
from maze_search.core.grid import Grid
from maze_search.core.result import RunConfig, RunOutcome, SearchMode, SearchResult

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RunHandle:
    """
    One run of a SearchRunner.

    Iterating the handle drives the searches: each next() advances the current
    algorithm to its next progress event. The stream is finite and can only be
    consumed once. When it ends naturally `outcome` holds the results; a cancelled
    run ends early and `outcome` stays None.
    """
    def __init__(self, runner: "SearchRunner", grid: Grid, config: RunConfig, run_id: int):
        self.runner = runner
        self.grid = grid
        self.config = config
        self.run_id = run_id
        self.state = RunState.RUNNING
        self.outcome: Optional[RunOutcome] = None
        self.latest: Optional[ProgressEvent] = None
        self.event_count = 0
        self.error: Optional[BaseException] = None

        self._cancel = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._events = self._produce()

    def __iter__(self) -> Iterator[ProgressEvent]:
        return self

    def __next__(self) -> ProgressEvent:
        return next(self._events)

    def __repr__(self):
        return f"<RunHandle #{self.run_id} {self.config.mode.value} {self.state.value}>"

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    @property
    def done(self) -> bool:
        return self.state in (RunState.COMPLETED, RunState.CANCELLED)

    def cancel(self) -> bool:
        return self.runner.cancel(self)

    def _produce(self) -> Iterator[ProgressEvent]:
        results: Dict[SearchMode, SearchResult] = {}
        delay = self.config.step_delay
        try:
            for mode in self.config.mode.expand():
                solver = SOLVERS[mode](self.grid)
                t_start = time.perf_counter()

                for event in solver.run():
                    if self._cancel.is_set():
                        return
                    self.latest = event
                    self.event_count += 1
                    yield event

                    # Checkpoint: the consumer may have cancelled while we were suspended
                    if self._cancel.is_set():
                        return
                    if delay and self._cancel.wait(delay):
                        return

                duration_ms = (time.perf_counter() - t_start) * 1000.0
                results[mode] = solver.result().with_duration(duration_ms)
                logger.debug("Run #%d: %s finished in %.1f ms, %d steps",
                             self.run_id, mode.value, duration_ms, results[mode].steps)

            self.runner._complete(self, RunOutcome(
                classical=results.get(SearchMode.CLASSICAL),
                quantum=results.get(SearchMode.QUANTUM),
            ))
        finally:
            # Closed early by the consumer or failed mid-search
            if self.state is RunState.RUNNING:
                self.runner.cancel(self)

    def run(self) -> Optional[RunOutcome]:
        """Drains the event stream in this thread. Returns None if the run was cancelled."""
        for _ in self:
            pass
        return self.outcome

    def run_in_background(self) -> threading.Thread:
        """
        Drains the event stream on a daemon thread so a renderer can poll `latest`
        and the grid flags without blocking the search.
        """
        if self._thread is not None:
            raise RuntimeError(f"{self!r} is already draining in the background")

        def drain():
            try:
                for _ in self:
                    pass
            except BaseException as exc:
                self.error = exc
                raise

        self._thread = threading.Thread(target=drain, name=f"maze-search-run-{self.run_id}", daemon=True)
        self._thread.start()
        return self._thread

    def wait_stopped(self, timeout: Optional[float] = None):
        """Blocks until a background drain has left the solver."""
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def join(self, timeout: Optional[float] = None) -> Optional[RunOutcome]:
        if self._thread is not None:
            self._thread.join(timeout)
        if self.error is not None:
            raise self.error
        return self.outcome


class SearchRunner:
    """
    Runs classical and/or quantum-emulated search on a grid, one run at a time.

    States: IDLE -> RUNNING -> COMPLETED | CANCELLED. reset() goes back to IDLE;
    start() from COMPLETED or CANCELLED resets implicitly.
    """
    def __init__(self):
        self.state = RunState.IDLE
        self.grid: Optional[Grid] = None
        self.active: Optional[RunHandle] = None
        self.last: Optional[RunHandle] = None
        self._lock = threading.Lock()
        self._ids = itertools.count(1)

    def start(self, grid: Grid, config: Optional[RunConfig] = None) -> RunHandle:
        if config is None:
            config = RunConfig()
        self._settle()
        with self._lock:
            if self.state is RunState.RUNNING:
                raise AlreadyRunningError(f"Runner is busy with {self.active!r}")
            if grid is None or len(grid) == 0:
                raise EmptyGridError("Cannot search a grid with zero cells")
            if grid.start is None or grid.end is None:
                raise MissingEndpointsError("Grid needs both a start and an end cell")

            grid.reset()
            self.grid = grid
            handle = RunHandle(self, grid, config, next(self._ids))
            self.active = handle
            self.last = handle
            self._set_state(RunState.RUNNING)
            return handle

    def cancel(self, handle: Optional[RunHandle] = None) -> bool:
        """
        Cancels a running run. Returns False if it had already finished.
        The search stops at its next checkpoint; no result is produced.
        """
        with self._lock:
            if handle is None:
                handle = self.active
            if handle is None or handle.state is not RunState.RUNNING:
                return False
            handle.state = RunState.CANCELLED
            handle._cancel.set()
            if self.active is handle:
                self.active = None
                self._set_state(RunState.CANCELLED)
            return True

    def reset(self):
        self._settle()
        with self._lock:
            if self.state is RunState.RUNNING:
                raise AlreadyRunningError("Cancel the active run before resetting")
            if self.grid is not None:
                self.grid.reset()
            self._set_state(RunState.IDLE)

    def run(self, grid: Grid, config: Optional[RunConfig] = None) -> Optional[RunOutcome]:
        """start() and drain in one call."""
        return self.start(grid, config).run()

    def _complete(self, handle: RunHandle, outcome: RunOutcome):
        with self._lock:
            # A cancel that raced the last step wins
            if handle.state is not RunState.RUNNING:
                return
            handle.outcome = outcome
            handle.state = RunState.COMPLETED
            if self.active is handle:
                self.active = None
                self._set_state(RunState.COMPLETED)

    def _settle(self):
        # A cancelled background drain may still be mid-step on the grid
        previous = self.last
        if previous is not None and previous.state is not RunState.RUNNING:
            previous.wait_stopped()

    def _set_state(self, state: RunState):
        logger.debug("Runner %s -> %s", self.state.value, state.value)
        self.state = state
