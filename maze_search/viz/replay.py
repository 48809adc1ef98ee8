from collections import Counter
from typing import Iterator, Optional

from maze_search.core.events import EVT_VISITED, ProgressEvent
from maze_search.core.grid import Grid
from maze_search.io.eventlog import EventReader


class EventAdapter:
    """
    Adapts an EventReader stream to look like a live run for the Renderer.
    Applies visited flags to the Grid as it iterates.
    """
    def __init__(self, grid: Grid, reader: EventReader):
        self.grid = grid
        self.reader = reader
        self.latest: Optional[ProgressEvent] = None
        self.event_count = 0
        # (mode, type) -> count
        self.counts: Counter = Counter()

    def __iter__(self) -> Iterator[ProgressEvent]:
        for event in self.reader.stream_events():
            if event.type == EVT_VISITED and self.grid.in_bounds(event.x, event.y):
                self.grid.set_visited(event.x, event.y)
            self.latest = event
            self.event_count += 1
            self.counts[(event.mode, event.type)] += 1
            yield event

    def run_all(self):
        for _ in self:
            pass
        return self.counts
