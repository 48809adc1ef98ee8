from typing import NamedTuple

# Event Types
EVT_VISITED = "visited"
EVT_FRONTIER = "frontier"


class ProgressEvent(NamedTuple):
    """
    One unit of observable search progress.

    type: EVT_VISITED when a cell is expanded, EVT_FRONTIER when a cell is queued.
    frontier_size: number of cells queued but not yet expanded after this event.
        For the quantum-emulated mode this is the number of oracle iterations left.
    mode: which search produced the event ("classical" or "quantum").
    """
    type: str
    x: int
    y: int
    frontier_size: int
    mode: str = "classical"
