class MazeSearchError(Exception):
    pass


class InvalidSizeError(MazeSearchError, ValueError):
    """Maze generation was asked for a grid too small to hold a start and an end."""


class EmptyGridError(MazeSearchError, ValueError):
    pass


class AlreadyRunningError(MazeSearchError, RuntimeError):
    """start() was called while the runner still had a run in flight."""


class MazeFormatError(MazeSearchError, ValueError):
    pass


class EventLogError(MazeSearchError, ValueError):
    """An event log file is not a MAZERUN log or is cut short."""


class MissingEndpointsError(MazeSearchError, ValueError):
    pass
