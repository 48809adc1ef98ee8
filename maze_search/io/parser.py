from pathlib import Path
from typing import List, Optional, Union

from maze_search.core.errors import MazeFormatError
from maze_search.core.grid import Grid

WALL_CHAR = "#"
OPEN_CHAR = "."
START_CHAR = "S"
END_CHAR = "E"
PATH_CHAR = "*"
VISITED_CHAR = "o"

VALID_CHARS = {WALL_CHAR, OPEN_CHAR, START_CHAR, END_CHAR}


def parse_maze(text: str) -> Grid:
    """
    Builds a Grid from rows of '#' (wall), 'S' (start), 'E' (end) and '.' (open).
    Blank lines are ignored. Reachability is NOT checked: an unreachable maze is
    still a valid Grid, searching it just yields an empty path.
    """
    rows = [line.rstrip("\r\n") for line in text.splitlines() if line.strip()]
    if not rows:
        raise MazeFormatError("maze is empty")

    width = len(rows[0])
    for y, row in enumerate(rows):
        if len(row) != width:
            raise MazeFormatError(f"row {y} has width {len(row)}, expected {width}")

    grid = Grid(width, len(rows))
    start = end = None

    for y, row in enumerate(rows):
        for x, char in enumerate(row):
            if char not in VALID_CHARS:
                raise MazeFormatError(f"invalid maze character {char!r} at ({x}, {y})")
            if char == WALL_CHAR:
                grid.set_wall(x, y)
            elif char == START_CHAR:
                if start is not None:
                    raise MazeFormatError(f"second start cell at ({x}, {y}), first at {start}")
                start = (x, y)
            elif char == END_CHAR:
                if end is not None:
                    raise MazeFormatError(f"second end cell at ({x}, {y}), first at {end}")
                end = (x, y)

    if start is None or end is None:
        raise MazeFormatError("maze requires exactly one S (start) and one E (end)")

    grid.set_start(*start)
    grid.set_end(*end)
    return grid


def format_maze(grid: Grid, show_path: bool = False) -> str:
    lines: List[str] = []
    for row in grid.rows():
        chars = []
        for cell in row:
            if cell.is_start:
                chars.append(START_CHAR)
            elif cell.is_end:
                chars.append(END_CHAR)
            elif cell.is_wall:
                chars.append(WALL_CHAR)
            elif show_path and cell.is_path:
                chars.append(PATH_CHAR)
            elif show_path and cell.is_visited:
                chars.append(VISITED_CHAR)
            else:
                chars.append(OPEN_CHAR)
        lines.append("".join(chars))
    return "\n".join(lines)


def load_maze(path: Union[str, Path]) -> Grid:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MazeFormatError(f"{path} is not a text maze") from exc
    return parse_maze(text)


def write_maze(path: Union[str, Path], grid: Grid, show_path: bool = False) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_maze(grid, show_path=show_path) + "\n", encoding="utf-8")
    return path
