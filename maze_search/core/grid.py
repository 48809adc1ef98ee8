from array import array
from typing import Iterator, List, NamedTuple, Optional, Tuple

Coord = Tuple[int, int]


class Cell(NamedTuple):
    x: int
    y: int
    is_wall: bool
    is_start: bool
    is_end: bool
    is_visited: bool
    is_path: bool


class Grid:
    # Bitmask Constants
    WALL  = 0b00000001
    START = 0b00000010
    END   = 0b00000100

    # Per-run flags (visualization only)
    VISITED = 0b00010000
    PATH    = 0b00100000

    RUN_FLAGS = VISITED | PATH

    # Neighbor order: down, right, up, left
    DIRECTIONS = ((0, 1), (1, 0), (0, -1), (-1, 0))

    __slots__ = ('width', 'height', 'cells', 'start', 'end')

    def __init__(self, width: int, height: Optional[int] = None):
        if height is None:
            height = width
        if width < 0 or height < 0:
            raise ValueError(f"Grid dimensions must be non-negative, got {width}x{height}")
        self.width = width
        self.height = height
        # 'B' (unsigned char) -> 1 byte per cell, all open
        self.cells = array('B', [0] * (width * height))
        self.start: Optional[Coord] = None
        self.end: Optional[Coord] = None

    def __len__(self) -> int:
        return self.width * self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_index(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        raise IndexError(f"Coordinate ({x}, {y}) out of bounds")

    def cell(self, x: int, y: int) -> Cell:
        val = self.cells[self.get_index(x, y)]
        return Cell(
            x, y,
            bool(val & self.WALL),
            bool(val & self.START),
            bool(val & self.END),
            bool(val & self.VISITED),
            bool(val & self.PATH),
        )

    def rows(self) -> List[List[Cell]]:
        return [[self.cell(x, y) for x in range(self.width)] for y in range(self.height)]

    def set_start(self, x: int, y: int):
        idx = self.get_index(x, y)
        if self.start is not None:
            self.cells[self.get_index(*self.start)] &= ~self.START
        # Start is never a wall
        self.cells[idx] = (self.cells[idx] & ~self.WALL) | self.START
        self.start = (x, y)

    def set_end(self, x: int, y: int):
        idx = self.get_index(x, y)
        if self.end is not None:
            self.cells[self.get_index(*self.end)] &= ~self.END
        self.cells[idx] = (self.cells[idx] & ~self.WALL) | self.END
        self.end = (x, y)

    def set_wall(self, x: int, y: int, wall: bool = True):
        idx = self.get_index(x, y)
        if wall:
            if self.cells[idx] & (self.START | self.END):
                raise ValueError(f"Cannot place a wall on endpoint ({x}, {y})")
            self.cells[idx] |= self.WALL
        else:
            self.cells[idx] &= ~self.WALL

    def is_wall(self, x: int, y: int) -> bool:
        return (self.cells[self.get_index(x, y)] & self.WALL) != 0

    def set_visited(self, x: int, y: int, visited: bool = True):
        idx = self.get_index(x, y)
        if visited:
            self.cells[idx] |= self.VISITED
        else:
            self.cells[idx] &= ~self.VISITED

    def is_visited(self, x: int, y: int) -> bool:
        return (self.cells[self.get_index(x, y)] & self.VISITED) != 0

    def set_path(self, x: int, y: int, on_path: bool = True):
        idx = self.get_index(x, y)
        if on_path:
            self.cells[idx] |= self.PATH
        else:
            self.cells[idx] &= ~self.PATH

    def is_path(self, x: int, y: int) -> bool:
        return (self.cells[self.get_index(x, y)] & self.PATH) != 0

    def reset(self):
        """Clears the visited/path flags left by a previous run. Walls and endpoints are untouched."""
        keep = 0xFF & ~self.RUN_FLAGS
        for i in range(len(self.cells)):
            self.cells[i] &= keep

    def get_neighbors(self, x: int, y: int) -> Iterator[Coord]:
        """
        Yields (nx, ny) for all in-bounds neighbors in down, right, up, left order.
        Does NOT check walls.
        """
        for dx, dy in self.DIRECTIONS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                yield (nx, ny)

    def get_open_neighbors(self, x: int, y: int) -> Iterator[Coord]:
        """
        Yields (nx, ny) for neighbors that are NOT walls.
        """
        for nx, ny in self.get_neighbors(x, y):
            if not (self.cells[ny * self.width + nx] & self.WALL):
                yield (nx, ny)
