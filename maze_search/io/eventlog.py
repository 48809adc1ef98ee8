import struct
from typing import Iterator, Tuple

from maze_search.core.errors import EventLogError
from maze_search.core.events import EVT_FRONTIER, EVT_VISITED, ProgressEvent

MAGIC = b"MAZERUN"

# Event Types
EVT_CODES = {EVT_VISITED: 0x01, EVT_FRONTIER: 0x02}
EVT_NAMES = {code: name for name, code in EVT_CODES.items()}

MODE_CODES = {"classical": 0x01, "quantum": 0x02}
MODE_NAMES = {code: name for name, code in MODE_CODES.items()}

# 1 byte type + 1 byte mode + 2b X + 2b Y + 2b frontier
RECORD = struct.Struct(">BBHHH")


class EventWriter:
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "wb")
        self.count = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def write_header(self, width: int, height: int):
        # Header: Magic "MAZERUN" + Width (4b) + Height (4b)
        self.file.write(MAGIC)
        self.file.write(struct.pack(">II", width, height))

    def log_event(self, event: ProgressEvent):
        # 'H' (unsigned short) is plenty, grids stay well under 65535 per side
        self.file.write(RECORD.pack(
            EVT_CODES[event.type], MODE_CODES[event.mode], event.x, event.y, event.frontier_size,
        ))
        self.count += 1

    def close(self):
        if self.file:
            self.file.close()
            self.file = None


class EventReader:
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "rb")
        self.width = 0
        self.height = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def read_header(self) -> Tuple[int, int]:
        magic = self.file.read(len(MAGIC))
        if magic != MAGIC:
            raise EventLogError(f"{self.filename} is not an event log")
        data = self.file.read(8)
        if len(data) < 8:
            raise EventLogError(f"Truncated header in {self.filename}")
        self.width, self.height = struct.unpack(">II", data)
        return self.width, self.height

    def stream_events(self) -> Iterator[ProgressEvent]:
        while True:
            data = self.file.read(RECORD.size)
            if not data:
                break
            if len(data) < RECORD.size:
                raise EventLogError(f"Truncated event record in {self.filename}")

            type_code, mode_code, x, y, frontier = RECORD.unpack(data)
            if type_code not in EVT_NAMES or mode_code not in MODE_NAMES:
                raise EventLogError(f"Unknown event record {type_code:#x}/{mode_code:#x}")
            yield ProgressEvent(EVT_NAMES[type_code], x, y, frontier, MODE_NAMES[mode_code])

    def close(self):
        if self.file:
            self.file.close()
            self.file = None
