import unittest
import sys
import os
import shutil

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_search.core.errors import EventLogError, MazeFormatError
from maze_search.core.events import ProgressEvent
from maze_search.core.grid import Grid
from maze_search.core.result import RunConfig, SearchMode
from maze_search.core.runner import SearchRunner
from maze_search.algo.generator import MazeGenerator
from maze_search.algo.solvers import bfs
from maze_search.io.eventlog import EventReader, EventWriter
from maze_search.io.parser import format_maze, load_maze, parse_maze, write_maze
from maze_search.viz.replay import EventAdapter

SAMPLE = "\n".join([
    "S.#..",
    ".....",
    "#.#.#",
    ".....",
    "....E",
])


class TestParser(unittest.TestCase):
    def test_parse(self):
        grid = parse_maze(SAMPLE)
        self.assertEqual((grid.width, grid.height), (5, 5))
        self.assertEqual(grid.start, (0, 0))
        self.assertEqual(grid.end, (4, 4))
        self.assertTrue(grid.is_wall(2, 0))
        self.assertTrue(grid.is_wall(0, 2))
        self.assertFalse(grid.is_wall(1, 2))
        self.assertEqual(bfs(grid).path_length, 8)

    def test_format_matches_source(self):
        self.assertEqual(format_maze(parse_maze(SAMPLE)), SAMPLE)

    def test_blank_lines_and_crlf(self):
        grid = parse_maze("\r\nS..\r\n\r\n..E\r\n")
        self.assertEqual((grid.width, grid.height), (3, 2))
        self.assertEqual(grid.end, (2, 1))

    def test_endpoints_anywhere(self):
        grid = parse_maze("..E\n.#.\nS..")
        self.assertEqual(grid.start, (0, 2))
        self.assertEqual(grid.end, (2, 0))
        self.assertEqual(bfs(grid).path_length, 4)

    def test_errors(self):
        bad = {
            "empty": "\n\n",
            "ragged": "S..\n..\n..E",
            "char": "S.x\n..E",
            "no end": "S..\n...",
            "no start": "...\n..E",
            "two ends": "S.#.E\n....E",
            "two starts": "S.S\n..E",
        }
        for label, text in bad.items():
            with self.assertRaises(MazeFormatError, msg=label):
                parse_maze(text)

    def test_unreachable_is_not_an_error(self):
        grid = parse_maze("S#.\n##.\n..E")
        result = bfs(grid)
        self.assertEqual(result.path, ())
        self.assertEqual(result.steps, 1)

    def test_show_path(self):
        grid = parse_maze("S..\n.#.\n..E")
        SearchRunner().run(grid, RunConfig(mode=SearchMode.CLASSICAL))
        rendered = format_maze(grid, show_path=True)
        self.assertEqual(rendered.splitlines()[0][0], "S")
        self.assertEqual(rendered.count("*"), 3)
        self.assertNotIn("*", format_maze(grid))


class TestFiles(unittest.TestCase):
    def setUp(self):
        os.makedirs("test_out", exist_ok=True)

    def tearDown(self):
        shutil.rmtree("test_out", ignore_errors=True)

    def test_round_trip_text(self):
        grid = MazeGenerator(seed=17).generate(12)
        path = write_maze("test_out/nested/maze.txt", grid)
        self.assertTrue(path.exists())

        grid2 = load_maze(path)
        self.assertEqual(grid.cells.tobytes(), grid2.cells.tobytes())
        self.assertEqual((grid2.start, grid2.end), ((0, 0), (11, 11)))

    def test_binary_file_rejected(self):
        with open("test_out/junk.maze", "wb") as f:
            f.write(b"\xff\xfe\x00\x81")
        with self.assertRaises(MazeFormatError):
            load_maze("test_out/junk.maze")

    def test_event_log(self):
        grid = MazeGenerator(seed=4).generate(10)
        handle = SearchRunner().start(grid, RunConfig())

        with EventWriter("test_out/run.events") as writer:
            writer.write_header(grid.width, grid.height)
            events = []
            for event in handle:
                writer.log_event(event)
                events.append(event)
        self.assertEqual(writer.count, len(events))

        with EventReader("test_out/run.events") as reader:
            self.assertEqual(reader.read_header(), (10, 10))
            replayed = list(reader.stream_events())
        self.assertEqual(replayed, events)

    def test_event_log_bad_magic(self):
        with open("test_out/bad.events", "wb") as f:
            f.write(b"NOTALOG" + b"\x00" * 8)
        with EventReader("test_out/bad.events") as reader:
            with self.assertRaises(EventLogError):
                reader.read_header()

    def test_event_log_truncated(self):
        with EventWriter("test_out/short.events") as writer:
            writer.write_header(3, 3)
            writer.log_event(ProgressEvent("visited", 1, 1, 0, "classical"))
        with open("test_out/short.events", "ab") as f:
            f.write(b"\x01\x01")
        with EventReader("test_out/short.events") as reader:
            reader.read_header()
            with self.assertRaises(EventLogError):
                list(reader.stream_events())

    def test_replay_adapter(self):
        with EventWriter("test_out/replay.events") as writer:
            writer.write_header(3, 3)
            writer.log_event(ProgressEvent("visited", 0, 0, 0, "classical"))
            writer.log_event(ProgressEvent("frontier", 0, 1, 1, "classical"))
            writer.log_event(ProgressEvent("visited", 2, 2, 0, "quantum"))

        grid = Grid(3, 3)
        with EventReader("test_out/replay.events") as reader:
            reader.read_header()
            adapter = EventAdapter(grid, reader)
            counts = adapter.run_all()

        self.assertTrue(grid.is_visited(0, 0))
        self.assertFalse(grid.is_visited(0, 1))
        self.assertTrue(grid.is_visited(2, 2))
        self.assertEqual(counts[("classical", "visited")], 1)
        self.assertEqual(counts[("classical", "frontier")], 1)
        self.assertEqual(counts[("quantum", "visited")], 1)
        self.assertEqual(adapter.event_count, 3)
        self.assertEqual(adapter.latest.mode, "quantum")


if __name__ == '__main__':
    unittest.main()
