import argparse
import sys
import os
import logging

# Ensure project root is in path so we can import 'maze_search' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_search.algo.generator import (
    CARVES, DEFAULT_WALL_DENSITY, DIFFICULTY_SIZES, MAX_SIZE, MIN_SIZE, MazeGenerator,
)
from maze_search.core.errors import MazeSearchError
from maze_search.core.result import INTERACTIVE_STEP_DELAY, SearchMode

logger = logging.getLogger("maze_search")


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def maze_size(value: str) -> int:
    size = int(value)
    if not MIN_SIZE <= size <= MAX_SIZE:
        raise argparse.ArgumentTypeError(f"size must be between {MIN_SIZE} and {MAX_SIZE}")
    return size


def add_maze_options(parser: argparse.ArgumentParser):
    parser.add_argument("--size", type=maze_size, default=15, help=f"Maze side length ({MIN_SIZE}-{MAX_SIZE})")
    parser.add_argument("--difficulty", choices=sorted(DIFFICULTY_SIZES), help="Preset size (overrides --size)")
    parser.add_argument("--density", type=float, default=DEFAULT_WALL_DENSITY, help="Wall density (0.0 - 1.0)")
    parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    parser.add_argument("--carve", choices=sorted(CARVES), default="staircase", help="Guaranteed-path carve")


def build_grid(args):
    generator = MazeGenerator(seed=args.seed, carve=args.carve)
    label = args.difficulty or f"{args.size}x{args.size}"
    logger.info(f"Generating {label} maze (density={args.density}, carve={args.carve}, seed={args.seed})...")
    if args.difficulty:
        return generator.generate_difficulty(args.difficulty, args.density)
    return generator.generate(args.size, args.density)


def print_outcome(outcome):
    print(f"\n{'MODE':<10} | {'PATH':<6} | {'STEPS':<6} | {'TIME (ms)':<10}")
    print("-" * 42)
    for result in outcome.results():
        path = result.path_length if result.found else "none"
        print(f"{result.mode:<10} | {path:<6} | {result.steps:<6} | {result.duration_ms:<10.1f}")
    if outcome.speedup is not None:
        print(f"\nStep speedup (classical / quantum): {outcome.speedup:.2f}x")


def cmd_generate(args):
    from maze_search.io.parser import format_maze, write_maze

    grid = build_grid(args)
    if args.out:
        write_maze(args.out, grid)
        logger.info(f"Saved maze to {args.out}")
    else:
        print(format_maze(grid))


def cmd_run(args):
    from maze_search.core.result import RunConfig
    from maze_search.core.runner import SearchRunner
    from maze_search.io.parser import format_maze, load_maze

    if args.input_file:
        logger.info(f"Loading {args.input_file}...")
        grid = load_maze(args.input_file)
    else:
        grid = build_grid(args)

    delay = args.delay
    if delay is None:
        delay = INTERACTIVE_STEP_DELAY if args.visual else 0.0
    config = RunConfig(mode=args.mode, step_delay=delay)

    runner = SearchRunner()
    handle = runner.start(grid, config)
    logger.info(f"Running {config.mode.value} search on {grid.width}x{grid.height} (delay={delay}s)...")

    if args.visual:
        from maze_search.viz.renderer import Renderer
        renderer = Renderer(grid, source=handle)
        renderer.init_window()
        renderer.run_loop()
    else:
        writer = None
        if args.record_events:
            from maze_search.io.eventlog import EventWriter
            writer = EventWriter(args.record_events)
            writer.write_header(grid.width, grid.height)
            logger.info(f"Recording events to {args.record_events}...")
        try:
            for event in handle:
                if writer:
                    writer.log_event(event)
                if delay or handle.event_count % 100 == 0:
                    print(f"\r[{event.mode}] {event.type:<8} ({event.x:>2}, {event.y:>2}) "
                          f"frontier: {event.frontier_size:<4}", end="", flush=True)
        except KeyboardInterrupt:
            runner.cancel(handle)
            logger.warning("Run cancelled.")
        finally:
            if writer:
                writer.close()
                logger.info(f"Saved {writer.count} events to {args.record_events}")
        print()

    if handle.outcome is None:
        logger.info("No results (run cancelled).")
        return

    if args.show:
        print(format_maze(grid, show_path=True))
    print_outcome(handle.outcome)


def cmd_replay(args):
    from maze_search.core.grid import Grid
    from maze_search.io.eventlog import EventReader
    from maze_search.viz.replay import EventAdapter

    logger.info(f"Replaying {args.event_file}...")
    with EventReader(args.event_file) as reader:
        w, h = reader.read_header()
        logger.info(f"Log Header: {w}x{h}")

        if args.maze:
            from maze_search.io.parser import load_maze
            logger.info(f"Loading base maze from {args.maze}...")
            grid = load_maze(args.maze)
            if grid.width != w or grid.height != h:
                logger.warning(f"Maze file dims ({grid.width}x{grid.height}) do not match event file ({w}x{h}). Visuals may be wrong.")
        else:
            grid = Grid(w, h)

        adapter = EventAdapter(grid, reader)
        if args.visual:
            from maze_search.viz.renderer import Renderer
            renderer = Renderer(grid, source=adapter, title="Maze Search Replay")
            renderer.init_window()
            renderer.run_loop()
        else:
            counts = adapter.run_all()
            print(f"{'MODE':<10} | {'VISITED':<8} | {'FRONTIER':<8}")
            print("-" * 32)
            for mode in (SearchMode.CLASSICAL.value, SearchMode.QUANTUM.value):
                visited, frontier = counts[(mode, "visited")], counts[(mode, "frontier")]
                if visited or frontier:
                    print(f"{mode:<10} | {visited:<8} | {frontier:<8}")
            print(f"\nTotal events: {adapter.event_count}")


def cmd_benchmark(args):
    from maze_search.benchmark import compare_sizes, format_table

    logger.info(f"Running comparison over sizes {args.sizes} ({args.trials} trials each)...")
    rows = compare_sizes(args.sizes, trials=args.trials, seed=args.seed, wall_density=args.density)
    print(format_table(rows))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maze Search: classical BFS vs quantum-emulated search")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate Command
    gen_parser = subparsers.add_parser("generate", help="Generate a new maze")
    add_maze_options(gen_parser)
    gen_parser.add_argument("--out", type=str, help="Output file path (prints to stdout if omitted)")

    # Run Command
    run_parser = subparsers.add_parser("run", help="Search a generated or loaded maze")
    run_parser.add_argument("input_file", nargs="?", help="Text maze file (generates one if omitted)")
    add_maze_options(run_parser)
    run_parser.add_argument("--mode", choices=[m.value for m in SearchMode], default="both", help="Search mode")
    run_parser.add_argument("--delay", type=float, default=None,
                            help=f"Per-step pacing in seconds (default 0, or {INTERACTIVE_STEP_DELAY} with --visual)")
    run_parser.add_argument("--visual", action="store_true", help="Show visualization")
    run_parser.add_argument("--show", action="store_true", help="Print the maze with visited/path cells")
    run_parser.add_argument("--record-events", type=str, help="Save progress events to binary file")

    # Replay Command
    replay_parser = subparsers.add_parser("replay", help="Replay an event log")
    replay_parser.add_argument("event_file", help="Path to event log file")
    replay_parser.add_argument("--maze", type=str, help="Optional text maze to load walls from")
    replay_parser.add_argument("--visual", action="store_true", help="Show visualization")

    # Benchmark Command
    bench_parser = subparsers.add_parser("benchmark", help="Compare step counts across maze sizes")
    bench_parser.add_argument("--sizes", type=maze_size, nargs="+", default=[10, 15, 20, 25], help="Maze sizes")
    bench_parser.add_argument("--trials", type=int, default=5, help="Mazes per size")
    bench_parser.add_argument("--density", type=float, default=DEFAULT_WALL_DENSITY, help="Wall density")
    bench_parser.add_argument("--seed", type=int, default=None, help="Random Seed")

    return parser


COMMANDS = {
    "generate": cmd_generate,
    "run": cmd_run,
    "replay": cmd_replay,
    "benchmark": cmd_benchmark,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run" and args.visual and args.record_events:
        parser.error("--record-events cannot be combined with --visual")

    logger.debug(f"Running command: {args.command}")
    try:
        COMMANDS[args.command](args)
    except (MazeSearchError, OSError) as exc:
        logger.error(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
