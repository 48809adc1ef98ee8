import pygame
from typing import Iterable, Optional

from maze_search.core.grid import Grid
from maze_search.core.runner import RunHandle


class Renderer:
    COLOR_BG = (10, 10, 10)
    COLOR_OPEN = (30, 30, 36)
    COLOR_WALL = (200, 200, 200)
    COLOR_START = (26, 188, 156)
    COLOR_END = (231, 76, 60)
    COLOR_VISITED = (60, 100, 160)# Blue tint
    COLOR_QUANTUM = (155, 89, 182)
    COLOR_SOLUTION = (255, 215, 0)# Gold
    COLOR_CURSOR = (255, 255, 255)

    def __init__(self, grid: Grid, source: Optional[Iterable] = None, width=960, height=720,
                 events_per_frame: int = 1, title: str = "Maze Search"):
        self.grid = grid
        # A RunHandle (live run) or any iterable of ProgressEvents (replay)
        self.source = source
        self.screen_width = width
        self.screen_height = height
        self.events_per_frame = events_per_frame
        self.title = title

        self.cell_size = 20.0
        self.offset_x = 0.0
        self.offset_y = 0.0

        self.font = None
        self.running = True
        self.clock = None
        self.surface = None
        self.source_finished = False
        self.latest = None
        self._iter = None

    @property
    def handle(self) -> Optional[RunHandle]:
        return self.source if isinstance(self.source, RunHandle) else None

    def fit_to_screen(self):
        """Auto-adjust zoom and pan to fit the entire grid on screen with padding."""
        padding = 40
        hud_height = 110
        available_w = self.screen_width - (padding * 2)
        available_h = self.screen_height - (padding * 2) - hud_height

        self.cell_size = max(1.0, min(available_w / self.grid.width, available_h / self.grid.height))

        total_maze_w = self.grid.width * self.cell_size
        total_maze_h = self.grid.height * self.cell_size
        self.offset_x = (self.screen_width - total_maze_w) / 2
        self.offset_y = hud_height + (self.screen_height - hud_height - total_maze_h) / 2

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(f"{self.title} - {self.grid.width}x{self.grid.height}")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)
        self.fit_to_screen()

    def world_to_screen(self, wx, wy):
        sx = wx * self.cell_size + self.offset_x
        sy = wy * self.cell_size + self.offset_y
        return sx, sy

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = event.w, event.h
                self.fit_to_screen()

    def step_source(self):
        if self.source_finished or self.source is None:
            return

        handle = self.handle
        if handle is not None and handle.config.step_delay > 0:
            # Paced run: the search sleeps between events, so let it do that off the UI thread
            if self._iter is None:
                handle.run_in_background()
                self._iter = handle
            self.latest = handle.latest
            self.source_finished = handle.done
            return

        if self._iter is None:
            self._iter = iter(self.source)
        try:
            for _ in range(self.events_per_frame):
                self.latest = next(self._iter)
        except StopIteration:
            self.source_finished = True

    def cell_color(self, x: int, y: int):
        cell = self.grid.cell(x, y)
        if cell.is_start:
            return self.COLOR_START
        if cell.is_end:
            return self.COLOR_END
        if cell.is_wall:
            return self.COLOR_WALL
        if cell.is_path:
            return self.COLOR_SOLUTION
        if cell.is_visited:
            return self.COLOR_VISITED
        return self.COLOR_OPEN

    def draw_grid(self):
        self.surface.fill(self.COLOR_BG)
        size = max(1, int(self.cell_size) - 1)

        for y in range(self.grid.height):
            for x in range(self.grid.width):
                sx, sy = self.world_to_screen(x, y)
                pygame.draw.rect(self.surface, self.cell_color(x, y), (int(sx), int(sy), size, size))

        # Most recent event
        if self.latest is not None and self.grid.in_bounds(self.latest.x, self.latest.y):
            sx, sy = self.world_to_screen(self.latest.x, self.latest.y)
            color = self.COLOR_QUANTUM if self.latest.mode == "quantum" else self.COLOR_CURSOR
            pygame.draw.rect(self.surface, color, (int(sx), int(sy), size, size), 2)

    def hud_lines(self):
        lines = [f"Size: {self.grid.width}x{self.grid.height}  FPS: {int(self.clock.get_fps())}"]
        handle = self.handle
        if handle is not None:
            lines.append(f"Mode: {handle.config.mode.value}  State: {handle.state.value}  Events: {handle.event_count}")
        else:
            lines.append(f"Status: {'Done' if self.source_finished else 'Replaying'}")

        if self.latest is not None:
            lines.append(f"[{self.latest.mode}] {self.latest.type} ({self.latest.x}, {self.latest.y})  "
                         f"frontier: {self.latest.frontier_size}")

        if handle is not None and handle.outcome is not None:
            for result in handle.outcome.results():
                lines.append(f"{result.mode}: path {result.path_length}  steps {result.steps}  "
                             f"{result.duration_ms:.0f} ms")
        return lines

    def draw_hud(self):
        for i, text in enumerate(self.hud_lines()):
            lbl = self.font.render(text, True, (255, 255, 255))
            self.surface.blit(lbl, (10, 10 + i * 20))

    def run_loop(self):
        while self.running:
            self.handle_input()
            self.step_source()

            self.draw_grid()
            self.draw_hud()
            pygame.display.flip()
            self.clock.tick(60)

        # Closing the window mid-run cancels it
        handle = self.handle
        if handle is not None and not handle.done:
            handle.cancel()
        pygame.quit()
