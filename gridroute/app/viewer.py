# gridroute/app/viewer.py
#!/usr/bin/env python3
"""
Route Viewer: watch the backtracking search one frame at a time

- Keyboard:
    [1]/[2]/[3]  -> switch map
    [SPACE]      -> run/pause
    [N]          -> single step
    [R]          -> reset
    [S]          -> show straightened / raw route
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit

Map selection:
- ENV: GRIDROUTE_MAP=<map key>
- CLI: --map=<map key>
"""

# --- bootstrap import path so `from gridroute...` works when run as a script ---
import sys, os, time
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------------

from typing import List, Tuple, Optional, Dict
import pygame

from gridroute.core.backtrack import BacktrackSearch
from gridroute.core.maps import MapSpec, load_map
from gridroute.core.route import reconstruct, straighten, to_waypoints
from gridroute.core.types import Cell, Coordinate, InvalidArgument

# ---------- Config ----------
MAP_DIR = _REPO_ROOT / "maps"
MAP_FILES = {
    "01_open_field":  MAP_DIR / "01_open_field.json",
    "02_l_corridor":  MAP_DIR / "02_l_corridor.json",
    "03_walled_rooms": MAP_DIR / "03_walled_rooms.json",
}
DEFAULT_MAP = "03_walled_rooms"
PANEL_W = 360            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 24
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
BLUE        = ( 70,130,180)
RED         = (220, 50, 47)
FLOOR_GRAY  = (200,200,200)
WALL_DARK   = ( 30, 32, 38)
STACK_A     = (0,150,255,110)
DEAD_END_A  = (255,0,120,90)
RAW_AMBER   = (255,190, 60)
NEON_MINT   = (0,255,200)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)
BG_TOP      = (24, 26, 32)
BG_BOT      = (36, 40, 48)


# ---------- Map selection ----------
def resolve_map_key(argv: Optional[List[str]] = None, environ=None) -> str:
    environ = os.environ if environ is None else environ
    argv = sys.argv if argv is None else argv
    key = environ.get("GRIDROUTE_MAP", DEFAULT_MAP)
    for arg in argv:
        if arg.startswith("--map="):
            key = arg.split("=", 1)[1]
    return key if key in MAP_FILES else DEFAULT_MAP


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)
        border_active = (120, 170, 255, 255)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event):
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()


# ---------- Viewer ----------
class Viewer:
    def __init__(self, spec: MapSpec, map_key: str = "custom"):
        pygame.init()

        self.spec = spec
        self.grid = spec.to_grid()
        self.selected_map_key = map_key
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        self.cell_size = max(14, min(CELL_SIZE_DEFAULT, (720 - GRID_MARGIN*2) // spec.height))
        win_w = GRID_MARGIN*2 + spec.width * self.cell_size + PANEL_W
        win_h = max(GRID_MARGIN*2 + spec.height * self.cell_size, 600)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption(f"Grid Route — {map_key}")

        self.stack_cells: set[Cell] = set()
        self.dead_ends: set[Cell] = set()
        self.raw_route: List[Coordinate] = []
        self.waypoints: List[Coordinate] = []
        self.show_straight = True

        self.running = False
        self.clock = pygame.time.Clock()
        self.steps_per_sec = 8
        self.state = "Idle"

        self._buttons: list[UIButton] = []
        self._layout(win_w, win_h)

        self.algo = BacktrackSearch()
        self.algo.init(self.grid, spec.start, spec.goal)
        self._last_metrics: Dict = {}
        self._refresh_active_states()

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Integer cell_size that fits the window; grid left, panel right."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(8, min(avail_w // self.spec.width, avail_h // self.spec.height)))

        grid_plate_w = self.spec.width  * self.cell_size + 2 * GRID_MARGIN
        grid_plate_h = self.spec.height * self.cell_size + 2 * GRID_MARGIN
        top_y = max(0, (win_h - grid_plate_h) // 2)

        self.canvas_rect = pygame.Rect(0, top_y, grid_plate_w, grid_plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN, self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()

    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    def _tick_algorithm(self):
        t0 = time.time()
        step_interval = 1.0 / max(1, self.steps_per_sec)
        if not hasattr(self, "_last_step_t"):
            self._last_step_t = 0.0
        if t0 - self._last_step_t >= step_interval:
            self._last_step_t = t0
            self._do_step()

    def _do_step(self):
        res = self.algo.step()
        for c in res.opened:
            self.stack_cells.add(c)
        if res.status != "done":
            for c in res.closed:
                self.stack_cells.discard(c)
                self.dead_ends.add(c)
        if res.status == "done":
            self.state = "Done"; self.running = False
            self._build_routes()
        elif res.status == "no_path":
            self.state = "No path"; self.running = False
        elif res.status in ("running", "idle"):
            self.state = "Running" if self.running else "Idle"
        if res.metrics:
            self._last_metrics = res.metrics
        self._refresh_active_states()

    def _build_routes(self):
        if self.spec.start == self.spec.goal:
            self.raw_route = [Coordinate(*self.spec.start)]
        else:
            self.raw_route = reconstruct(self.grid, self.spec.start, self.spec.goal) or []
        self.waypoints = to_waypoints(straighten(self.grid, self.raw_route)) if self.raw_route else []

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_SPACE:
                    self._toggle_run()
                elif e.key == pygame.K_r:
                    self._reset()
                elif e.key == pygame.K_n:
                    self._do_step()
                elif e.key == pygame.K_s:
                    self._toggle_straight()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._bump_speed(+1)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self._bump_speed(-1)
                elif e.key == pygame.K_1:
                    self._switch_map("01_open_field")
                elif e.key == pygame.K_2:
                    self._switch_map("02_l_corridor")
                elif e.key == pygame.K_3:
                    self._switch_map("03_walled_rooms")
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((max(640, e.w), max(480, e.h)), pygame.RESIZABLE)
                self._layout(*self.screen.get_size())
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                for b in self._buttons:
                    b.handle_mouse(e)

    def _switch_map(self, key: str):
        if key not in MAP_FILES: return
        try:
            spec = load_map(MAP_FILES[key])
        except InvalidArgument as ex:
            print(f"Failed to load map {key}: {ex}")
            return
        self.spec = spec
        self.grid = spec.to_grid()
        self.selected_map_key = key
        pygame.display.set_caption(f"Grid Route — {key}")
        self.algo.init(self.grid, spec.start, spec.goal)
        self._reset()
        self._layout(*self.screen.get_size())

    def _reset_overlays(self):
        self.stack_cells.clear()
        self.dead_ends.clear()
        self.raw_route = []
        self.waypoints = []
        self._last_metrics = {}

    def _reset(self):
        self.running = False
        self.state = "Idle"
        self.algo.reset()
        self._reset_overlays()
        self._refresh_active_states()

    def _toggle_run(self):
        if self.state in ("Done", "No path"):
            return
        self.running = not self.running
        self.state = "Running" if self.running else "Paused"
        self._refresh_active_states()

    def _toggle_straight(self):
        self.show_straight = not self.show_straight
        self._refresh_active_states()

    def _bump_speed(self, dv: int):
        self.steps_per_sec = int(max(1, min(60, self.steps_per_sec + dv)))

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        for y in range(h):
            t = y / max(1, h-1)
            c = tuple(int(BG_TOP[i] + (BG_BOT[i]-BG_TOP[i]) * t) for i in range(3))
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _cell_center(self, col: int, row: int) -> Tuple[int, int]:
        cs = self.cell_size
        ox, oy = self._grid_origin
        return ox + col*cs + cs//2, oy + row*cs + cs//2

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin

        for row in range(self.spec.height):
            for col in range(self.spec.width):
                rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
                color = WALL_DARK if self.spec.is_block((col, row)) else FLOOR_GRAY
                pygame.draw.rect(self.screen, color, rect)
                pygame.draw.rect(self.screen, BLACK, rect, 1)

        # overlays: abandoned branches, then the live stack
        for cells, rgba in ((self.dead_ends, DEAD_END_A), (self.stack_cells, STACK_A)):
            for (col, row) in cells:
                s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(rgba)
                self.screen.blit(s, (ox + col*cs, oy + row*cs))

        route = self.waypoints if self.show_straight else self.raw_route
        if len(route) >= 2:
            pts = [self._cell_center(*c.cell) for c in route]
            color = NEON_MINT if self.show_straight else RAW_AMBER
            pygame.draw.lines(self.screen, color, False, pts, 5)
            for p in pts:
                pygame.draw.circle(self.screen, color, p, max(3, cs // 6))

        self._draw_badge(self.spec.start, BLUE, "S")
        self._draw_badge(self.spec.goal, RED, "G")

    def _draw_badge(self, cell: Cell, color: Tuple[int,int,int], label: str):
        cx, cy = self._cell_center(*cell)
        pygame.draw.circle(self.screen, color, (cx, cy), max(6, self.cell_size//2 - 2))
        txt = self.font_small.render(label, True, WHITE)
        self.screen.blit(txt, txt.get_rect(center=(cx, cy)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 230  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 36
        gap = 8

        def add(label, cb, *, togglable=False, store_as: str | None = None):
            btn = UIButton(label, pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Run / Pause", self._toggle_run, togglable=True, store_as="btn_run"); y += h + gap
        add("Step Once", self._do_step); y += h + gap
        add("Reset", self._reset);       y += h + gap
        add("Straightened", self._toggle_straight, togglable=True, store_as="btn_straight"); y += h + gap

        half = (w - 8) // 2
        self._buttons.append(UIButton("Speed −", pygame.Rect(x, y, half, h), lambda: self._bump_speed(-1)))
        self._buttons.append(UIButton("Speed +", pygame.Rect(x + half + 8, y, half, h), lambda: self._bump_speed(+1)))
        y += h + gap

        for i, key in enumerate(MAP_FILES, start=1):
            add(f"Map {i}: {key[3:].replace('_', ' ')}", lambda k=key: self._switch_map(k),
                togglable=True, store_as=f"btn_map{i}")
            y += h + gap

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(self.running)
        if hasattr(self, "btn_straight"):
            self.btn_straight.set_active(self.show_straight)
        for i, key in enumerate(MAP_FILES, start=1):
            btn = getattr(self, f"btn_map{i}", None)
            if btn is not None:
                btn.set_active(self.selected_map_key == key)

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card = pygame.Surface((rb.width - 20, 210), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        m = self._last_metrics
        line("Metrics", big=True, color=ACCENT_GOLD)
        line(f"State: {self.state}")
        line(f"Descents: {m.get('expanded', 0)}   Dead ends: {m.get('dead_ends', 0)}")
        line(f"Depth: {m.get('depth', 0)}   Max: {m.get('max_depth', 0)}")
        line(f"Raw route: {len(self.raw_route)} cells")
        line(f"Waypoints: {len(self.waypoints)}")
        line(f"Speed: {self.steps_per_sec} steps/s")

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main():
    key = resolve_map_key()
    try:
        spec = load_map(MAP_FILES[key])
    except InvalidArgument as ex:
        print(f"Failed to load map {key}: {ex}")
        sys.exit(1)
    Viewer(spec, key).run()

if __name__ == "__main__":
    main()
