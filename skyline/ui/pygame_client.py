"""Pygame 2D viewer for a Skyline city session.

Draws the tile grid, locked sectors, the stats panel and the message feed,
and turns mouse/keyboard input into engine actions.  The engine's tick
scheduler is fed the frame time scaled by the current speed multiplier, so
the viewer never calls ``step`` directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import pygame

if TYPE_CHECKING:
    from skyline.simulation.engine import SimulationEngine

from skyline.simulation.messages import Severity
from skyline.world.territory import chunk_id
from skyline.world.zones import ZoneType

# Colour palette
_BG = (15, 23, 42)
_PANEL = (30, 41, 59)
_GRID_LINE = (51, 65, 85)
_LOCKED_SHADE = (0, 0, 0, 140)
_SELECTION = (192, 132, 252)
_TEXT = (226, 232, 240)

_ZONE_COLOURS: dict[ZoneType, tuple[int, int, int]] = {
    ZoneType.EMPTY: (30, 41, 59),
    ZoneType.RESIDENTIAL_LOW: (22, 163, 74),
    ZoneType.RESIDENTIAL_MED: (34, 197, 94),
    ZoneType.RESIDENTIAL_HIGH: (74, 222, 128),
    ZoneType.COMMERCIAL_LOW: (37, 99, 235),
    ZoneType.COMMERCIAL_MED: (59, 130, 246),
    ZoneType.COMMERCIAL_HIGH: (96, 165, 250),
    ZoneType.INDUSTRIAL_LOW: (161, 98, 7),
    ZoneType.INDUSTRIAL_MED: (202, 138, 4),
    ZoneType.INDUSTRIAL_HIGH: (234, 179, 8),
    ZoneType.ROAD: (71, 85, 105),
    ZoneType.POWER_PLANT: (154, 52, 18),
    ZoneType.WIND_TURBINE: (186, 230, 253),
    ZoneType.WATER_TOWER: (8, 145, 178),
    ZoneType.SEWAGE_PLANT: (120, 53, 15),
    ZoneType.POLICE_STATION: (79, 70, 229),
    ZoneType.FIRE_STATION: (220, 38, 38),
    ZoneType.HOSPITAL: (255, 228, 230),
    ZoneType.SCHOOL: (217, 119, 6),
    ZoneType.PARK: (52, 211, 153),
    ZoneType.MOVE: (147, 51, 234),
    ZoneType.WATER: (30, 64, 175),
    ZoneType.ROCK: (87, 83, 78),
}

_SEVERITY_COLOURS: dict[Severity, tuple[int, int, int]] = {
    Severity.INFO: (148, 163, 184),
    Severity.WARNING: (251, 191, 36),
    Severity.SUCCESS: (74, 222, 128),
}

_TOOL_KEYS: dict[int, ZoneType] = {
    pygame.K_1: ZoneType.RESIDENTIAL_LOW,
    pygame.K_2: ZoneType.COMMERCIAL_LOW,
    pygame.K_3: ZoneType.INDUSTRIAL_LOW,
    pygame.K_4: ZoneType.ROAD,
    pygame.K_5: ZoneType.POWER_PLANT,
    pygame.K_6: ZoneType.WIND_TURBINE,
    pygame.K_7: ZoneType.WATER_TOWER,
    pygame.K_8: ZoneType.SEWAGE_PLANT,
    pygame.K_9: ZoneType.PARK,
    pygame.K_0: ZoneType.POLICE_STATION,
    pygame.K_x: ZoneType.EMPTY,
    pygame.K_m: ZoneType.MOVE,
}

_ARROWS: dict[int, tuple[int, int]] = {
    pygame.K_LEFT: (-1, 0),
    pygame.K_RIGHT: (1, 0),
    pygame.K_UP: (0, -1),
    pygame.K_DOWN: (0, 1),
}

_PAN_STEP = 40.0
_ZOOM_STEP = 0.15


class PygameRenderer:
    """Renders a SimulationEngine's city into a Pygame window.

    Attributes:
        engine: The simulation engine to display and control.
        cell_size: Pixel size of a tile at zoom 1.
        screen: The Pygame display surface.
    """

    # Simulated-time multipliers selectable with +/-
    _SPEED_STEPS: ClassVar[list[float]] = [0.5, 1.0, 2.0, 4.0, 8.0]

    def __init__(self, engine: SimulationEngine, cell_size: int = 20) -> None:
        """Initialise the renderer.

        Args:
            engine: The simulation engine to render.
            cell_size: Pixel width/height per tile at zoom 1.
        """
        self.engine = engine
        self.cell_size = cell_size
        self._speed_index = 1
        self._tools = [z for z in ZoneType if z.is_placeable]

        self._map_px = engine.config.grid_size * cell_size
        self._panel_width = 320
        self._win_w = self._map_px + self._panel_width
        self._win_h = max(self._map_px, 640)

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("Skyline")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True

    @property
    def speed(self) -> float:
        return self._SPEED_STEPS[self._speed_index]

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, feed the scheduler, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt_ms = self.clock.tick(fps)
            self._handle_events()
            self.engine.advance(dt_ms * self.speed)
            self._draw()

        pygame.quit()

    # ── Input ────────────────────────────────────────────────────────

    def _tile_under(self, pos: tuple[int, int]) -> str | None:
        """Map a screen position to a tile id, honouring camera pan/zoom."""
        cam = self.engine.state.camera
        cs = self.cell_size * cam.zoom
        gx = int((pos[0] - cam.x) // cs)
        gy = int((pos[1] - cam.y) // cs)
        grid = self.engine.state.grid
        if pos[0] >= self._map_px or not grid.in_bounds(gx, gy):
            return None
        return grid.tile_at(gx, gy).id

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEBUTTONDOWN:
                self._handle_click(event)
            elif event.type == pygame.MOUSEWHEEL:
                self.engine.state.camera.zoom_by(_ZOOM_STEP * event.y)
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)

    def _handle_click(self, event: pygame.event.Event) -> None:
        tid = self._tile_under(event.pos)
        if tid is None:
            return
        if event.button == 1:
            self.engine.place(tid)
        elif event.button == 3:
            self.engine.demolish(tid)

    def _handle_key(self, key: int) -> None:
        engine = self.engine
        state = engine.state
        if state.purchase_prompt is not None:
            if key in (pygame.K_y, pygame.K_RETURN):
                engine.purchase()
                return
            if key in (pygame.K_n, pygame.K_ESCAPE):
                engine.cancel_purchase()
                return

        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_SPACE:
            engine.toggle_pause()
        elif key in _TOOL_KEYS:
            engine.select_tool(_TOOL_KEYS[key])
        elif key == pygame.K_TAB:
            tool = state.ui.selected_tool
            idx = self._tools.index(tool) if tool in self._tools else -1
            engine.select_tool(self._tools[(idx + 1) % len(self._tools)])
        elif key in _ARROWS:
            dx, dy = _ARROWS[key]
            if state.ui.selected_tool is ZoneType.MOVE and state.selected_move_tile:
                engine.nudge(dx, dy)
            else:
                state.camera.pan(-dx * _PAN_STEP, -dy * _PAN_STEP)
        elif key == pygame.K_c:
            state.camera.reset()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS):
            self._speed_index = min(len(self._SPEED_STEPS) - 1, self._speed_index + 1)
        elif key == pygame.K_MINUS:
            self._speed_index = max(0, self._speed_index - 1)
        elif key == pygame.K_a:
            engine.ask_advisor()
        elif key == pygame.K_r:
            engine.restart()
        elif key == pygame.K_F5:
            engine.save(state.stats.name)
        elif key == pygame.K_F9:
            engine.load_latest()
        elif key == pygame.K_l:
            engine.toggle_left_panel()
        elif key == pygame.K_f:
            engine.toggle_right_panel()

    # ── Drawing ──────────────────────────────────────────────────────

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self._draw_tiles()
        self._draw_locked_sectors()
        self._draw_info_panel()
        pygame.display.flip()

    def _draw_tiles(self) -> None:
        state = self.engine.state
        cam = state.camera
        cs = self.cell_size * cam.zoom
        for tile in state.grid:
            rect = pygame.Rect(
                int(cam.x + tile.x * cs),
                int(cam.y + tile.y * cs),
                max(1, int(cs)),
                max(1, int(cs)),
            )
            pygame.draw.rect(self.screen, _ZONE_COLOURS[tile.zone], rect)
            pygame.draw.rect(self.screen, _GRID_LINE, rect, 1)
            if tile.id == state.selected_move_tile:
                pygame.draw.rect(self.screen, _SELECTION, rect, 3)

    def _draw_locked_sectors(self) -> None:
        """Shade every tile whose sector has not been purchased."""
        state = self.engine.state
        cam = state.camera
        cs = self.cell_size * cam.zoom
        overlay = pygame.Surface((self._map_px, self._win_h), pygame.SRCALPHA)
        for tile in state.grid:
            cid = chunk_id(tile.x, tile.y, state.chunk_size)
            if not state.territory.is_unlocked(cid):
                pygame.draw.rect(
                    overlay,
                    _LOCKED_SHADE,
                    (int(cam.x + tile.x * cs), int(cam.y + tile.y * cs), int(cs) + 1, int(cs) + 1),
                )
        self.screen.blit(overlay, (0, 0))

    def _draw_info_panel(self) -> None:
        """Draw the stats panel and message feed on the right side."""
        state = self.engine.state
        stats = state.stats
        res = stats.resources
        panel_x = self._map_px
        pygame.draw.rect(self.screen, _PANEL, (panel_x, 0, self._panel_width, self._win_h))

        lines: list[tuple[str, tuple[int, int, int]]] = [
            (stats.name, _TEXT),
            (f"Day {stats.day}  x{self.speed:g}  {'PAUSED' if state.ui.is_paused else ''}", _TEXT),
            (f"Money: ${stats.money:,} ({stats.net_income:+,}/day)", _TEXT),
            (f"Population: {stats.population:,}", _TEXT),
            (f"Happiness: {stats.happiness}", _TEXT),
            (f"Power:  {res.power_usage}/{res.power}", _TEXT),
            (f"Water:  {res.water_usage}/{res.water}", _TEXT),
            (f"Sewage: {res.sewage_usage}/{res.sewage}", _TEXT),
            (f"Tool: {state.ui.selected_tool.display_name}", _TEXT),
            ("", _TEXT),
        ]
        if state.ui.show_left_panel:
            lines += [(f"  {d}", _TEXT) for d in stats.happiness_details]
            lines.append(("", _TEXT))

        prompt = state.purchase_prompt
        if prompt is not None:
            lines += [
                (f"Buy sector {prompt.chunk_id} for ${prompt.cost:,}?", _SEVERITY_COLOURS[Severity.WARNING]),
                ("  Y: buy   N: cancel", _SEVERITY_COLOURS[Severity.WARNING]),
                ("", _TEXT),
            ]

        if state.ui.show_right_panel:
            lines += [(msg.text[:38], _SEVERITY_COLOURS[msg.severity]) for msg in state.messages[:6]]
        lines += [
            ("", _TEXT),
            ("1-0 tools  TAB cycle  X clear", _TEXT),
            ("M move  arrows pan/nudge", _TEXT),
            ("SPACE pause  +/- speed  A advisor", _TEXT),
            ("F5 save  F9 load  R restart", _TEXT),
            ("L details  F feed  C camera", _TEXT),
        ]

        y = 10
        for text, colour in lines:
            surf = self.font.render(text, True, colour)
            self.screen.blit(surf, (panel_x + 10, y))
            y += 18
