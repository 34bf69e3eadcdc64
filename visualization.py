# visualization.py
"""
Handles the visualization of the particle bounce simulation using Pygame.
"""
import logging
import pygame
from constants import (
    BACKGROUND_COLOR, BOUNDARY_COLOR, BOUNDARY_LINE_WIDTH, FPS, GUIDE_LINE_COLOR,
    HANDLE_ACTIVE_COLOR, HANDLE_COLOR, HANDLE_OUTLINE_COLOR, HANDLE_RADIUS, MIN_CONTROL_POINTS,
    PARTICLE_COLORS, PARTICLE_HALO_ALPHA, PARTICLE_HALO_RATIO, PARTICLE_RADIUS,
    PATH_COLOR, PATH_LINE_WIDTH, SHAPE_CIRCLE, SHAPE_ELLIPSE, SHAPE_IRREGULAR,
    SHAPE_RECTANGLE, SHAPES, UI_BACKGROUND_ALPHA, UI_PANEL_WIDTH
)
from typing import Tuple, Optional

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from context import SimulationContext
    from simulation import Simulation


# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, width: int, height: int, colors: Optional[list] = None,
#              show_control_points: bool = True):
#     - Inputs:
#       - width, height: size of the simulation canvas. The window adds a
#         UI panel of UI_PANEL_WIDTH on the right.
#       - colors: Optional list of RGB color lists (e.g., [[255,0,0], ...])
#         from the configuration. If None, the fixed palette is used.
#     - Outputs: None
#     - Side Effects: Initializes Pygame and creates a display surface.
#
#   - draw(self, context: SimulationContext, simulation: Simulation) -> bool:
#     - Outputs:
#       - bool: False if the user has quit, True otherwise.
#     - Side Effects: Handles Pygame events, forwarding user actions to the
#       context. Renders a frame while playing, and while paused only when
#       an edit or UI action changed something.

SPEED_STEP = 0.5
RADIUS_STEP = 10
AMPLITUDE_STEP = 0.05

SHAPE_KEYS = {
    pygame.K_1: SHAPE_RECTANGLE,
    pygame.K_2: SHAPE_CIRCLE,
    pygame.K_3: SHAPE_ELLIPSE,
    pygame.K_4: SHAPE_IRREGULAR,
}

KEY_HINTS = [
    "Space: play/pause   R: reset",
    "G: regenerate   1-4: shape",
    "Up/Down: speed   +/-: count",
    "Arrows, PgUp/PgDn: ellipse",
    "[ ]: irregularity   , .: points",
    "Drag blue handles to reshape",
]

class Visualizer:
    """
    Renders the boundary, particles and trails, and provides interactive UI elements.
    """
    def __init__(self, width: int, height: int, colors: Optional[list] = None, show_control_points: bool = True):
        """
        Initializes Pygame and the display window.
        """
        pygame.init()
        pygame.font.init()

        self.sim_width = width
        self.sim_height = height
        self.screen = pygame.display.set_mode((width + UI_PANEL_WIDTH, height))

        # The canvas is drawn on its own surface and blitted next to the UI panel.
        self.sim_surface = pygame.Surface((self.sim_width, self.sim_height))
        # Translucent layer for trails and guide lines.
        self.overlay_surface = pygame.Surface((self.sim_width, self.sim_height), pygame.SRCALPHA)

        self.ui_panel_surface = pygame.Surface((UI_PANEL_WIDTH, self.sim_height), pygame.SRCALPHA)
        self.ui_panel_surface.fill((40, 40, 40, UI_BACKGROUND_ALPHA))

        pygame.display.set_caption("Particle Bounce")
        self.clock = pygame.time.Clock()

        self.colors = self._initialize_colors(colors)
        self.halo_surfaces = self._pre_render_halos()
        self.show_control_points = show_control_points

        try:
            self.font_main = pygame.font.SysFont("Segoe UI", 14)
            self.font_main_bold = pygame.font.SysFont("Segoe UI", 14, bold=True)
        except pygame.error:
            logging.warning("Segoe UI font not found, falling back to default sans-serif.")
            self.font_main = pygame.font.SysFont(None, 18)
            self.font_main_bold = pygame.font.SysFont(None, 18, bold=True)

        # --- Button Configuration ---
        panel_x = self.sim_width + 20
        button_width = UI_PANEL_WIDTH - 40
        self.play_button_rect = pygame.Rect(panel_x, 20, button_width, 30)
        self.reset_button_rect = pygame.Rect(panel_x, self.play_button_rect.bottom + 5, button_width, 30)
        self.regenerate_button_rect = pygame.Rect(panel_x, self.reset_button_rect.bottom + 5, button_width, 30)

        shape_button_width = (button_width - 5) // 2
        self.shape_button_rects = {}
        shapes_top = self.regenerate_button_rect.bottom + 15
        for i, shape in enumerate(SHAPES):
            x = panel_x + (i % 2) * (shape_button_width + 5)
            y = shapes_top + (i // 2) * 35
            self.shape_button_rects[shape] = pygame.Rect(x, y, shape_button_width, 30)
        self.params_top = shapes_top + 2 * 35 + 10

        # --- UI Color Palette ---
        self.button_color = (80, 80, 80)
        self.button_hover_color = (110, 110, 110)
        self.button_active_color = (70, 96, 160)
        self.text_color_title = (255, 255, 255)
        self.text_color_key = (200, 200, 200)   # Brighter grey for keys
        self.text_color_value = (255, 255, 255) # Pure white for values
        self.text_color_hint = (150, 150, 150)
        self.param_box_color = (60, 60, 60, 160) # Slightly lighter for individual boxes
        self.param_box_spacing = 4 # Vertical pixels between each parameter box

        self.needs_redraw = True
        self._cursor = None

        logging.info(f"Visualizer initialized with Pygame display ({width + UI_PANEL_WIDTH}x{height}).")

    def _initialize_colors(self, config_colors: Optional[list]) -> list:
        """Initializes particle colors from config, falling back to the fixed palette."""
        def get_default_colors():
            return [pygame.Color(rgb) for rgb in PARTICLE_COLORS]

        if not config_colors:
            logging.info("No colors found in config. Using default particle palette.")
            return get_default_colors()

        final_colors = []
        try:
            for rgb in config_colors:
                final_colors.append(pygame.Color(rgb))
        except (ValueError, TypeError) as e:
            logging.error(f"Could not parse colors from config due to invalid format: {e}. Falling back to default palette.")
            return get_default_colors()

        logging.info(f"Successfully loaded {len(final_colors)} particle colors from configuration.")
        return final_colors

    def _pre_render_halos(self) -> list:
        """
        Pre-renders glow surfaces for each particle color to improve performance.
        """
        logging.debug("Pre-rendering particle halo surfaces...")
        halo_radius = int(PARTICLE_RADIUS * PARTICLE_HALO_RATIO)
        diameter = halo_radius * 2
        surfaces = []
        for color in self.colors:
            halo_surf = pygame.Surface((diameter, diameter), pygame.SRCALPHA)
            # Two rings give a soft falloff instead of a hard disc.
            for ring_radius, alpha in ((halo_radius, PARTICLE_HALO_ALPHA // 2), (halo_radius * 2 // 3, PARTICLE_HALO_ALPHA)):
                pygame.draw.circle(
                    halo_surf,
                    pygame.Color(color.r, color.g, color.b, alpha),
                    (halo_radius, halo_radius),
                    ring_radius
                )
            surfaces.append(halo_surf)
        logging.debug(f"Finished pre-rendering {len(surfaces)} halo surfaces.")
        return surfaces

    # --- Event handling ---

    def _set_cursor(self, cursor: int):
        if cursor != self._cursor:
            pygame.mouse.set_cursor(cursor)
            self._cursor = cursor

    def _update_cursor(self, context: "SimulationContext", pos: Tuple[int, int]):
        if context.shape != SHAPE_IRREGULAR or pos[0] >= self.sim_width:
            self._set_cursor(pygame.SYSTEM_CURSOR_ARROW)
        elif context.editor.dragging:
            self._set_cursor(pygame.SYSTEM_CURSOR_SIZEALL)
        elif context.editor.hovering(pos, context.irregular_curve.control_points):
            self._set_cursor(pygame.SYSTEM_CURSOR_HAND)
        else:
            self._set_cursor(pygame.SYSTEM_CURSOR_ARROW)

    def _handle_click(self, context: "SimulationContext", pos: Tuple[int, int]):
        if self.play_button_rect.collidepoint(pos):
            context.toggle_playing()
        elif self.reset_button_rect.collidepoint(pos):
            context.reset()
            logging.info("Particles reset by user.")
        elif self.regenerate_button_rect.collidepoint(pos):
            context.regenerate()
        else:
            for shape, rect in self.shape_button_rects.items():
                if rect.collidepoint(pos):
                    context.select_shape(shape)
                    break

    def _handle_key(self, context: "SimulationContext", key: int):
        if key == pygame.K_SPACE:
            context.toggle_playing()
        elif key == pygame.K_r:
            context.reset()
            logging.info("Particles reset by user.")
        elif key == pygame.K_g:
            context.regenerate()
        elif key in SHAPE_KEYS:
            context.select_shape(SHAPE_KEYS[key])
        elif key == pygame.K_UP:
            context.set_speed(context.speed + SPEED_STEP)
        elif key == pygame.K_DOWN:
            context.set_speed(context.speed - SPEED_STEP)
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            context.set_particle_count(context.particle_count + 1)
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            context.set_particle_count(context.particle_count - 1)
        elif key == pygame.K_RIGHT:
            context.set_ellipse_radii(context.ellipse_radius_x + RADIUS_STEP, context.ellipse_radius_y)
        elif key == pygame.K_LEFT:
            context.set_ellipse_radii(context.ellipse_radius_x - RADIUS_STEP, context.ellipse_radius_y)
        elif key == pygame.K_PAGEUP:
            context.set_ellipse_radii(context.ellipse_radius_x, context.ellipse_radius_y + RADIUS_STEP)
        elif key == pygame.K_PAGEDOWN:
            context.set_ellipse_radii(context.ellipse_radius_x, context.ellipse_radius_y - RADIUS_STEP)
        elif key == pygame.K_RIGHTBRACKET:
            context.set_irregular_amplitude(round(context.irregular_amplitude + AMPLITUDE_STEP, 2))
        elif key == pygame.K_LEFTBRACKET:
            context.set_irregular_amplitude(round(max(context.irregular_amplitude - AMPLITUDE_STEP, 0.0), 2))
        elif key == pygame.K_PERIOD:
            context.set_control_point_count(context.control_point_count + 1)
        elif key == pygame.K_COMMA:
            context.set_control_point_count(max(context.control_point_count - 1, MIN_CONTROL_POINTS))

    def _handle_event(self, context: "SimulationContext", event) -> bool:
        if event.type == pygame.QUIT:
            logging.info("Quit event received. Shutting down visualizer.")
            return False

        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False
            self._handle_key(context, event.key)
            self.needs_redraw = True

        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if event.pos[0] >= self.sim_width:
                self._handle_click(context, event.pos)
                self.needs_redraw = True
            elif context.press(event.pos):
                self.needs_redraw = True
            self._update_cursor(context, event.pos)

        elif event.type == pygame.MOUSEMOTION:
            if event.pos[0] < self.sim_width and context.move(event.pos):
                self.needs_redraw = True
            elif event.pos[0] >= self.sim_width:
                # Keep button hover states current while paused.
                self.needs_redraw = True
            self._update_cursor(context, event.pos)

        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            context.release()
            self.needs_redraw = True
            self._update_cursor(context, event.pos)

        elif event.type == pygame.WINDOWLEAVE:
            context.release()
            self.needs_redraw = True
            self._set_cursor(pygame.SYSTEM_CURSOR_ARROW)

        return True

    # --- Drawing ---

    def _draw_boundary(self, context: "SimulationContext"):
        outline = context.boundary.outline().tolist()
        pygame.draw.lines(self.sim_surface, BOUNDARY_COLOR, True, outline, BOUNDARY_LINE_WIDTH)

    def _draw_paths(self, context: "SimulationContext"):
        self.overlay_surface.fill((0, 0, 0, 0))
        for path in context.particles.paths:
            if len(path) < 2:
                continue
            pygame.draw.lines(self.overlay_surface, PATH_COLOR, False, path, PATH_LINE_WIDTH)
        self.sim_surface.blit(self.overlay_surface, (0, 0))

    def _draw_particles(self, context: "SimulationContext"):
        particles = context.particles
        halo_radius = int(PARTICLE_RADIUS * PARTICLE_HALO_RATIO)
        for pos, color_index in zip(particles.positions, particles.colors):
            index = color_index % len(self.colors)
            draw_pos = (int(pos[0]), int(pos[1]))
            self.sim_surface.blit(self.halo_surfaces[index], (draw_pos[0] - halo_radius, draw_pos[1] - halo_radius))
            pygame.draw.circle(self.sim_surface, self.colors[index], draw_pos, int(particles.radius))

    def _draw_control_points(self, context: "SimulationContext"):
        if context.shape != SHAPE_IRREGULAR or not self.show_control_points:
            return
        points = context.irregular_curve.control_points.tolist()

        self.overlay_surface.fill((0, 0, 0, 0))
        pygame.draw.lines(self.overlay_surface, GUIDE_LINE_COLOR, True, points, 1)
        self.sim_surface.blit(self.overlay_surface, (0, 0))

        for index, (x, y) in enumerate(points):
            color = HANDLE_ACTIVE_COLOR if context.editor.dragged_index == index else HANDLE_COLOR
            center = (int(x), int(y))
            pygame.draw.circle(self.sim_surface, color, center, HANDLE_RADIUS)
            pygame.draw.circle(self.sim_surface, HANDLE_OUTLINE_COLOR, center, HANDLE_RADIUS, 2)

    def _draw_button(self, rect: pygame.Rect, label: str, mouse_pos: Tuple[int, int], active: bool = False):
        """Draws a button and handles its hover state."""
        if active:
            color = self.button_active_color
        elif rect.collidepoint(mouse_pos):
            color = self.button_hover_color
        else:
            color = self.button_color

        pygame.draw.rect(self.screen, color, rect, border_radius=5)

        text_surf = self.font_main.render(label, True, self.text_color_title)
        text_rect = text_surf.get_rect(center=rect.center)
        self.screen.blit(text_surf, text_rect)

    def _draw_buttons(self, context: "SimulationContext", mouse_pos: Tuple[int, int]):
        self._draw_button(self.play_button_rect, "Pause" if context.playing else "Play", mouse_pos)
        self._draw_button(self.reset_button_rect, "Reset", mouse_pos)
        self._draw_button(self.regenerate_button_rect, "Regenerate", mouse_pos)
        for shape, rect in self.shape_button_rects.items():
            self._draw_button(rect, shape.title(), mouse_pos, active=(shape == context.shape))

    def _draw_simulation_parameters(self, context: "SimulationContext", simulation: "Simulation") -> int:
        """Renders simulation parameters in a list of individual, transparent boxes."""
        params = [
            ("Particles", context.particle_count),
            ("Speed", context.speed),
            ("Ellipse Radii", f"{context.ellipse_radius_x} x {context.ellipse_radius_y}"),
            ("Irregularity", context.irregular_amplitude),
            ("Control Points", context.control_point_count),
            ("Irregular Seed", context.irregular_seed),
            ("Step", simulation.step_count),
        ]

        # --- Layout Configuration ---
        box_v_padding = 6 # Vertical padding inside each box
        line_height = self.font_main.get_linesize()
        key_value_gap = 20

        panel_x = self.play_button_rect.x
        panel_width = self.play_button_rect.width
        current_y = self.params_top

        key_max_width = (panel_width - key_value_gap) / 2 - box_v_padding
        value_max_width = key_max_width
        key_column_right_x = panel_x + box_v_padding + key_max_width
        value_column_left_x = key_column_right_x + key_value_gap

        for display_key, value in params:
            display_value = f"{value:.2f}" if isinstance(value, float) else str(value)

            key_surfs = self._render_text_wrapped(display_key, self.font_main_bold, key_max_width, self.text_color_key)
            value_surfs = self._render_text_wrapped(display_value, self.font_main, value_max_width, self.text_color_value)

            num_lines = max(len(key_surfs), len(value_surfs))
            box_height = num_lines * line_height + (box_v_padding * 2)

            box_rect = pygame.Rect(panel_x, current_y, panel_width, box_height)
            pygame.draw.rect(self.screen, self.param_box_color, box_rect, border_radius=6)

            line_y = current_y + box_v_padding
            for surf in key_surfs:
                self.screen.blit(surf, surf.get_rect(topright=(key_column_right_x, line_y)))
                line_y += line_height

            line_y = current_y + box_v_padding
            for surf in value_surfs:
                self.screen.blit(surf, surf.get_rect(topleft=(value_column_left_x, line_y)))
                line_y += line_height

            current_y += box_height + self.param_box_spacing
        return current_y

    def _draw_key_hints(self, top: int):
        y = top + 10
        for hint in KEY_HINTS:
            surf = self.font_main.render(hint, True, self.text_color_hint)
            self.screen.blit(surf, (self.play_button_rect.x, y))
            y += self.font_main.get_linesize()

    def _render_text_wrapped(
        self, text: str, font: pygame.font.Font, max_width: int, color: tuple
    ) -> list:
        """
        Renders text, wrapping it to a new line if it exceeds max_width.
        Returns a list of rendered surfaces, one for each line.
        """
        words = text.split(' ')
        lines = []
        current_line = ""

        for word in words:
            test_line = f"{current_line} {word}".strip()
            if font.size(test_line)[0] <= max_width:
                current_line = test_line
            else:
                lines.append(current_line)
                current_line = word

        lines.append(current_line)

        return [font.render(line, True, color) for line in lines if line]

    def render(self, context: "SimulationContext", simulation: "Simulation"):
        """Draws one complete frame."""
        mouse_pos = pygame.mouse.get_pos()

        self.sim_surface.fill(BACKGROUND_COLOR)
        self._draw_boundary(context)
        self._draw_paths(context)
        self._draw_particles(context)
        # Handles go last so they stay on top
        self._draw_control_points(context)

        self.screen.fill(BACKGROUND_COLOR)
        self.screen.blit(self.sim_surface, (0, 0))
        self.screen.blit(self.ui_panel_surface, (self.sim_width, 0))
        self._draw_buttons(context, mouse_pos)
        params_bottom = self._draw_simulation_parameters(context, simulation)
        self._draw_key_hints(params_bottom)

        pygame.display.flip()

    def draw(self, context: "SimulationContext", simulation: "Simulation") -> bool:
        """
        Handles events and draws the frame.

        While paused nothing is drawn unless an event changed something, so
        control point edits still show up immediately.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        for event in pygame.event.get():
            if not self._handle_event(context, event):
                return False

        if context.playing or self.needs_redraw:
            self.render(context, simulation)
            self.needs_redraw = False

        self.clock.tick(FPS)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
