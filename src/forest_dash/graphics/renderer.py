"""Draws a ``Snapshot`` into a numpy RGB frame buffer.

The renderer only reads snapshots; it never sees the live session.
Text (score, overlays) is left to the window, which owns the fonts.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from forest_dash.config.settings import Settings
from forest_dash.core.state import GameState
from forest_dash.game.entities import ObstacleKind, ObstacleView
from forest_dash.game.session import Snapshot
from forest_dash.graphics.primitives import (
    Buffer,
    Color,
    draw_circle,
    draw_rect,
    draw_triangle,
    fill,
    new_buffer,
    shade_outside_circle,
)


@dataclass(frozen=True)
class Palette:
    """Scene colors."""

    sky: Color = (135, 190, 235)
    sky_level2: Color = (40, 60, 80)
    ground: Color = (70, 130, 60)
    ground_edge: Color = (50, 95, 40)
    tree_crown: tuple[Color, ...] = ((60, 120, 70), (40, 100, 55))
    tree_trunk: Color = (100, 70, 45)
    player: Color = (230, 90, 70)
    player_powered: Color = (255, 215, 0)
    beds: tuple[Color, ...] = ((140, 100, 70), (160, 120, 70), (120, 90, 60))
    bed_sheet: Color = (235, 235, 245)
    giants: tuple[Color, ...] = ((90, 60, 120), (120, 50, 60), (60, 80, 110))
    miniboss: Color = (200, 40, 40)
    mushroom_cap: Color = (220, 40, 40)
    mushroom_stem: Color = (245, 235, 220)
    branch: Color = (110, 75, 40)
    fog: Color = (5, 10, 15)
    warning: Color = (255, 60, 60)
    dim: Color = (0, 0, 0)


class SnapshotRenderer:
    """Renders the playfield in logical pixels (width x height)."""

    def __init__(self, settings: Settings, palette: Palette | None = None):
        self._settings = settings
        self.palette = palette or Palette()
        self.width = settings.playfield.width
        self.height = settings.playfield.height

    def render(self, snapshot: Snapshot, buffer: Buffer | None = None) -> NDArray[np.uint8]:
        """Draw one frame. Returns a (height, width, 3) uint8 buffer."""
        if buffer is None:
            buffer = new_buffer(self.width, self.height)

        p = self.palette
        fill(buffer, p.sky_level2 if snapshot.level > 1 else p.sky)

        for tree in snapshot.backgrounds:
            crown = p.tree_crown[tree.type % len(p.tree_crown)]
            trunk_w = tree.width * 0.2
            draw_rect(
                buffer,
                tree.x + (tree.width - trunk_w) / 2,
                tree.y + tree.height * 0.6,
                trunk_w,
                tree.height * 0.4,
                p.tree_trunk,
            )
            draw_triangle(buffer, tree.x, tree.y, tree.width, tree.height * 0.7, crown)

        self._draw_ground(buffer)

        for obstacle in snapshot.obstacles:
            self._draw_obstacle(buffer, obstacle)

        for branch in snapshot.branches:
            draw_rect(buffer, branch.x, branch.y, branch.width, branch.height, p.branch)

        player = snapshot.player
        draw_rect(
            buffer,
            player.x,
            player.y,
            player.width,
            player.height,
            p.player_powered if player.powered else p.player,
        )

        if snapshot.visibility_radius is not None:
            shade_outside_circle(
                buffer,
                player.x + player.width / 2,
                player.y + player.height / 2,
                snapshot.visibility_radius,
                p.fog,
                opacity=0.92,
            )

        if snapshot.warning_active:
            draw_rect(buffer, 0, 0, self.width, self.height, p.warning, filled=False, thickness=6)

        if snapshot.state in (GameState.WON, GameState.LOST, GameState.PAUSED):
            buffer[:] = (buffer.astype(np.float32) * 0.5).astype(np.uint8)

        return buffer

    def _draw_ground(self, buffer: Buffer) -> None:
        ground_y = self._settings.ground_line
        draw_rect(buffer, 0, ground_y, self.width, self.height - ground_y, self.palette.ground)
        draw_rect(buffer, 0, ground_y, self.width, 4, self.palette.ground_edge)

    def _draw_obstacle(self, buffer: Buffer, o: ObstacleView) -> None:
        p = self.palette

        if o.kind is ObstacleKind.MUSHROOM:
            stem_w = o.width * 0.4
            draw_rect(buffer, o.x + (o.width - stem_w) / 2, o.y + o.height / 2,
                      stem_w, o.height / 2, p.mushroom_stem)
            draw_circle(buffer, o.x + o.width / 2, o.y + o.height / 2, o.width / 2, p.mushroom_cap)
            return

        if o.kind is ObstacleKind.GIANT:
            draw_rect(buffer, o.x, o.y, o.width, o.height, p.giants[o.variant % len(p.giants)])
            return

        if o.kind is ObstacleKind.MINIBOSS:
            draw_rect(buffer, o.x, o.y, o.width, o.height, p.miniboss)
            return

        # Bed: frame with a sheet on top
        draw_rect(buffer, o.x, o.y, o.width, o.height, p.beds[o.variant % len(p.beds)])
        draw_rect(buffer, o.x + 4, o.y + 4, o.width - 8, o.height * 0.3, p.bed_sheet)
