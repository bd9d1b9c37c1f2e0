"""Player physics: horizontal input, jumps, gravity and bounds."""

import logging

from forest_dash.config.settings import Settings
from forest_dash.game.entities import Direction, Player
from forest_dash.input.intents import InputState

logger = logging.getLogger(__name__)


class PhysicsIntegrator:
    """Advances the player by one tick.

    Integration order is velocity first, then position:
    ``vy += gravity; y += vy``. A ground contact (reach or exceed) snaps the
    player to the ground line and clears every airborne flag.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._min_x = 0.0
        self._max_x = float(settings.playfield.width - settings.player.width)
        self._ground_y = settings.ground_line - settings.player.height

    @property
    def ground_y(self) -> float:
        """Resting y of the player's top edge."""
        return self._ground_y

    def step(self, player: Player, inp: InputState, *, double_jump: bool = False) -> None:
        physics = self._settings.physics
        speed = self._settings.player.move_speed

        # Both directions may apply in the same tick; the last one sets facing
        if inp.right:
            player.x += speed
            player.direction = Direction.RIGHT
        if inp.left:
            player.x -= speed
            player.direction = Direction.LEFT

        if inp.jump_pressed:
            force = physics.powered_jump_force if player.powered else physics.jump_force
            if not player.is_jumping:
                player.vy = force
                player.is_jumping = True
                player.can_double_jump = double_jump
            elif player.can_double_jump:
                player.vy = force
                player.can_double_jump = False
                logger.debug("Double jump")

        player.vy += physics.gravity
        player.y += player.vy

        if player.y >= self._ground_y:
            player.y = self._ground_y
            player.vy = 0.0
            player.is_jumping = False
            player.can_double_jump = False

        player.x = max(self._min_x, min(player.x, self._max_x))
