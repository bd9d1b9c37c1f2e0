"""Entities of the runner simulation.

The simulation mutates these records in place every tick. Anything handed
to the presentation layer goes through ``freeze()``, which returns a frozen
copy that shares nothing with the live record.
"""

from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    LEFT = "left"
    RIGHT = "right"


class ObstacleKind(Enum):
    NORMAL = "normal"
    GIANT = "giant"
    MINIBOSS = "miniboss"
    MUSHROOM = "mushroom"  # power-up, picked up on contact

    @property
    def is_lethal(self) -> bool:
        return self is not ObstacleKind.MUSHROOM


class Box:
    """Axis-aligned box helpers shared by every entity.

    Coordinates are screen-like: x grows right, y grows down, (x, y) is the
    top-left corner.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def is_offscreen(self, margin: float) -> bool:
        """True once the box is fully past the left edge and at least
        ``margin`` px beyond it."""
        return self.x + max(self.width, margin) <= 0


@dataclass(frozen=True)
class PlayerView(Box):
    x: float
    y: float
    vy: float
    width: float
    height: float
    direction: Direction
    is_jumping: bool
    can_double_jump: bool
    powered: bool
    power_passes: int


@dataclass
class Player(Box):
    x: float
    y: float
    width: float
    height: float
    vy: float = 0.0
    direction: Direction = Direction.RIGHT
    is_jumping: bool = False
    can_double_jump: bool = False

    # Mushroom power-up
    powered: bool = False
    power_passes: int = 0

    def freeze(self) -> PlayerView:
        return PlayerView(
            x=self.x,
            y=self.y,
            vy=self.vy,
            width=self.width,
            height=self.height,
            direction=self.direction,
            is_jumping=self.is_jumping,
            can_double_jump=self.can_double_jump,
            powered=self.powered,
            power_passes=self.power_passes,
        )


@dataclass(frozen=True)
class ObstacleView(Box):
    id: int
    kind: ObstacleKind
    x: float
    y: float
    width: float
    height: float
    variant: int
    passed: bool


@dataclass
class Obstacle(Box):
    id: int
    kind: ObstacleKind
    x: float
    y: float
    width: float
    height: float
    variant: int = 0
    passed: bool = False

    def mark_passed(self) -> None:
        # One way: a passed obstacle never scores again
        self.passed = True

    def freeze(self) -> ObstacleView:
        return ObstacleView(
            id=self.id,
            kind=self.kind,
            x=self.x,
            y=self.y,
            width=self.width,
            height=self.height,
            variant=self.variant,
            passed=self.passed,
        )


@dataclass(frozen=True)
class BackgroundView(Box):
    id: int
    x: float
    y: float
    width: float
    height: float
    type: int


@dataclass
class BackgroundObject(Box):
    """Decorative tree; scrolls with parallax and never collides."""

    id: int
    x: float
    y: float
    width: float
    height: float
    type: int = 0

    def freeze(self) -> BackgroundView:
        return BackgroundView(
            id=self.id, x=self.x, y=self.y, width=self.width, height=self.height, type=self.type
        )


@dataclass(frozen=True)
class BranchView(Box):
    id: int
    x: float
    y: float
    width: float
    height: float
    speed: float


@dataclass
class Branch(Box):
    """Falling branch (level 2). Lethal on contact."""

    id: int
    x: float
    y: float
    width: float
    height: float
    speed: float

    def freeze(self) -> BranchView:
        return BranchView(
            id=self.id, x=self.x, y=self.y, width=self.width, height=self.height, speed=self.speed
        )
