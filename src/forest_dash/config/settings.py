"""
Game settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Every gameplay constant lives here so the simulation stays free of literals.
"""

from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DifficultyTier(BaseModel):
    """One step of the score-driven difficulty table."""

    min_score: int = Field(ge=0)
    speed: float = Field(gt=0)  # px per tick
    dwell: int = Field(ge=0)    # ticks between spawn rolls


class MinibossBand(BaseModel):
    """Score window with an elevated miniboss probability."""

    low: int
    high: int
    probability: float = Field(ge=0.0, le=1.0)


class LevelSettings(BaseModel):
    """Rules for a single level."""

    win_score: int
    tiers: list[DifficultyTier]
    giant_probability: float = Field(ge=0.0, le=1.0)
    miniboss_probability: float = Field(ge=0.0, le=1.0)
    miniboss_band: Optional[MinibossBand] = None

    # None: miniboss is always eligible
    danger_score: Optional[int] = None
    # Banner-only threshold for levels without a danger score
    warning_score: Optional[int] = None

    double_jump: bool = False
    falling_branches: bool = False
    visibility_radius: Optional[float] = None


def _default_levels() -> list[LevelSettings]:
    return [
        LevelSettings(
            win_score=50,
            tiers=[
                DifficultyTier(min_score=0, speed=6, dwell=60),
                DifficultyTier(min_score=25, speed=7, dwell=40),
                DifficultyTier(min_score=40, speed=8, dwell=40),
            ],
            giant_probability=0.02,
            miniboss_probability=0.25,
            danger_score=25,
        ),
        LevelSettings(
            win_score=100,
            tiers=[DifficultyTier(min_score=0, speed=8, dwell=40)],
            giant_probability=0.01,
            miniboss_probability=0.05,
            miniboss_band=MinibossBand(low=50, high=55, probability=0.50),
            warning_score=25,
            double_jump=True,
            falling_branches=True,
            visibility_radius=120.0,
        ),
    ]


class PlayfieldSettings(BaseModel):
    """Logical playfield dimensions."""

    width: int = 800
    height: int = 400
    ground_height: int = 50


class PlayerSettings(BaseModel):
    """Player body and movement."""

    width: int = 40
    height: int = 60
    start_x: float = 50.0
    move_speed: float = 5.0


class PhysicsSettings(BaseModel):
    """Vertical integration constants (px per tick)."""

    gravity: float = 0.6
    jump_force: float = -12.0
    powered_jump_force: float = -18.0


class ObstacleSettings(BaseModel):
    """Obstacle geometry per kind."""

    bed_width: int = 60
    bed_base_height: int = 40
    bed_height_range: int = 20

    giant_width: int = 300
    giant_height: int = 250

    miniboss_width: int = 100
    miniboss_height: int = 70
    miniboss_group_size: int = 3
    miniboss_spacing: int = 350
    miniboss_cooldown: int = -150  # frame counter after a group spawn

    mushroom_size: int = 40

    variant_count: int = 3
    cull_margin: int = 100


class SpawnSettings(BaseModel):
    """Per-tick spawn probabilities."""

    spawn_probability: float = Field(default=0.02, ge=0.0, le=1.0)
    mushroom_probability: float = Field(default=0.10, ge=0.0, le=1.0)
    mushroom_min_score: int = 25  # score must be strictly above

    background_probability: float = Field(default=0.01, ge=0.0, le=1.0)
    background_base_size: int = 100
    background_types: int = 2
    background_burial: int = 10
    background_cull_margin: int = 50
    parallax: float = 0.5

    branch_interval: int = 100
    branch_probability: float = Field(default=0.3, ge=0.0, le=1.0)
    branch_width: int = 20
    branch_height: int = 60
    branch_spawn_y: float = -50.0
    branch_min_speed: float = 5.0
    branch_speed_range: float = 3.0


class ScoringSettings(BaseModel):
    """Scoring, power-up decay and the developer cheat."""

    points_per_pass: int = 1
    developer_multiplier: int = 50
    power_up_passes: int = 5
    cheat_code: str = "1345"


class FlowSettings(BaseModel):
    """Timings of the non-simulated screens (seconds)."""

    next_level_delay: float = 3.0
    warning_duration: float = 3.0


class SimulatorSettings(BaseModel):
    """Desktop pygame window."""

    title: str = "Forest Dash"
    fps: int = 60
    scale: int = 1
    fullscreen: bool = False


class Settings(BaseSettings):
    """Main game settings."""

    model_config = SettingsConfigDict(
        env_prefix="FOREST_DASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False

    playfield: PlayfieldSettings = Field(default_factory=PlayfieldSettings)
    player: PlayerSettings = Field(default_factory=PlayerSettings)
    physics: PhysicsSettings = Field(default_factory=PhysicsSettings)
    obstacles: ObstacleSettings = Field(default_factory=ObstacleSettings)
    spawn: SpawnSettings = Field(default_factory=SpawnSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    flow: FlowSettings = Field(default_factory=FlowSettings)
    simulator: SimulatorSettings = Field(default_factory=SimulatorSettings)
    levels: list[LevelSettings] = Field(default_factory=_default_levels)

    @property
    def ground_line(self) -> float:
        """Y of the top of the ground band."""
        return float(self.playfield.height - self.playfield.ground_height)

    @property
    def last_level(self) -> int:
        return len(self.levels)

    def level(self, index: int) -> LevelSettings:
        """Rules for a 1-based level index."""
        return self.levels[index - 1]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
