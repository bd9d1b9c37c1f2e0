"""Score-driven difficulty tiers."""

from typing import Sequence

from forest_dash.config.settings import DifficultyTier


def resolve_tier(tiers: Sequence[DifficultyTier], score: int) -> DifficultyTier:
    """Return the active tier for a score.

    Tiers are ordered by ``min_score``; the last one whose threshold the
    score has reached wins. Scores below the first threshold use the
    first tier.
    """
    if not tiers:
        raise ValueError("at least one difficulty tier is required")

    active = tiers[0]
    for tier in tiers:
        if score >= tier.min_score:
            active = tier
        else:
            break
    return active
