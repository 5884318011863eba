"""Shared simulation constants.

Centralises magic numbers and string literals that are referenced by
multiple modules so they have a single source of truth.  Anything a
designer may want to tune lives in the versioned parameter documents
instead (see ``rules/model/``).
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Attribute scale
# ---------------------------------------------------------------------------
MIN_ATTRIBUTE: int = 0
"""Lowest value any fighter rating can take."""

MAX_ATTRIBUTE: int = 100
"""Highest value any fighter rating can take."""

# ---------------------------------------------------------------------------
# Ring geometry (feet, origin at ring center)
# ---------------------------------------------------------------------------
POSITION_LIMIT_FT: float = 9.5
"""Furthest a fighter's center can be from the ring center on either axis."""

CORNER_THRESHOLD_FT: float = 7.0
"""Both coordinates beyond this distance means the fighter is in a corner."""

ROPES_THRESHOLD_FT: float = 8.0
"""Either coordinate beyond this distance means the fighter is on the ropes."""

CENTER_THRESHOLD_FT: float = 3.0
"""Both coordinates within this distance means the fighter holds the center."""

MIN_SEPARATION_FT: float = 1.0
"""Two fighters are never placed closer than this."""

START_POSITIONS: dict[str, tuple[float, float]] = {
    "A": (-4.0, 0.0),
    "B": (4.0, 0.0),
}
"""Opening-bell coordinates keyed by corner id."""

# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------
TICK_SECONDS: float = 0.5
"""Simulated seconds covered by one tick."""

ROUND_SECONDS: float = 180.0
"""Default length of a round."""

SCHEDULED_ROUNDS: int = 12
"""Default number of scheduled rounds."""

CHAMPIONSHIP_ROUND: int = 10
"""First round counted as a championship round."""

# ---------------------------------------------------------------------------
# Decision memory
# ---------------------------------------------------------------------------
MEMORY_ACTION_LIMIT: int = 20
"""Number of recent actions retained in a fighter's decision memory."""

RECENT_HURT_SECONDS: float = 45.0
"""A fighter hurt within this many seconds still fights as recently hurt."""

# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------
CURRENT_VERSION: str = "current"
"""Version alias resolving to the newest parameter set on disk."""

DEFAULTS_VERSION: str = "defaults"
"""Version label reported when the built-in default tree is in use."""

PARAMETER_CATEGORIES: tuple[str, ...] = ("combat", "stamina", "ai", "damage", "position")
"""Top-level parameter documents, one JSON file each per version."""
