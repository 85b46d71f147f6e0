"""Severity rank table.

Every level name maps to exactly one numeric rank. Lower ranks are more
severe; an event passes the threshold when ``rank <= threshold``.

Example:
    >>> rank_of("warn")
    2
    >>> name_of(6)
    'info'
    >>> default_rank("production")
    3
"""

from __future__ import annotations

from typing import Final

from .errors import UnknownLevelError

LEVELS: Final[dict[str, int]] = {
    "error": 1,
    "warn": 2,
    "sys": 3,
    "req": 4,
    "res": 5,
    "info": 6,
    "debug": 7,
}

LEVEL_NAMES: Final[tuple[str, ...]] = tuple(
    sorted(LEVELS, key=lambda name: LEVELS[name])
)

# Threshold used when setLevel() runs without a name
_ENVIRONMENT_DEFAULTS: Final[dict[str, int]] = {
    "production": 3,
    "staging": 5,
    "qa": 5,
    "test": 1,
}
FALLBACK_RANK: Final[int] = 6


def is_level(name: object) -> bool:
    """Return True when ``name`` is a recognised level name."""
    return isinstance(name, str) and name in LEVELS


def rank_of(name: str) -> int:
    """Return the rank for a level name.

    Raises:
        UnknownLevelError: If the name is not in the table.
    """
    try:
        return LEVELS[name]
    except (KeyError, TypeError):
        raise UnknownLevelError(name) from None


def name_of(rank: int) -> str | None:
    """Return the level name for a rank, or None if no level has it."""
    for name, value in LEVELS.items():
        if value == rank:
            return name
    return None


def default_rank(environment: str | None) -> int:
    """Map an environment tag to its default threshold."""
    if not environment:
        return FALLBACK_RANK
    return _ENVIRONMENT_DEFAULTS.get(environment.strip().lower(), FALLBACK_RANK)
