"""Day 14: Regolith Reservoir — sand settling over rock paths."""

from __future__ import annotations

from puzzlekit.settling import DEFAULT_ORIGIN, SettlingSimulation, Termination, parse_rock_paths


def part1(text: str, origin: tuple[int, int] = DEFAULT_ORIGIN) -> str:
    """Units of sand at rest before sand starts falling into the abyss."""
    sim = SettlingSimulation(parse_rock_paths(text), origin, Termination.FALL_THROUGH)
    return str(sim.run())


def part2(text: str, origin: tuple[int, int] = DEFAULT_ORIGIN) -> str:
    """Units of sand at rest once the source is blocked (floor two below the lowest rock)."""
    sim = SettlingSimulation(parse_rock_paths(text), origin, Termination.ORIGIN_BLOCKED)
    return str(sim.run())
