"""
Day 10: Cathode-Ray Tube

A two-instruction CPU with a single register ``x``. ``noop`` takes one
cycle; ``addx V`` takes two and updates ``x`` after the second. Observers
registered on the CPU are called once per cycle, *during* that cycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from puzzlekit.combinators import (
    alternative,
    i32,
    line_ending,
    map_rule,
    parse_all,
    preceded,
    separated_list1,
    tag,
    value,
)

NOTABLE_CYCLES = (20, 60, 100, 140, 180, 220)
SCREEN_WIDTH = 40


@dataclass(frozen=True)
class Noop:
    cycles = 1


@dataclass(frozen=True)
class AddX:
    amount: int
    cycles = 2


Instruction = Union[Noop, AddX]

instruction_rule = alternative(
    value(tag("noop"), Noop()),
    map_rule(preceded(tag("addx "), i32), AddX),
)


def parse(text: str) -> list[Instruction]:
    return parse_all(separated_list1(line_ending, instruction_rule), text)


Observer = Callable[["Cpu"], None]


class Cpu:
    """Register machine with an explicit per-cycle hook.

    ``tick()`` advances the cycle counter and notifies observers; instruction
    effects land after their last tick.
    """

    def __init__(self, observers: tuple[Observer, ...] = ()) -> None:
        self.x = 1
        self.cycle = 0
        self._observers = list(observers)

    def tick(self) -> None:
        self.cycle += 1
        for observer in self._observers:
            observer(self)

    def execute(self, instruction: Instruction) -> None:
        for _ in range(instruction.cycles):
            self.tick()
        if isinstance(instruction, AddX):
            self.x += instruction.amount

    def run(self, program: list[Instruction]) -> Cpu:
        for instruction in program:
            self.execute(instruction)
        return self


def part1(text: str) -> str:
    """Sum of signal strengths (cycle * x) at the notable cycles."""
    strengths: list[int] = []

    def record(cpu: Cpu) -> None:
        if cpu.cycle in NOTABLE_CYCLES:
            strengths.append(cpu.cycle * cpu.x)

    Cpu((record,)).run(parse(text))
    return str(sum(strengths))


def part2(text: str) -> str:
    """Render the CRT: a pixel is lit when the 3-wide sprite covers it."""
    pixels: list[str] = []

    def draw(cpu: Cpu) -> None:
        column = (cpu.cycle - 1) % SCREEN_WIDTH
        pixels.append("#" if abs(column - cpu.x) <= 1 else ".")

    Cpu((draw,)).run(parse(text))
    rows = ["".join(pixels[i:i + SCREEN_WIDTH]) for i in range(0, len(pixels), SCREEN_WIDTH)]
    return "\n".join(rows)
