from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Sections in the order they are written back
GENERAL = "General"
EDITOR = "Editor"
METADATA = "Metadata"
DIFFICULTY = "Difficulty"
EVENTS = "Events"
TIMING_POINTS = "TimingPoints"
COLOURS = "Colours"
HIT_OBJECTS = "HitObjects"

REQUIRED_SECTIONS = (GENERAL, METADATA, DIFFICULTY, EVENTS, HIT_OBJECTS)


class FormatFamily(int, Enum):
    """The two header versions this library knows how to write.

    MODERN covers every numbered version of the format, all of them get
    written back as v14. ALTERNATE is the v128 sentinel, which differs in a
    handful of separators and blank lines."""

    MODERN = 14
    ALTERNATE = 128

    @classmethod
    def from_version(cls, version: int) -> FormatFamily:
        if version == cls.ALTERNATE:
            return cls.ALTERNATE
        else:
            return cls.MODERN


@dataclass(frozen=True)
class Context:
    """Passed down to every decode and encode function.

    strict turns the irregularities that are normally smoothed over
    (slider edge lists not matching the number of slides) into errors"""

    family: FormatFamily = FormatFamily.MODERN
    strict: bool = False

    @classmethod
    def for_version(cls, version: int, strict: bool = False) -> Context:
        return cls(family=FormatFamily.from_version(version), strict=strict)
