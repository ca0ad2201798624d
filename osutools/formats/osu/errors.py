"""Everything that can go wrong while decoding a .osu file

StructuralError and FieldParseError are both fatal to the whole decode, they
only differ in what they point at : the document's layout or a single field
of a single line. Irregularities the format tolerates in practice (missing
optional fields, slider edge lists of the wrong length ...) never raise."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from osutools.beatmap import Beatmap


class DecodeError(ValueError):
    def __init__(
        self,
        message: str,
        section: Optional[str] = None,
        line: Optional[str] = None,
    ):
        self.section = section
        self.line = line
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.section is not None:
            message = f"[{self.section}] {message}"
        if self.line is not None:
            message += f" (in line {self.line!r})"
        return message


class StructuralError(DecodeError):
    """Empty document, bad header line or missing required section"""


class FieldParseError(DecodeError):
    """A field of a timing point, hit object or key-value line is missing
    or can't be understood"""

    def __init__(
        self,
        message: str,
        section: Optional[str] = None,
        line: Optional[str] = None,
        field_index: Optional[int] = None,
        field_name: Optional[str] = None,
    ):
        self.field_index = field_index
        self.field_name = field_name
        super().__init__(message, section=section, line=line)


@dataclass
class Decoded:
    beatmap: Beatmap


@dataclass
class DecodeFailure:
    error: DecodeError

    @property
    def is_structural(self) -> bool:
        return isinstance(self.error, StructuralError)


DecodeResult = Union[Decoded, DecodeFailure]
