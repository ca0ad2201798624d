"""Number, time, colour and bit flag helpers shared by every section codec.

Nothing here depends on the current locale : decimal points are always dots
and numbers are never grouped."""

import math
import re
from decimal import Decimal
from functools import singledispatch
from typing import Any, List, Optional

from osutools.beatmap import Colour

from .errors import FieldParseError


def format_decimal(value: float) -> str:
    """Shortest text that parses back to the exact same float, without
    exponent and without a useless ".0" """
    if not math.isfinite(value):
        raise ValueError(f"Can't write {value!r} in a .osu file")

    if float(value).is_integer():
        return str(int(value))

    return pretty_print_decimal(Decimal(repr(float(value))))


def pretty_print_decimal(d: Decimal) -> str:
    raw_string_form = format(d, "f")
    if "." in raw_string_form:
        return raw_string_form.rstrip("0").rstrip(".")
    else:
        return raw_string_form


def format_time(milliseconds: float) -> str:
    """Times are whole milliseconds in almost every file, the few fractional
    ones keep their decimals so they survive a round trip"""
    return format_decimal(milliseconds)


def format_coordinate(value: float) -> str:
    return format_decimal(value)


@singledispatch
def format_value(value: Any) -> str:
    return str(value)


@format_value.register
def format_bool_value(value: bool) -> str:
    return "1" if value else "0"


@format_value.register
def format_int_value(value: int) -> str:
    # int() strips IntFlag / IntEnum reprs
    return str(int(value))


@format_value.register
def format_float_value(value: float) -> str:
    return format_decimal(value)


@format_value.register(list)
def format_list_value(value: List[Any]) -> str:
    return ",".join(format_value(v) for v in value)


# ASCII digits only, int() and float() also take underscores, padding and
# digits from other scripts
INTEGER = re.compile(r"[+-]?[0-9]+")
NUMBER = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class FieldReader:
    """Reads typed values out of a comma-separated record, raising errors
    that point at the offending line and field"""

    def __init__(self, line: str, section: str, names: List[str]):
        self.line = line
        self.section = section
        self.names = names
        self.fields = line.split(",")

    def has(self, index: int) -> bool:
        return index < len(self.fields)

    def raw(self, index: int) -> str:
        if not self.has(index):
            raise self.error(index, "is missing")
        return self.fields[index]

    def number(self, index: int) -> float:
        return self.parse_number(self.raw(index), index)

    def integer(self, index: int) -> int:
        return self.parse_integer(self.raw(index), index)

    def parse_number(self, raw: str, index: int) -> float:
        """Parse part of a field, errors still point at the whole field"""
        if NUMBER.fullmatch(raw) is None:
            raise self.error(index, f"should be a number but {raw!r} was found")

        value = float(raw)

        if not math.isfinite(value):
            raise self.error(index, f"should be a finite number but {raw!r} was found")

        return value

    def parse_integer(self, raw: str, index: int) -> int:
        if INTEGER.fullmatch(raw) is None:
            raise self.error(index, f"should be an integer but {raw!r} was found")

        return int(raw)

    def optional_int(self, index: int, default: int) -> int:
        if not self.has(index) or not self.fields[index].strip():
            return default
        return self.integer(index)

    def name_of(self, index: int) -> str:
        if index < len(self.names):
            return self.names[index]
        return f"field {index}"

    def error(self, index: int, problem: str) -> FieldParseError:
        name = self.name_of(index)
        return FieldParseError(
            f"{name} (field {index}) {problem}",
            section=self.section,
            line=self.line,
            field_index=index,
            field_name=name,
        )


def parse_colour(raw: str) -> Colour:
    """r,g,b with an optional alpha component that gets dropped"""
    components = [c.strip() for c in raw.split(",")]
    if len(components) not in (3, 4):
        raise ValueError(
            f"Expected 3 or 4 comma-separated values but found {len(components)}"
        )

    for component in components:
        if INTEGER.fullmatch(component) is None:
            raise ValueError(f"Colour component is not an integer : {component!r}")

    r, g, b = (int(c) for c in components[:3])
    for value in (r, g, b):
        if not 0 <= value <= 255:
            raise ValueError(f"Colour component out of [0, 255] range : {value}")

    return Colour(r, g, b)


def format_colour(colour: Colour, alpha: Optional[int] = None) -> str:
    components = [colour.r, colour.g, colour.b]
    if alpha is not None:
        components.append(alpha)
    return ",".join(str(c) for c in components)


def bit_is_set(value: int, bit: int) -> bool:
    return bool(value & (1 << bit))


def get_bits(value: int, shift: int, width: int) -> int:
    return (value >> shift) & ((1 << width) - 1)


def put_bits(value: int, shift: int, width: int) -> int:
    mask = (1 << width) - 1
    if not 0 <= value <= mask:
        raise ValueError(f"{value} does not fit in {width} bits")
    return value << shift
