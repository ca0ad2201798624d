"""[TimingPoints] lines look like this :

    time,beatLength,meter,sampleSet,sampleIndex,volume,uninherited,effects

Old files stop after beatLength (or anywhere after it), the missing fields
get their default values. When the uninherited flag itself is missing, a
negative beatLength is what makes a point inherited.

Points are always written back with all 8 fields."""

from functools import singledispatch
from typing import Iterable, List

from osutools.beatmap import (
    DEFAULT_VOLUME,
    Effect,
    InheritedTimingPoint,
    TimingPoint,
    TimingPointsSection,
    UninheritedTimingPoint,
)

from .commons import TIMING_POINTS
from .primitives import FieldReader, format_decimal, format_time

FIELD_NAMES = [
    "time",
    "beatLength",
    "meter",
    "sampleSet",
    "sampleIndex",
    "volume",
    "uninherited",
    "effects",
]


def load_timing_points(lines: Iterable[str]) -> TimingPointsSection:
    return TimingPointsSection(points=[load_timing_point(line) for line in lines])


def load_timing_point(line: str) -> TimingPoint:
    fields = FieldReader(line, TIMING_POINTS, FIELD_NAMES)
    time = fields.number(0)
    beat_length = fields.number(1)
    meter = fields.optional_int(2, default=4)
    sample_set = fields.optional_int(3, default=0)
    sample_index = fields.optional_int(4, default=0)
    volume = fields.optional_int(5, default=DEFAULT_VOLUME)
    if fields.has(6) and fields.raw(6).strip():
        uninherited = fields.integer(6) != 0
    else:
        uninherited = beat_length >= 0
    effects = Effect(fields.optional_int(7, default=0))

    if uninherited:
        return UninheritedTimingPoint(
            time=time,
            beat_length=beat_length,
            meter=meter,
            sample_set=sample_set,
            sample_index=sample_index,
            volume=volume,
            effects=effects,
        )
    else:
        return InheritedTimingPoint(
            time=time,
            beat_length=beat_length,
            meter=meter,
            sample_set=sample_set,
            sample_index=sample_index,
            volume=volume,
            effects=effects,
        )


def dump_timing_points(section: TimingPointsSection) -> List[str]:
    return [dump_timing_point(p) for p in section.points]


@singledispatch
def dump_timing_point(point: TimingPoint) -> str:
    raise NotImplementedError(f"Unknown timing point type : {type(point)}")


@dump_timing_point.register
def dump_uninherited_timing_point(point: UninheritedTimingPoint) -> str:
    return _join_fields(point, uninherited=True)


@dump_timing_point.register
def dump_inherited_timing_point(point: InheritedTimingPoint) -> str:
    return _join_fields(point, uninherited=False)


def _join_fields(point: TimingPoint, uninherited: bool) -> str:
    return ",".join(
        [
            format_time(point.time),
            format_decimal(point.beat_length),
            str(point.meter),
            str(point.sample_set),
            str(point.sample_index),
            str(point.volume),
            "1" if uninherited else "0",
            str(int(point.effects)),
        ]
    )
