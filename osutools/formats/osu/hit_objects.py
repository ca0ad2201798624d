"""[HitObjects] lines look like this :

    x,y,time,type,hitSound,objectParams...,hitSample

type is a bit field :

    bit 0     circle
    bit 1     slider
    bit 2     starts a new combo
    bit 3     spinner
    bits 4-6  how many combo colours to skip
    bit 7     osu!mania hold

objectParams depend on the kind of object :

    circle    (nothing)
    slider    curveType|x:y|x:y...,slides,length,edgeSounds,edgeSets
    spinner   endTime
    hold      endTime, glued to the hit sample with a colon instead of a comma

hitSample is normalSet:additionSet:index:volume:filename and is optional
(all zeroes when missing)."""

from functools import singledispatch
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar

from osutools.beatmap import (
    DEFAULT_BPM,
    Circle,
    CurveType,
    Difficulty,
    EdgeSet,
    HitObject,
    HitObjectCommon,
    HitObjectsSection,
    HitSample,
    HitSound,
    Hold,
    Position,
    Slider,
    Spinner,
    TimingPointsSection,
)

from .commons import HIT_OBJECTS, Context
from .primitives import (
    FieldReader,
    bit_is_set,
    format_coordinate,
    format_decimal,
    format_time,
    get_bits,
    put_bits,
)

CIRCLE_BIT = 0
SLIDER_BIT = 1
NEW_COMBO_BIT = 2
SPINNER_BIT = 3
COMBO_OFFSET_SHIFT = 4
COMBO_OFFSET_WIDTH = 3
HOLD_BIT = 7

COMMON_FIELD_NAMES = ["x", "y", "time", "type", "hitSound"]
CIRCLE_FIELD_NAMES = COMMON_FIELD_NAMES + ["hitSample"]
SLIDER_FIELD_NAMES = COMMON_FIELD_NAMES + [
    "curve",
    "slides",
    "length",
    "edgeSounds",
    "edgeSets",
    "hitSample",
]
SPINNER_FIELD_NAMES = COMMON_FIELD_NAMES + ["endTime", "hitSample"]
HOLD_FIELD_NAMES = COMMON_FIELD_NAMES + ["endTime", "hitSample"]

# Slider velocity multipliers outside of this range are clamped
MIN_VELOCITY = 0.1
MAX_VELOCITY = 10.0


def load_hit_objects(
    lines: Iterable[str],
    timing: TimingPointsSection,
    difficulty: Difficulty,
    context: Context,
) -> HitObjectsSection:
    return HitObjectsSection(
        objects=[load_hit_object(line, timing, difficulty, context) for line in lines]
    )


def load_hit_object(
    line: str,
    timing: TimingPointsSection,
    difficulty: Difficulty,
    context: Context,
) -> HitObject:
    fields = FieldReader(line, HIT_OBJECTS, COMMON_FIELD_NAMES)
    type_ = fields.integer(3)
    common = HitObjectCommon(
        position=Position(fields.number(0), fields.number(1)),
        time=fields.number(2),
        hit_sound=HitSound(fields.optional_int(4, default=0)),
        new_combo=bit_is_set(type_, NEW_COMBO_BIT),
        combo_offset=get_bits(type_, COMBO_OFFSET_SHIFT, COMBO_OFFSET_WIDTH),
    )
    if bit_is_set(type_, CIRCLE_BIT):
        fields.names = CIRCLE_FIELD_NAMES
        common.hit_sample = read_hit_sample(fields, 5)
        return Circle(common)
    elif bit_is_set(type_, SLIDER_BIT):
        fields.names = SLIDER_FIELD_NAMES
        return load_slider(fields, common, timing, difficulty, context)
    elif bit_is_set(type_, SPINNER_BIT):
        fields.names = SPINNER_FIELD_NAMES
        end_time = fields.number(5)
        common.hit_sample = read_hit_sample(fields, 6)
        return Spinner(common, end_time=end_time)
    elif bit_is_set(type_, HOLD_BIT):
        fields.names = HOLD_FIELD_NAMES
        return load_hold(fields, common)
    else:
        raise fields.error(3, f"does not name any kind of hit object : {type_}")


def load_slider(
    fields: FieldReader,
    common: HitObjectCommon,
    timing: TimingPointsSection,
    difficulty: Difficulty,
    context: Context,
) -> Slider:
    curve_type, control_points = load_curve(fields, 5)
    slides = fields.integer(6)
    length = fields.number(7)
    edge_count = max(slides, 0) + 1

    edge_sounds: Optional[List[HitSound]] = None
    edge_sets: Optional[List[EdgeSet]] = None
    if fields.has(8):
        edge_sounds = fit_to_edges(
            load_edge_sounds(fields, 8),
            edge_count,
            lambda: HitSound(0),
            fields,
            8,
            context,
        )
        if fields.has(9):
            edge_sets = fit_to_edges(
                load_edge_sets(fields, 9), edge_count, EdgeSet, fields, 9, context
            )
        else:
            edge_sets = [EdgeSet() for _ in range(edge_count)]

    common.hit_sample = read_hit_sample(fields, 10)
    return Slider(
        common=common,
        curve_type=curve_type,
        control_points=control_points,
        slides=slides,
        length=length,
        edge_sounds=edge_sounds,
        edge_sets=edge_sets,
        duration=slider_duration(common.time, length, slides, timing, difficulty),
    )


def load_curve(fields: FieldReader, index: int) -> Tuple[CurveType, List[Position]]:
    tag, *raw_points = fields.raw(index).split("|")
    try:
        curve_type = CurveType(tag)
    except ValueError:
        raise fields.error(
            index,
            f"should start with one of {[c.value for c in CurveType]} but "
            f"{tag!r} was found",
        )

    points = []
    for raw_point in raw_points:
        raw_x, sep, raw_y = raw_point.partition(":")
        if not sep:
            raise fields.error(
                index, f"expected control points in the form x:y, got {raw_point!r}"
            )
        x = fields.parse_number(raw_x, index)
        y = fields.parse_number(raw_y, index)
        points.append(Position(x, y))

    return curve_type, points


def load_edge_sounds(fields: FieldReader, index: int) -> List[HitSound]:
    raw = fields.raw(index)
    if not raw:
        return []
    return [HitSound(fields.parse_integer(s, index)) for s in raw.split("|")]


def load_edge_sets(fields: FieldReader, index: int) -> List[EdgeSet]:
    raw = fields.raw(index)
    if not raw:
        return []

    res = []
    for raw_set in raw.split("|"):
        raw_normal, _, raw_addition = raw_set.partition(":")
        res.append(
            EdgeSet(
                normal_set=fields.parse_integer(raw_normal, index),
                addition_set=fields.parse_integer(raw_addition or "0", index),
            )
        )
    return res


T = TypeVar("T")


def fit_to_edges(
    values: List[T],
    edge_count: int,
    default: Callable[[], T],
    fields: FieldReader,
    index: int,
    context: Context,
) -> List[T]:
    """Real world files have edge lists that are too long or too short,
    those get truncated or padded unless we are asked to be strict"""
    if len(values) == edge_count:
        return values

    if context.strict:
        raise fields.error(
            index,
            f"has {len(values)} entries but a slider with {edge_count - 1} "
            f"slides has {edge_count} edges",
        )

    padding = [default() for _ in range(edge_count - len(values))]
    return values[:edge_count] + padding


def load_hold(fields: FieldReader, common: HitObjectCommon) -> Hold:
    raw_end, sep, raw_sample = fields.raw(5).partition(":")
    end_time = fields.parse_number(raw_end, 5)
    if sep:
        common.hit_sample = load_hit_sample(raw_sample, fields, 5)
    else:
        # some writers put a comma between the end time and the hit sample
        common.hit_sample = read_hit_sample(fields, 6)
    return Hold(common, end_time=end_time)


def read_hit_sample(fields: FieldReader, index: int) -> HitSample:
    if not fields.has(index) or not fields.raw(index).strip():
        return HitSample()
    return load_hit_sample(fields.raw(index), fields, index)


def load_hit_sample(raw: str, fields: FieldReader, index: int) -> HitSample:
    parts = raw.split(":", 4)
    numbers = [fields.parse_integer(p, index) if p else 0 for p in parts[:4]]
    numbers += [0] * (4 - len(numbers))
    normal_set, addition_set, sample_index, volume = numbers
    filename = parts[4] if len(parts) == 5 else ""
    return HitSample(normal_set, addition_set, sample_index, volume, filename)


def velocity_multiplier_at(timing: TimingPointsSection, time: float) -> float:
    green_line = timing.inherited_at(time)
    if green_line is None:
        return 1.0
    return min(max(green_line.slider_velocity, MIN_VELOCITY), MAX_VELOCITY)


def slider_duration(
    time: float,
    length: float,
    slides: int,
    timing: TimingPointsSection,
    difficulty: Difficulty,
) -> Optional[float]:
    """How long it takes to go through the whole slider, repeats included"""
    red_line = timing.uninherited_at(time)
    if red_line is None:
        beat_length = 60000 / DEFAULT_BPM
    else:
        beat_length = red_line.beat_length

    pixels_per_beat = (
        difficulty.base_slider_multiplier * 100 * velocity_multiplier_at(timing, time)
    )
    if beat_length <= 0 or pixels_per_beat <= 0:
        return None

    beats = length * slides / pixels_per_beat
    return beats * beat_length


def dump_hit_objects(section: HitObjectsSection) -> List[str]:
    return [dump_hit_object(o) for o in section.objects]


@singledispatch
def dump_hit_object(obj: HitObject) -> str:
    raise NotImplementedError(f"Unknown hit object type : {type(obj)}")


@dump_hit_object.register
def dump_circle(circle: Circle) -> str:
    fields = dump_common(circle.common, CIRCLE_BIT)
    fields.append(dump_hit_sample(circle.common.hit_sample))
    return ",".join(fields)


@dump_hit_object.register
def dump_slider(slider: Slider) -> str:
    fields = dump_common(slider.common, SLIDER_BIT)
    fields += [
        dump_curve(slider.curve_type, slider.control_points),
        str(slider.slides),
        format_decimal(slider.length),
    ]
    if (
        slider.edge_sounds is None
        and slider.edge_sets is None
        and slider.common.hit_sample == HitSample()
    ):
        return ",".join(fields)

    edge_count = max(slider.slides, 0) + 1
    edge_sounds = slider.edge_sounds
    if edge_sounds is None:
        edge_sounds = [HitSound(0)] * edge_count
    edge_sets = slider.edge_sets
    if edge_sets is None:
        edge_sets = [EdgeSet() for _ in range(edge_count)]

    fields += [
        "|".join(str(int(s)) for s in edge_sounds),
        "|".join(f"{e.normal_set}:{e.addition_set}" for e in edge_sets),
        dump_hit_sample(slider.common.hit_sample),
    ]
    return ",".join(fields)


@dump_hit_object.register
def dump_spinner(spinner: Spinner) -> str:
    fields = dump_common(spinner.common, SPINNER_BIT)
    fields += [
        format_time(spinner.end_time),
        dump_hit_sample(spinner.common.hit_sample),
    ]
    return ",".join(fields)


@dump_hit_object.register
def dump_hold(hold: Hold) -> str:
    fields = dump_common(hold.common, HOLD_BIT)
    end_and_sample = (
        f"{format_time(hold.end_time)}:{dump_hit_sample(hold.common.hit_sample)}"
    )
    fields.append(end_and_sample)
    return ",".join(fields)


def dump_type(kind_bit: int, new_combo: bool, combo_offset: int) -> int:
    type_ = 1 << kind_bit
    if new_combo:
        type_ |= 1 << NEW_COMBO_BIT
    type_ |= put_bits(combo_offset, COMBO_OFFSET_SHIFT, COMBO_OFFSET_WIDTH)
    return type_


def dump_common(common: HitObjectCommon, kind_bit: int) -> List[str]:
    return [
        format_coordinate(common.position.x),
        format_coordinate(common.position.y),
        format_time(common.time),
        str(dump_type(kind_bit, common.new_combo, common.combo_offset)),
        str(int(common.hit_sound)),
    ]


def dump_curve(curve_type: CurveType, points: List[Position]) -> str:
    return "|".join(
        [curve_type.value]
        + [f"{format_coordinate(p.x)}:{format_coordinate(p.y)}" for p in points]
    )


def dump_hit_sample(sample: HitSample) -> str:
    return (
        f"{sample.normal_set}:{sample.addition_set}:{sample.index}:"
        f"{sample.volume}:{sample.filename}"
    )
