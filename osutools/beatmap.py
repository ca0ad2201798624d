"""Provides the Beatmap class, the in-memory model of a .osu file

Decoding a file gives a Beatmap, encoding a Beatmap gives back a file.
Sections that may be missing from a file (Editor, Colours, TimingPoints) are
None when they were absent, which is not the same thing as an empty section.

Times are floating point milliseconds, positions are floating point
osu!pixels"""

from __future__ import annotations

import re
import warnings
from dataclasses import astuple, dataclass, field
from enum import Enum, IntFlag
from typing import Iterator, List, Optional, Sequence, TypeVar, Union

from more_itertools import first, last
from sortedcontainers import SortedKeyList

DEFAULT_BPM = 120.0
DEFAULT_VOLUME = 100
DEFAULT_SLIDER_MULTIPLIER = 1.4


@dataclass(frozen=True)
class Position:
    """2D float vector"""

    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        yield from astuple(self)


class HitSound(IntFlag):
    NORMAL = 1 << 0
    WHISTLE = 1 << 1
    FINISH = 1 << 2
    CLAP = 1 << 3


class Effect(IntFlag):
    KIAI = 1 << 0
    OMIT_FIRST_BARLINE = 1 << 3


class CurveType(str, Enum):
    BEZIER = "B"
    CATMULL = "C"
    LINEAR = "L"
    PERFECT_CIRCLE = "P"


@dataclass
class HitSample:
    """Sample set overrides, custom sample index, volume and filename of a
    hit object, all zeroes / empty mean "use the timing point's" """

    normal_set: int = 0
    addition_set: int = 0
    index: int = 0
    volume: int = 0
    filename: str = ""


@dataclass
class EdgeSet:
    """Sample sets used on one edge (head, repeat or tail) of a slider"""

    normal_set: int = 0
    addition_set: int = 0


@dataclass
class HitObjectCommon:
    """Fields shared by all kinds of hit objects"""

    position: Position
    time: float
    hit_sound: HitSound = HitSound(0)
    new_combo: bool = False
    # how many combo colours to skip, 3 bits
    combo_offset: int = 0
    hit_sample: HitSample = field(default_factory=HitSample)


@dataclass
class Circle:
    common: HitObjectCommon


@dataclass
class Slider:
    common: HitObjectCommon
    curve_type: CurveType
    # does not include the slider head, which is at common.position
    control_points: List[Position]
    slides: int
    length: float
    # one entry per edge (slides + 1), None when the file left them out
    edge_sounds: Optional[List[HitSound]] = None
    edge_sets: Optional[List[EdgeSet]] = None
    # derived from the timing points at decode time, never written back
    duration: Optional[float] = field(default=None, compare=False)

    @property
    def end_time(self) -> Optional[float]:
        if self.duration is None:
            return None
        return self.common.time + self.duration


@dataclass
class Spinner:
    common: HitObjectCommon
    end_time: float


@dataclass
class Hold:
    """osu!mania long note"""

    common: HitObjectCommon
    end_time: float


HitObject = Union[Circle, Slider, Spinner, Hold]


@dataclass
class UninheritedTimingPoint:
    """Red line : sets the tempo from its time onward"""

    time: float
    beat_length: float
    meter: int = 4
    sample_set: int = 0
    sample_index: int = 0
    volume: int = DEFAULT_VOLUME
    effects: Effect = Effect(0)

    @property
    def bpm(self) -> float:
        return 60000 / self.beat_length


@dataclass
class InheritedTimingPoint:
    """Green line : keeps the previous red line's tempo but changes slider
    velocity, volume and samples. beat_length is a negative number that
    encodes the velocity multiplier as -100 / beat_length"""

    time: float
    beat_length: float
    # meaningless for green lines but present on the wire
    meter: int = 4
    sample_set: int = 0
    sample_index: int = 0
    volume: int = DEFAULT_VOLUME
    effects: Effect = Effect(0)

    @property
    def slider_velocity(self) -> float:
        if self.beat_length < 0:
            return -100 / self.beat_length
        else:
            return 1.0


TimingPoint = Union[UninheritedTimingPoint, InheritedTimingPoint]

P = TypeVar("P", bound=Union[UninheritedTimingPoint, InheritedTimingPoint])


def point_at(points: Sequence[P], time: float) -> Optional[P]:
    """Last point in file order that starts at or before the given time.
    When there's none the first point applies retroactively"""
    return last(
        (p for p in points if p.time <= time),
        default=first(points, default=None),
    )


@dataclass
class TimingPointsSection:
    """Timing points in file order, never re-sorted"""

    points: List[TimingPoint] = field(default_factory=list)

    def uninherited_at(self, time: float) -> Optional[UninheritedTimingPoint]:
        red_lines = [p for p in self.points if isinstance(p, UninheritedTimingPoint)]
        return point_at(red_lines, time)

    def inherited_at(self, time: float) -> Optional[InheritedTimingPoint]:
        """The green line controlling slider velocity at the given time, if
        the closest point is a green line"""
        point = point_at(self.points, time)
        if isinstance(point, InheritedTimingPoint):
            return point
        else:
            return None

    def bpm_at(self, time: float) -> float:
        """Tempo at the given time, nonsensical red lines (beat length <= 0)
        count as no red line at all"""
        red_line = self.uninherited_at(time)
        if red_line is None or red_line.beat_length <= 0:
            return DEFAULT_BPM
        else:
            return red_line.bpm

    def volume_at(self, time: float) -> int:
        point = point_at(self.points, time)
        if point is None:
            return DEFAULT_VOLUME
        else:
            return point.volume


@dataclass
class HitObjectsSection:
    """Hit objects in file order, never re-sorted"""

    objects: List[HitObject] = field(default_factory=list)

    def at(self, time: float, leniency: float = 2) -> Optional[HitObject]:
        """First object (in file order) starting within leniency ms of time"""
        return first(
            (o for o in self.objects if abs(o.common.time - time) <= leniency),
            default=None,
        )

    def between(self, start: float, end: float) -> List[HitObject]:
        """Objects starting in [start, end], sorted by time"""
        by_time = SortedKeyList(self.objects, key=lambda o: o.common.time)
        return list(by_time.irange_key(start, end))


@dataclass(frozen=True)
class Colour:
    r: int
    g: int
    b: int


@dataclass
class ComboColour:
    number: int
    colour: Colour


@dataclass
class Colours:
    combos: List[ComboColour] = field(default_factory=list)
    slider_border: Optional[Colour] = None
    slider_track_override: Optional[Colour] = None


BACKGROUND_EVENT = re.compile(
    r'^(?:0|Background),(?P<time>[^,]*),(?:"(?P<quoted>[^"]*)"|(?P<bare>[^,]*))'
    r"(?P<rest>.*)$"
)
BACKGROUND_COMMENT = "//Background and Video events"


@dataclass
class Events:
    """Storyboard, background, video and break events, kept verbatim"""

    lines: List[str] = field(default_factory=list)

    def background(self) -> Optional[str]:
        matches = self._background_matches()
        if not matches:
            return None

        if len(matches) > 1:
            warnings.warn(
                "This beatmap defines more than one background image, the "
                "first one will be used"
            )

        _, match = matches[0]
        return match["quoted"] if match["quoted"] is not None else match["bare"]

    def set_background(self, filename: str) -> None:
        matches = self._background_matches()
        if matches:
            index, match = matches[0]
            self.lines[index] = f'0,{match["time"]},"{filename}"{match["rest"]}'
            return

        new_line = f'0,0,"{filename}",0,0'
        try:
            comment_index = self.lines.index(BACKGROUND_COMMENT)
        except ValueError:
            self.lines.insert(0, new_line)
        else:
            self.lines.insert(comment_index + 1, new_line)

    def _background_matches(self) -> List[tuple]:
        res = []
        for i, line in enumerate(self.lines):
            match = BACKGROUND_EVENT.match(line.strip())
            if match is not None:
                res.append((i, match))
        return res


@dataclass
class General:
    AudioFilename: Optional[str] = None
    AudioLeadIn: Optional[int] = None
    AudioHash: Optional[str] = None
    PreviewTime: Optional[int] = None
    Countdown: Optional[int] = None
    SampleSet: Optional[str] = None
    StackLeniency: Optional[float] = None
    Mode: Optional[int] = None
    LetterboxInBreaks: Optional[bool] = None
    StoryFireInFront: Optional[bool] = None
    UseSkinSprites: Optional[bool] = None
    AlwaysShowPlayfield: Optional[bool] = None
    OverlayPosition: Optional[str] = None
    SkinPreference: Optional[str] = None
    EpilepsyWarning: Optional[bool] = None
    CountdownOffset: Optional[int] = None
    SpecialStyle: Optional[bool] = None
    WidescreenStoryboard: Optional[bool] = None
    SamplesMatchPlaybackRate: Optional[bool] = None


@dataclass
class Editor:
    Bookmarks: Optional[List[int]] = None
    DistanceSpacing: Optional[float] = None
    BeatDivisor: Optional[int] = None
    GridSize: Optional[int] = None
    TimelineZoom: Optional[float] = None


@dataclass
class Metadata:
    Title: Optional[str] = None
    TitleUnicode: Optional[str] = None
    Artist: Optional[str] = None
    ArtistUnicode: Optional[str] = None
    Creator: Optional[str] = None
    Version: Optional[str] = None
    Source: Optional[str] = None
    Tags: Optional[str] = None
    BeatmapID: Optional[int] = None
    BeatmapSetID: Optional[int] = None


@dataclass
class Difficulty:
    HPDrainRate: Optional[float] = None
    CircleSize: Optional[float] = None
    OverallDifficulty: Optional[float] = None
    ApproachRate: Optional[float] = None
    SliderMultiplier: Optional[float] = None
    SliderTickRate: Optional[float] = None

    @property
    def base_slider_multiplier(self) -> float:
        if self.SliderMultiplier is None:
            return DEFAULT_SLIDER_MULTIPLIER
        return self.SliderMultiplier


@dataclass
class Beatmap:
    """A whole .osu file"""

    version: int = 14
    general: General = field(default_factory=General)
    editor: Optional[Editor] = None
    metadata: Metadata = field(default_factory=Metadata)
    difficulty: Difficulty = field(default_factory=Difficulty)
    colours: Optional[Colours] = None
    events: Events = field(default_factory=Events)
    timing_points: Optional[TimingPointsSection] = None
    hit_objects: HitObjectsSection = field(default_factory=HitObjectsSection)

    def uninherited_at(self, time: float) -> Optional[UninheritedTimingPoint]:
        if self.timing_points is None:
            return None
        return self.timing_points.uninherited_at(time)

    def inherited_at(self, time: float) -> Optional[InheritedTimingPoint]:
        if self.timing_points is None:
            return None
        return self.timing_points.inherited_at(time)

    def bpm_at(self, time: float) -> float:
        if self.timing_points is None:
            return DEFAULT_BPM
        return self.timing_points.bpm_at(time)

    def volume_at(self, time: float) -> int:
        if self.timing_points is None:
            return DEFAULT_VOLUME
        return self.timing_points.volume_at(time)

    def hit_object_at(self, time: float, leniency: float = 2) -> Optional[HitObject]:
        return self.hit_objects.at(time, leniency)

    def background_filename(self) -> Optional[str]:
        return self.events.background()

    def set_background_filename(self, filename: str) -> None:
        self.events.set_background(filename)
