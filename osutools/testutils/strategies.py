"""
Hypothesis strategies to generate hit objects, timing points and whole
beatmaps that a .osu file can represent exactly
"""

import string
from typing import List, Optional

import hypothesis.strategies as st

from osutools.beatmap import (
    Beatmap,
    Circle,
    Colour,
    ComboColour,
    Colours,
    CurveType,
    Difficulty,
    EdgeSet,
    Editor,
    Effect,
    Events,
    General,
    HitObject,
    HitObjectCommon,
    HitObjectsSection,
    HitSample,
    HitSound,
    Hold,
    InheritedTimingPoint,
    Metadata,
    Position,
    Slider,
    Spinner,
    TimingPoint,
    TimingPointsSection,
    UninheritedTimingPoint,
)


def numbers(
    min_value: float = -1e6, max_value: float = 1e6
) -> st.SearchStrategy[float]:
    """Mostly whole numbers, like in real files, with the odd fractional one"""
    return st.one_of(
        st.integers(min_value=int(min_value), max_value=int(max_value)).map(float),
        st.floats(min_value=min_value, max_value=max_value, allow_nan=False),
    )


@st.composite
def position(draw: st.DrawFn) -> Position:
    x = draw(numbers(min_value=-512, max_value=1024))
    y = draw(numbers(min_value=-384, max_value=768))
    return Position(x, y)


times = numbers(min_value=-10_000, max_value=600_000)

# no commas (field separator) and no surrounding whitespace (lines are trimmed)
sample_filenames = st.text(
    alphabet=string.ascii_letters + string.digits + "._-", max_size=12
)


@st.composite
def hit_sample(
    draw: st.DrawFn,
    filename_strat: st.SearchStrategy[str] = sample_filenames,
) -> HitSample:
    return HitSample(
        normal_set=draw(st.integers(min_value=0, max_value=3)),
        addition_set=draw(st.integers(min_value=0, max_value=3)),
        index=draw(st.integers(min_value=0, max_value=100)),
        volume=draw(st.integers(min_value=0, max_value=100)),
        filename=draw(filename_strat),
    )


hit_sounds = st.integers(min_value=0, max_value=15).map(HitSound)


@st.composite
def hit_object_common(
    draw: st.DrawFn,
    sample_strat: st.SearchStrategy[HitSample] = hit_sample(),
) -> HitObjectCommon:
    return HitObjectCommon(
        position=draw(position()),
        time=draw(times),
        hit_sound=draw(hit_sounds),
        new_combo=draw(st.booleans()),
        combo_offset=draw(st.integers(min_value=0, max_value=7)),
        hit_sample=draw(sample_strat),
    )


@st.composite
def circle(draw: st.DrawFn) -> Circle:
    return Circle(draw(hit_object_common()))


@st.composite
def edge_set(draw: st.DrawFn) -> EdgeSet:
    return EdgeSet(
        normal_set=draw(st.integers(min_value=0, max_value=3)),
        addition_set=draw(st.integers(min_value=0, max_value=3)),
    )


@st.composite
def slider(draw: st.DrawFn) -> Slider:
    slides = draw(st.integers(min_value=1, max_value=10))
    short_form = draw(st.booleans())
    if short_form:
        # edge lists left out, which also means no hit sample
        common = draw(hit_object_common(sample_strat=st.just(HitSample())))
        edge_sounds: Optional[List[HitSound]] = None
        edge_sets: Optional[List[EdgeSet]] = None
    else:
        common = draw(hit_object_common())
        edges = st.lists(hit_sounds, min_size=slides + 1, max_size=slides + 1)
        edge_sounds = draw(edges)
        edge_sets = draw(st.lists(edge_set(), min_size=slides + 1, max_size=slides + 1))

    return Slider(
        common=common,
        curve_type=draw(st.sampled_from(CurveType)),
        control_points=draw(st.lists(position(), min_size=1, max_size=6)),
        slides=slides,
        length=draw(numbers(min_value=0, max_value=10_000)),
        edge_sounds=edge_sounds,
        edge_sets=edge_sets,
    )


@st.composite
def spinner(draw: st.DrawFn) -> Spinner:
    return Spinner(draw(hit_object_common()), end_time=draw(times))


@st.composite
def hold(draw: st.DrawFn) -> Hold:
    return Hold(draw(hit_object_common()), end_time=draw(times))


hit_objects = st.one_of(circle(), slider(), spinner(), hold())


effects = st.sampled_from([0, 1, 8, 9]).map(Effect)


@st.composite
def uninherited_timing_point(draw: st.DrawFn) -> UninheritedTimingPoint:
    return UninheritedTimingPoint(
        time=draw(times),
        beat_length=draw(numbers(min_value=1, max_value=5000)),
        meter=draw(st.integers(min_value=1, max_value=7)),
        sample_set=draw(st.integers(min_value=0, max_value=3)),
        sample_index=draw(st.integers(min_value=0, max_value=100)),
        volume=draw(st.integers(min_value=0, max_value=100)),
        effects=draw(effects),
    )


@st.composite
def inherited_timing_point(draw: st.DrawFn) -> InheritedTimingPoint:
    return InheritedTimingPoint(
        time=draw(times),
        beat_length=draw(numbers(min_value=-1000, max_value=-10)),
        meter=draw(st.integers(min_value=1, max_value=7)),
        sample_set=draw(st.integers(min_value=0, max_value=3)),
        sample_index=draw(st.integers(min_value=0, max_value=100)),
        volume=draw(st.integers(min_value=0, max_value=100)),
        effects=draw(effects),
    )


timing_points: st.SearchStrategy[TimingPoint] = st.one_of(
    uninherited_timing_point(), inherited_timing_point()
)


@st.composite
def timing_points_section(draw: st.DrawFn) -> TimingPointsSection:
    return TimingPointsSection(points=draw(st.lists(timing_points, max_size=10)))


# single line, no surrounding whitespace
values = st.text(
    alphabet=st.characters(blacklist_categories=("Cc", "Cs", "Zl", "Zp")),
    max_size=20,
).map(str.strip)


@st.composite
def general(draw: st.DrawFn) -> General:
    return General(
        AudioFilename=draw(st.none() | values),
        AudioLeadIn=draw(st.none() | st.integers(min_value=0, max_value=5000)),
        PreviewTime=draw(st.none() | st.integers(min_value=-1, max_value=600_000)),
        Countdown=draw(st.none() | st.integers(min_value=0, max_value=3)),
        SampleSet=draw(st.none() | st.sampled_from(["Normal", "Soft", "Drum"])),
        StackLeniency=draw(st.none() | numbers(min_value=0, max_value=1)),
        Mode=draw(st.none() | st.integers(min_value=0, max_value=3)),
        LetterboxInBreaks=draw(st.none() | st.booleans()),
        WidescreenStoryboard=draw(st.none() | st.booleans()),
    )


@st.composite
def editor(draw: st.DrawFn) -> Editor:
    return Editor(
        Bookmarks=draw(st.none() | st.lists(st.integers(min_value=0), max_size=5)),
        DistanceSpacing=draw(st.none() | numbers(min_value=0.1, max_value=6)),
        BeatDivisor=draw(st.none() | st.integers(min_value=1, max_value=16)),
        GridSize=draw(st.none() | st.sampled_from([4, 8, 16, 32])),
        TimelineZoom=draw(st.none() | numbers(min_value=0.1, max_value=8)),
    )


@st.composite
def metadata(
    draw: st.DrawFn,
    text_strat: st.SearchStrategy[str] = values,
) -> Metadata:
    text = st.none() | text_strat
    return Metadata(
        Title=draw(text),
        TitleUnicode=draw(text),
        Artist=draw(text),
        ArtistUnicode=draw(text),
        Creator=draw(text),
        Version=draw(text),
        Source=draw(text),
        Tags=draw(text),
        BeatmapID=draw(st.none() | st.integers(min_value=-1)),
        BeatmapSetID=draw(st.none() | st.integers(min_value=-1)),
    )


@st.composite
def difficulty(draw: st.DrawFn) -> Difficulty:
    stat = st.none() | numbers(min_value=0, max_value=10)
    return Difficulty(
        HPDrainRate=draw(stat),
        CircleSize=draw(stat),
        OverallDifficulty=draw(stat),
        ApproachRate=draw(stat),
        SliderMultiplier=draw(st.none() | numbers(min_value=0.4, max_value=3.6)),
        SliderTickRate=draw(st.none() | numbers(min_value=0.5, max_value=8)),
    )


@st.composite
def colour(draw: st.DrawFn) -> Colour:
    r, g, b = (draw(st.integers(min_value=0, max_value=255)) for _ in range(3))
    return Colour(r, g, b)


@st.composite
def colours(draw: st.DrawFn) -> Colours:
    count = draw(st.integers(min_value=0, max_value=8))
    return Colours(
        combos=[ComboColour(i + 1, draw(colour())) for i in range(count)],
        slider_border=draw(st.none() | colour()),
        slider_track_override=draw(st.none() | colour()),
    )


EVENT_LINES = [
    "//Background and Video events",
    '0,0,"bg.jpg",0,0',
    'Video,-200,"intro.mp4"',
    "//Break Periods",
    "2,64000,72000",
    "//Storyboard Layer 0 (Background)",
    'Sprite,Foreground,Centre,"sb/star.png",320,240',
    " F,0,1000,2000,0,1",
    "  S,0,1000,,0.5",
    "//Storyboard Sound Samples",
]


@st.composite
def events(draw: st.DrawFn) -> Events:
    return Events(lines=draw(st.lists(st.sampled_from(EVENT_LINES), max_size=8)))


@st.composite
def beatmap(
    draw: st.DrawFn,
    version_strat: st.SearchStrategy[int] = st.sampled_from([14, 128]),
    hit_objects_strat: st.SearchStrategy[List[HitObject]] = st.lists(
        hit_objects, max_size=16
    ),
    metadata_strat: st.SearchStrategy[Metadata] = metadata(),
) -> Beatmap:
    return Beatmap(
        version=draw(version_strat),
        general=draw(general()),
        editor=draw(st.none() | editor()),
        metadata=draw(metadata_strat),
        difficulty=draw(difficulty()),
        colours=draw(st.none() | colours()),
        events=draw(events()),
        timing_points=draw(st.none() | timing_points_section()),
        hit_objects=HitObjectsSection(objects=draw(hit_objects_strat)),
    )
