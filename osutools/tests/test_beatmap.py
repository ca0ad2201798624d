import pytest

from osutools.beatmap import (
    Beatmap,
    Circle,
    Events,
    HitObjectCommon,
    HitObjectsSection,
    InheritedTimingPoint,
    Position,
    Spinner,
    TimingPointsSection,
    UninheritedTimingPoint,
)


def circle(time: float) -> Circle:
    return Circle(HitObjectCommon(position=Position(256, 192), time=time))


def test_default_beatmap() -> None:
    beatmap = Beatmap()
    assert beatmap.version == 14
    assert beatmap.editor is None
    assert beatmap.colours is None
    assert beatmap.timing_points is None
    assert beatmap.events.lines == []
    assert beatmap.hit_objects.objects == []


def test_timing_fallbacks() -> None:
    for beatmap in (Beatmap(), Beatmap(timing_points=TimingPointsSection())):
        assert beatmap.bpm_at(0) == 120
        assert beatmap.bpm_at(123456) == 120
        assert beatmap.volume_at(0) == 100
        assert beatmap.uninherited_at(0) is None
        assert beatmap.inherited_at(0) is None


def test_timing_precedence() -> None:
    beatmap = Beatmap(
        timing_points=TimingPointsSection(
            points=[
                UninheritedTimingPoint(time=0, beat_length=500),
                UninheritedTimingPoint(time=10000, beat_length=500),
            ]
        )
    )
    assert beatmap.bpm_at(5000) == 120.0
    assert beatmap.bpm_at(-100) == 120.0


def test_green_lines_do_not_change_the_tempo() -> None:
    beatmap = Beatmap(
        timing_points=TimingPointsSection(
            points=[
                UninheritedTimingPoint(time=0, beat_length=300, volume=40),
                InheritedTimingPoint(time=1000, beat_length=-50, volume=90),
            ]
        )
    )
    assert beatmap.bpm_at(2000) == 200
    assert beatmap.volume_at(2000) == 90
    green_line = beatmap.inherited_at(2000)
    assert green_line is not None and green_line.slider_velocity == 2


def test_hit_object_at() -> None:
    spinner = Spinner(HitObjectCommon(position=Position(0, 0), time=3000), 4000)
    beatmap = Beatmap(
        hit_objects=HitObjectsSection(objects=[circle(1000), circle(2000), spinner])
    )
    assert beatmap.hit_object_at(1000) == circle(1000)
    assert beatmap.hit_object_at(2001) == circle(2000)
    assert beatmap.hit_object_at(2003) is None
    assert beatmap.hit_object_at(2010, leniency=10) == circle(2000)
    assert beatmap.hit_object_at(3000) is spinner


def test_hit_object_at_prefers_file_order() -> None:
    section = HitObjectsSection(objects=[circle(1001), circle(1000)])
    assert section.at(1000) == circle(1001)


def test_between_sorts_by_time() -> None:
    section = HitObjectsSection(
        objects=[circle(3000), circle(1000), circle(2000), circle(5000)]
    )
    assert section.between(1000, 3000) == [circle(1000), circle(2000), circle(3000)]
    # the section itself is untouched
    assert [o.common.time for o in section.objects] == [3000, 1000, 2000, 5000]


@pytest.mark.parametrize(
    "line, expected",
    [
        ('0,0,"bg.jpg",0,0', "bg.jpg"),
        ("0,0,bg.jpg,0,0", "bg.jpg"),
        ('0,0,"my background.png"', "my background.png"),
        ('Background,0,"bg.jpg",0,0', "bg.jpg"),
    ],
)
def test_background_filename(line: str, expected: str) -> None:
    beatmap = Beatmap(events=Events(lines=["//Background and Video events", line]))
    assert beatmap.background_filename() == expected


def test_no_background() -> None:
    events = Events(lines=['Video,0,"intro.mp4"', "2,1000,2000"])
    assert events.background() is None


def test_several_backgrounds() -> None:
    events = Events(lines=['0,0,"first.jpg",0,0', '0,0,"second.jpg",0,0'])
    with pytest.warns(UserWarning):
        assert events.background() == "first.jpg"


def test_set_background_replaces_the_existing_one() -> None:
    beatmap = Beatmap(
        events=Events(lines=["//Background and Video events", '0,0,"bg.jpg",10,-20'])
    )
    beatmap.set_background_filename("new.png")
    assert beatmap.events.lines == [
        "//Background and Video events",
        '0,0,"new.png",10,-20',
    ]
    assert beatmap.background_filename() == "new.png"


def test_set_background_goes_after_the_comment() -> None:
    events = Events(
        lines=["//Background and Video events", "//Break Periods", "2,100,200"]
    )
    events.set_background("bg.jpg")
    assert events.lines == [
        "//Background and Video events",
        '0,0,"bg.jpg",0,0',
        "//Break Periods",
        "2,100,200",
    ]


def test_set_background_without_comment() -> None:
    events = Events()
    events.set_background("bg.jpg")
    assert events.lines == ['0,0,"bg.jpg",0,0']
