import pytest
from hypothesis import given

from osutools.beatmap import (
    DEFAULT_BPM,
    DEFAULT_VOLUME,
    Effect,
    InheritedTimingPoint,
    TimingPoint,
    TimingPointsSection,
    UninheritedTimingPoint,
)
from osutools.testutils import strategies as osust

from ..errors import FieldParseError
from ..timing_points import dump_timing_point, load_timing_point, load_timing_points


def test_full_uninherited_point() -> None:
    point = load_timing_point("0,500,4,2,0,50,1,0")
    assert point == UninheritedTimingPoint(
        time=0, beat_length=500, meter=4, sample_set=2, sample_index=0, volume=50
    )
    assert point.bpm == 120


def test_full_inherited_point() -> None:
    point = load_timing_point("8000,-50,4,2,0,60,0,1")
    assert isinstance(point, InheritedTimingPoint)
    assert point.slider_velocity == 2
    assert point.effects == Effect.KIAI


def test_short_records_get_default_values() -> None:
    point = load_timing_point("1000,333.33")
    assert point == UninheritedTimingPoint(
        time=1000,
        beat_length=333.33,
        meter=4,
        sample_set=0,
        sample_index=0,
        volume=100,
        effects=Effect(0),
    )


def test_missing_uninherited_flag_is_deduced_from_beat_length() -> None:
    assert isinstance(load_timing_point("1000,-100"), InheritedTimingPoint)
    assert isinstance(load_timing_point("1000,-100,4,1,0,70"), InheritedTimingPoint)
    assert isinstance(load_timing_point("1000,250,4,1,0,70"), UninheritedTimingPoint)


def test_explicit_flag_wins_over_beat_length() -> None:
    assert isinstance(
        load_timing_point("1000,-100,4,1,0,70,1,0"), UninheritedTimingPoint
    )


@pytest.mark.parametrize(
    "line",
    [
        "",
        "1000",
        "abc,500",
        "0,nan",
        "0,500,four",
    ],
)
def test_bad_lines_raise(line: str) -> None:
    with pytest.raises(FieldParseError):
        load_timing_point(line)


def test_error_points_at_the_field() -> None:
    with pytest.raises(FieldParseError) as excinfo:
        load_timing_point("0,500,4,2,0,loud,1,0")
    assert excinfo.value.field_index == 5
    assert excinfo.value.field_name == "volume"
    assert "0,500,4,2,0,loud,1,0" in str(excinfo.value)


def test_points_are_always_written_with_all_fields() -> None:
    assert dump_timing_point(load_timing_point("1000,-100")) == (
        "1000,-100,4,0,0,100,0,0"
    )
    assert dump_timing_point(load_timing_point("12.5,333.3333")) == (
        "12.5,333.3333,4,0,0,100,1,0"
    )


@given(osust.timing_points)
def test_that_timing_points_roundtrip(point: TimingPoint) -> None:
    assert load_timing_point(dump_timing_point(point)) == point


def test_two_red_lines_at_120_bpm() -> None:
    section = load_timing_points(["0,500,4,2,0,50,1,0", "10000,500,4,2,0,50,1,0"])
    assert len(section.points) == 2
    assert all(isinstance(p, UninheritedTimingPoint) for p in section.points)
    assert all(p.bpm == 120 for p in section.points)  # type: ignore[union-attr]


def test_queries_fall_back_without_points() -> None:
    section = TimingPointsSection()
    assert section.bpm_at(1234) == DEFAULT_BPM
    assert section.volume_at(1234) == DEFAULT_VOLUME
    assert section.uninherited_at(1234) is None
    assert section.inherited_at(1234) is None


def test_tempo_comes_from_the_preceding_red_line() -> None:
    section = load_timing_points(
        [
            "0,500,4,2,0,50,1,0",
            "4000,-50,4,2,0,30,0,0",
            "10000,250,4,2,0,80,1,0",
        ]
    )
    assert section.bpm_at(5000) == 120
    assert section.volume_at(5000) == 30
    assert section.bpm_at(10000) == 240
    assert section.volume_at(12000) == 80


def test_first_point_applies_before_it_starts() -> None:
    section = load_timing_points(["1000,500,4,2,0,50,1,0", "10000,250,4,2,0,50,1,0"])
    assert section.bpm_at(-100) == 120
    assert section.volume_at(-100) == 50


def test_inherited_point_only_applies_until_the_next_point() -> None:
    section = load_timing_points(
        [
            "0,500,4,2,0,50,1,0",
            "1000,-50,4,2,0,50,0,0",
            "2000,500,4,2,0,50,1,0",
        ]
    )
    green_line = section.inherited_at(1500)
    assert green_line is not None
    assert green_line.slider_velocity == 2
    assert section.inherited_at(500) is None
    assert section.inherited_at(2500) is None


def test_points_are_kept_in_file_order() -> None:
    lines = ["10000,500,4,2,0,50,1,0", "0,400,4,2,0,50,1,0"]
    section = load_timing_points(lines)
    assert [p.time for p in section.points] == [10000, 0]


def test_later_red_line_wins_a_tie() -> None:
    section = load_timing_points(["1000,500,4,2,0,50,1,0", "1000,250,4,2,0,50,1,0"])
    assert section.bpm_at(1000) == 240
    assert section.bpm_at(5000) == 240


def test_later_point_wins_a_tie_between_red_and_green_lines() -> None:
    section = load_timing_points(["1000,500,4,2,0,80,1,0", "1000,-50,4,2,0,30,0,0"])
    assert section.volume_at(1000) == 30
    green_line = section.inherited_at(1000)
    assert green_line is not None
    assert green_line.volume == 30
    assert section.bpm_at(1000) == 120


def test_green_line_loses_a_tie_against_a_later_red_line() -> None:
    section = load_timing_points(["1000,-50,4,2,0,30,0,0", "1000,500,4,2,0,80,1,0"])
    assert section.volume_at(1000) == 80
    assert section.inherited_at(1000) is None


@pytest.mark.parametrize("beat_length", ["0", "-0", "-500"])
def test_red_lines_without_a_usable_tempo(beat_length: str) -> None:
    point = load_timing_point(f"0,{beat_length},4,2,0,50,1,0")
    assert isinstance(point, UninheritedTimingPoint)
    section = TimingPointsSection(points=[point])
    assert section.uninherited_at(100) is point
    assert section.bpm_at(100) == DEFAULT_BPM
    assert dump_timing_point(point).startswith("0,")


@pytest.mark.parametrize(
    "line",
    [
        "1_000,500",
        " 1000,500",
        "1000,500 ",
        "\u0661\u0660\u0660\u0660,500",
        "1000,500,4,2,0,1_00,1,0",
        "1000,inf",
    ],
)
def test_numbers_are_plain_ascii(line: str) -> None:
    with pytest.raises(FieldParseError):
        load_timing_point(line)


def test_decimal_forms_that_real_files_use() -> None:
    assert load_timing_point("-30,.5").time == -30
    assert load_timing_point("+30,0.5").beat_length == 0.5
    assert load_timing_point("30,1E-05").beat_length == 0.00001
