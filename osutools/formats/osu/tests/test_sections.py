import pytest

from ..errors import StructuralError
from ..sections import parse_header, split_sections


@pytest.mark.parametrize(
    "line, version",
    [
        ("osu file format v14", 14),
        ("osu file format v128", 128),
        ("osu file format v3", 3),
        ("  osu file format v14  ", 14),
        ("file format v9", 9),
    ],
)
def test_header(line: str, version: int) -> None:
    assert parse_header(line) == version


@pytest.mark.parametrize(
    "line",
    [
        "[General]",
        "osu file format",
        "osu file format vX",
        "osu beatmap v14",
    ],
)
def test_bad_header(line: str) -> None:
    with pytest.raises(StructuralError):
        parse_header(line)


def test_empty_document() -> None:
    with pytest.raises(StructuralError):
        split_sections("")
    with pytest.raises(StructuralError):
        split_sections("\n\r\n   \n")


def test_both_line_endings_are_accepted() -> None:
    unix = split_sections("osu file format v14\n\n[General]\nMode: 0\n")
    windows = split_sections("osu file format v14\r\n\r\n[General]\r\nMode: 0\r\n")
    assert unix == windows
    assert unix.sections == {"General": ["Mode: 0"]}


def test_byte_order_mark_is_ignored() -> None:
    document = split_sections("\ufeffosu file format v128\n[Events]\n")
    assert document.version == 128
    assert document.sections == {"Events": []}


def test_comments_are_dropped_outside_of_events() -> None:
    document = split_sections(
        "osu file format v14\n"
        "[General]\n"
        "// comment\n"
        "Mode: 0\n"
        "[Events]\n"
        "//Background and Video events\n"
        '0,0,"bg.jpg",0,0\n'
    )
    assert document.sections["General"] == ["Mode: 0"]
    assert document.sections["Events"] == [
        "//Background and Video events",
        '0,0,"bg.jpg",0,0',
    ]


def test_event_lines_are_not_trimmed() -> None:
    document = split_sections(
        "osu file format v14\n"
        "[Events]\n"
        'Sprite,Foreground,Centre,"star.png",320,240\n'
        " F,0,1000,2000,0,1\n"
        "  S,0,1000,,0.5 \n"
        "[HitObjects]\n"
        "  256,192,1000,1,0  \n"
    )
    assert document.sections["Events"] == [
        'Sprite,Foreground,Centre,"star.png",320,240',
        " F,0,1000,2000,0,1",
        "  S,0,1000,,0.5 ",
    ]
    assert document.sections["HitObjects"] == ["256,192,1000,1,0"]


def test_unknown_sections_are_kept() -> None:
    document = split_sections("osu file format v14\n[Whatever]\nsomething\n")
    assert document.sections == {"Whatever": ["something"]}


def test_lines_before_the_first_section_are_ignored() -> None:
    document = split_sections("osu file format v14\nstray line\n[General]\n")
    assert document.sections == {"General": []}
