import warnings
from pathlib import Path
from typing import Any

from osutools.beatmap import Beatmap, Events, TimingPointsSection
from osutools.utils import none_or

from .colours import load_colours
from .commons import (
    COLOURS,
    DIFFICULTY,
    EDITOR,
    EVENTS,
    GENERAL,
    HIT_OBJECTS,
    METADATA,
    REQUIRED_SECTIONS,
    TIMING_POINTS,
    Context,
    FormatFamily,
)
from .errors import DecodeError, Decoded, DecodeFailure, DecodeResult, StructuralError
from .hit_objects import load_hit_objects
from .schema import (
    DIFFICULTY_SECTION,
    EDITOR_SECTION,
    GENERAL_SECTION,
    METADATA_SECTION,
)
from .sections import split_sections
from .timing_points import load_timing_points


def load_osu(path: Path, *, strict: bool = False, **kwargs: Any) -> Beatmap:
    if path.is_dir():
        raise ValueError(
            "osu! beatmap sets are folders with one .osu file per difficulty, "
            "please point to a single .osu file"
        )

    with path.open(encoding="utf-8-sig") as f:
        return decode(f.read(), strict=strict)


def decode(text: str, *, strict: bool = False) -> Beatmap:
    """Parse the text of a .osu file. strict makes slider edge lists that
    don't match the slide count an error instead of padding / truncating
    them"""
    document = split_sections(text)
    sections = document.sections
    missing = [name for name in REQUIRED_SECTIONS if name not in sections]
    if missing:
        raise StructuralError(
            f"Missing required section(s) : {', '.join(f'[{m}]' for m in missing)}"
        )

    if document.version not in {f.value for f in FormatFamily}:
        warnings.warn(
            f"osu file format v{document.version} is not explicitly supported, "
            f"it will be written back as v{FormatFamily.MODERN.value}"
        )

    context = Context.for_version(document.version, strict=strict)
    difficulty = DIFFICULTY_SECTION.load(sections[DIFFICULTY])
    timing_points = none_or(load_timing_points, sections.get(TIMING_POINTS))
    hit_objects = load_hit_objects(
        sections[HIT_OBJECTS],
        timing=timing_points or TimingPointsSection(),
        difficulty=difficulty,
        context=context,
    )
    return Beatmap(
        version=document.version,
        general=GENERAL_SECTION.load(sections[GENERAL]),
        editor=none_or(EDITOR_SECTION.load, sections.get(EDITOR)),
        metadata=METADATA_SECTION.load(sections[METADATA]),
        difficulty=difficulty,
        colours=none_or(load_colours, sections.get(COLOURS)),
        events=Events(lines=list(sections[EVENTS])),
        timing_points=timing_points,
        hit_objects=hit_objects,
    )


def try_decode(text: str, *, strict: bool = False) -> DecodeResult:
    try:
        return Decoded(decode(text, strict=strict))
    except DecodeError as e:
        return DecodeFailure(e)
