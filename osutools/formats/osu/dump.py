from functools import partial
from pathlib import Path
from typing import Any, List, Optional

from osutools.beatmap import Beatmap
from osutools.formats.dump_tools import (
    BeatmapFile,
    make_dumper_from_beatmap_file_dumper,
)

from .colours import dump_colours
from .commons import (
    COLOURS,
    EVENTS,
    HIT_OBJECTS,
    TIMING_POINTS,
    Context,
    FormatFamily,
)
from .hit_objects import dump_hit_objects
from .schema import (
    DIFFICULTY_SECTION,
    EDITOR_SECTION,
    GENERAL_SECTION,
    METADATA_SECTION,
)
from .timing_points import dump_timing_points


def encode(beatmap: Beatmap, family: Optional[FormatFamily] = None) -> str:
    """Write a beatmap back as text, in the format family of its version
    unless told otherwise"""
    if family is None:
        family = FormatFamily.from_version(beatmap.version)

    context = Context(family=family)
    lines = [f"osu file format v{family.value}", ""]
    lines += dump_section(GENERAL_SECTION.name, GENERAL_SECTION.dump(beatmap.general))
    if beatmap.editor is not None:
        lines += dump_section(EDITOR_SECTION.name, EDITOR_SECTION.dump(beatmap.editor))
    lines += dump_section(
        METADATA_SECTION.name, METADATA_SECTION.dump(beatmap.metadata)
    )
    lines += dump_section(
        DIFFICULTY_SECTION.name, DIFFICULTY_SECTION.dump(beatmap.difficulty)
    )

    lines.append(f"[{EVENTS}]")
    lines += beatmap.events.lines
    if context.family == FormatFamily.MODERN:
        lines.append("")

    if beatmap.timing_points is not None:
        lines.append(f"[{TIMING_POINTS}]")
        lines += dump_timing_points(beatmap.timing_points)
        if beatmap.timing_points.points:
            lines += ["", ""]
        else:
            lines.append("")

    if beatmap.colours is not None:
        lines += dump_section(COLOURS, dump_colours(beatmap.colours, context))

    lines.append(f"[{HIT_OBJECTS}]")
    lines += dump_hit_objects(beatmap.hit_objects)
    return "\n".join(lines) + "\n"


def dump_section(name: str, lines: List[str]) -> List[str]:
    return [f"[{name}]", *lines, ""]


def _dump_osu(beatmap: Beatmap, family: FormatFamily, **kwargs: Any) -> BeatmapFile:
    text = encode(beatmap, family)
    return BeatmapFile(text.encode("utf-8"), beatmap)


FILE_NAME_TEMPLATE = Path("{artist} - {title} ({creator}) [{version}].osu")

dump_osu_v14 = make_dumper_from_beatmap_file_dumper(
    internal_dumper=partial(_dump_osu, family=FormatFamily.MODERN),
    file_name_template=FILE_NAME_TEMPLATE,
)

dump_osu_v128 = make_dumper_from_beatmap_file_dumper(
    internal_dumper=partial(_dump_osu, family=FormatFamily.ALTERNATE),
    file_name_template=FILE_NAME_TEMPLATE,
)
