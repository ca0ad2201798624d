"""Command Line Interface"""

from collections import Counter
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
import simplejson as json

from osutools.beatmap import Beatmap
from osutools.formats import DUMPERS, LOADERS
from osutools.formats.enum import Format
from osutools.utils import none_or

from .helpers import load_beatmap, strict_option

input_format_option = click.option(
    "--input-format",
    "input_format",
    type=click.Choice(list(f._value_ for f in LOADERS.keys())),
    help="Input file format, guessed from the header line if omitted",
)


@click.group()
def main() -> None:
    """Tools to read, check and rewrite osu! beatmap files"""


@main.command()
@click.argument("src", type=click.Path(exists=True, dir_okay=False))
@click.argument("dst", type=click.Path())
@input_format_option
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(list(f._value_ for f in DUMPERS.keys())),
    help="Output file format, same as the input if omitted",
)
@strict_option
def convert(
    src: str,
    dst: str,
    input_format: Optional[str],
    output_format: Optional[str],
    loader_options: Optional[Dict[str, Any]] = None,
) -> None:
    """Convert SRC to DST using the format specified by -f"""
    detected_format, beatmap = load_beatmap(
        Path(src), none_or(Format, input_format), loader_options
    )
    if output_format is None:
        output_format = detected_format

    try:
        dumper = DUMPERS[Format(output_format)]
    except KeyError:
        raise ValueError(f"Unsupported output format : {output_format}")

    files = dumper(beatmap, Path(dst))
    for path, contents in files.items():
        with path.open("wb") as f:
            f.write(contents)
        click.echo(f"Wrote {path}", err=True)


@main.command()
@click.argument("src", type=click.Path(exists=True, dir_okay=False))
@input_format_option
@click.option(
    "--at",
    "times",
    type=float,
    multiple=True,
    help="Also show the timing state at this time (in ms), can be repeated",
)
@strict_option
def info(
    src: str,
    input_format: Optional[str],
    times: Tuple[float, ...],
    loader_options: Optional[Dict[str, Any]] = None,
) -> None:
    """Print a JSON summary of SRC"""
    _, beatmap = load_beatmap(Path(src), none_or(Format, input_format), loader_options)
    click.echo(json.dumps(summarize(beatmap, times), indent=4))


def summarize(beatmap: Beatmap, times: Tuple[float, ...] = ()) -> Dict[str, Any]:
    object_counts = Counter(type(o).__name__ for o in beatmap.hit_objects.objects)
    return {
        "version": beatmap.version,
        "artist": beatmap.metadata.Artist,
        "title": beatmap.metadata.Title,
        "creator": beatmap.metadata.Creator,
        "difficulty": beatmap.metadata.Version,
        "background": beatmap.background_filename(),
        "timing_points": none_or(lambda t: len(t.points), beatmap.timing_points),
        "hit_objects": dict(sorted(object_counts.items())),
        "at": [timing_state(beatmap, t) for t in times],
    }


def timing_state(beatmap: Beatmap, time: float) -> Dict[str, Any]:
    red_line = beatmap.uninherited_at(time)
    green_line = beatmap.inherited_at(time)
    hit_object = beatmap.hit_object_at(time)
    return {
        "time": time,
        "bpm": beatmap.bpm_at(time),
        "volume": beatmap.volume_at(time),
        "uninherited": none_or(lambda p: p.time, red_line),
        "inherited": none_or(lambda p: p.time, green_line),
        "slider_velocity": none_or(lambda p: p.slider_velocity, green_line),
        "hit_object": none_or(lambda o: type(o).__name__, hit_object),
    }


if __name__ == "__main__":
    main()
