from pathlib import Path

from .enum import Format
from .osu.commons import FormatFamily
from .osu.sections import parse_header


def guess_format(path: Path) -> Format:
    if path.is_dir():
        raise ValueError("Can't guess beatmap format for a folder")

    try:
        return recognize_osu_version(path)
    except UnicodeDecodeError:
        pass

    raise ValueError("Unrecognized file format")


def recognize_osu_version(path: Path) -> Format:
    with path.open(encoding="utf-8-sig") as f:
        header = next((line for line in f if line.strip()), None)

    if header is None:
        raise ValueError("Empty file")

    # raises a ValueError subclass if this is not a .osu header
    version = parse_header(header)
    if version == FormatFamily.ALTERNATE:
        return Format.OSU_V128
    else:
        return Format.OSU_V14
