from dataclasses import dataclass
from itertools import count
from pathlib import Path
from typing import Any, Dict, Iterator, Protocol, TypedDict

from osutools.beatmap import Beatmap
from osutools.utils import none_or

from .typing import Dumper


@dataclass
class BeatmapFile:
    contents: bytes
    beatmap: Beatmap


class BeatmapFileDumper(Protocol):
    """Generic signature of internal dumpers, they give back the file
    contents and leave the naming to make_dumper_from_beatmap_file_dumper"""

    def __call__(self, beatmap: Beatmap, **kwargs: Any) -> BeatmapFile:
        ...


def make_dumper_from_beatmap_file_dumper(
    internal_dumper: BeatmapFileDumper,
    file_name_template: Path,
) -> Dumper:
    """Adapt a BeatmapFileDumper to the Dumper protocol, The resulting
    function uses the file name template if it recieves an existing directory
    as an output path"""

    def dumper(beatmap: Beatmap, path: Path, **kwargs: Any) -> Dict[Path, bytes]:
        name_format = FileNameFormat(file_name_template, suggestion=path)
        file = internal_dumper(beatmap, **kwargs)
        filepath = name_format.available_filename_for(file)
        return {filepath: file.contents}

    return dumper


class FormatParameters(TypedDict, total=False):
    artist: str
    title: str
    creator: str
    # difficulty name
    version: str
    dedup: str


class FileNameFormat:
    def __init__(self, file_name_template: Path, suggestion: Path):
        if suggestion.is_dir():
            stem = file_name_template.stem
            suffix = file_name_template.suffix
            self.parent = suggestion
        else:
            # user given names are used as-is
            stem = double_braces(suggestion.stem)
            suffix = double_braces(suggestion.suffix)
            self.parent = suggestion.parent

        self.name_format = f"{stem}{{dedup}}{suffix}"

    def available_filename_for(self, file: BeatmapFile) -> Path:
        fixed_params = extract_format_params(file)
        return next(self.iter_possible_paths(fixed_params))

    def iter_possible_paths(self, fixed_params: FormatParameters) -> Iterator[Path]:
        all_paths = self.iter_deduped_paths(fixed_params)
        yield from (p for p in all_paths if not p.exists())

    def iter_deduped_paths(self, params: FormatParameters) -> Iterator[Path]:
        for dedup_index in count(start=0):
            params.update(dedup="" if dedup_index == 0 else f"-{dedup_index}")
            filename = self.name_format.format(**params).strip()
            yield self.parent / filename


def extract_format_params(file: BeatmapFile) -> FormatParameters:
    metadata = file.beatmap.metadata
    return FormatParameters(
        artist=none_or(slugify, metadata.Artist) or "",
        title=none_or(slugify, metadata.Title) or "",
        creator=none_or(slugify, metadata.Creator) or "",
        version=none_or(slugify, metadata.Version) or "",
    )


def slugify(s: str) -> str:
    return remove_slashes(s)


SLASHES = str.maketrans({"/": "", "\\": ""})


def remove_slashes(s: str) -> str:
    return s.translate(SLASHES)


BRACES = str.maketrans({"{": "{{", "}": "}}"})


def double_braces(s: str) -> str:
    return s.translate(BRACES)
