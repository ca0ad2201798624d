"""key:value sections ([General], [Editor], [Metadata] and [Difficulty])

The dataclasses in osutools.beatmap use the wire keys as field names, so the
marshmallow schemas generated from them do all the type conversion work.
Keys this library does not know about are dropped."""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterable, List, TypeVar

from marshmallow import EXCLUDE, Schema, ValidationError, post_dump
from marshmallow_dataclass import class_schema

from osutools.beatmap import Difficulty, Editor, General, Metadata

from .commons import DIFFICULTY, EDITOR, GENERAL, METADATA
from .errors import FieldParseError
from .primitives import format_value


class BaseSchema(Schema):
    class Meta:
        ordered = True
        unknown = EXCLUDE

    @post_dump
    def remove_none_values(self, data: dict, **kwargs: Any) -> dict:
        return {key: value for key, value in data.items() if value is not None}


# Keys whose values are comma-separated lists
LIST_KEYS = {"Bookmarks"}

S = TypeVar("S")


@dataclass
class FlatSection(Generic[S]):
    name: str
    schema: Schema
    # what goes between the key and the value when writing
    separator: str

    def load(self, lines: Iterable[str]) -> S:
        raw_values: Dict[str, Any] = {}
        lines_by_key: Dict[str, str] = {}
        for line in lines:
            key, sep, value = line.partition(":")
            if not sep:
                raise FieldParseError(
                    f"Expected a key:value pair but found {line!r}",
                    section=self.name,
                    line=line,
                )
            key = key.strip()
            value = value.strip()
            if key in LIST_KEYS:
                raw_values[key] = [v.strip() for v in value.split(",") if v.strip()]
            else:
                raw_values[key] = value
            lines_by_key[key] = line

        try:
            return self.schema.load(raw_values)  # type: ignore
        except ValidationError as e:
            raise validation_to_parse_error(e, self.name, lines_by_key) from e

    def dump(self, section: S) -> List[str]:
        values = self.schema.dump(section)
        return [f"{key}{self.separator}{format_value(v)}" for key, v in values.items()]


def validation_to_parse_error(
    error: ValidationError, section: str, lines_by_key: Dict[str, str]
) -> FieldParseError:
    messages = error.normalized_messages()
    key, problems = next(iter(messages.items()))
    if isinstance(problems, dict):
        # list values report errors per item
        problems = [p for item in problems.values() for p in item]
    return FieldParseError(
        f"{key} : {' '.join(str(p) for p in problems)}",
        section=section,
        line=lines_by_key.get(key),
        field_name=key,
    )


GENERAL_SECTION: FlatSection[General] = FlatSection(
    name=GENERAL,
    schema=class_schema(General, base_schema=BaseSchema)(),
    separator=": ",
)
EDITOR_SECTION: FlatSection[Editor] = FlatSection(
    name=EDITOR,
    schema=class_schema(Editor, base_schema=BaseSchema)(),
    separator=": ",
)
METADATA_SECTION: FlatSection[Metadata] = FlatSection(
    name=METADATA,
    schema=class_schema(Metadata, base_schema=BaseSchema)(),
    separator=":",
)
DIFFICULTY_SECTION: FlatSection[Difficulty] = FlatSection(
    name=DIFFICULTY,
    schema=class_schema(Difficulty, base_schema=BaseSchema)(),
    separator=":",
)
