"""[Colours] lines look like this :

    Combo1 : 255,192,0
    SliderBorder : 255,255,255
    SliderTrackOverride : 0,0,0

v128 files use ": " as a separator and have an alpha component, which is
always written as 255 and ignored when reading."""

from typing import Iterable, List

from osutools.beatmap import Colour, ComboColour, Colours

from .commons import COLOURS, Context, FormatFamily
from .errors import FieldParseError
from .primitives import format_colour, parse_colour

COMBO_PREFIX = "Combo"
SLIDER_BORDER = "SliderBorder"
SLIDER_TRACK_OVERRIDE = "SliderTrackOverride"


def load_colours(lines: Iterable[str]) -> Colours:
    colours = Colours()
    for line in lines:
        key, _, value = line.partition(":")
        key = key.strip()
        if key == SLIDER_BORDER:
            colours.slider_border = load_colour(value, line)
        elif key == SLIDER_TRACK_OVERRIDE:
            colours.slider_track_override = load_colour(value, line)
        elif key.startswith(COMBO_PREFIX):
            try:
                number = int(key[len(COMBO_PREFIX) :])
            except ValueError:
                raise FieldParseError(
                    f"Invalid combo colour number : {key!r}",
                    section=COLOURS,
                    line=line,
                    field_name=key,
                ) from None
            colours.combos.append(ComboColour(number, load_colour(value, line)))

    return colours


def load_colour(raw: str, line: str) -> Colour:
    try:
        return parse_colour(raw)
    except ValueError as e:
        raise FieldParseError(str(e), section=COLOURS, line=line) from e


def dump_colours(colours: Colours, context: Context) -> List[str]:
    if context.family == FormatFamily.ALTERNATE:
        separator = ": "
        alpha = 255
    else:
        separator = " : "
        alpha = None

    def dump_line(key: str, colour: Colour) -> str:
        return f"{key}{separator}{format_colour(colour, alpha)}"

    res = [dump_line(f"{COMBO_PREFIX}{c.number}", c.colour) for c in colours.combos]
    if colours.slider_border is not None:
        res.append(dump_line(SLIDER_BORDER, colours.slider_border))
    if colours.slider_track_override is not None:
        res.append(dump_line(SLIDER_TRACK_OVERRIDE, colours.slider_track_override))
    return res
