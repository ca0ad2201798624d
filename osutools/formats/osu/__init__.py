"""
.osu

The plain text beatmap format of osu!, one file per difficulty.

https://osu.ppy.sh/wiki/en/Client/File_formats/osu_%28file_format%29

Versions 3 to 14 are all read, and written back as v14. v128 is a variant
that only differs in a few separators and blank lines, it is read and
written as-is.
"""

from .commons import Context, FormatFamily
from .dump import dump_osu_v14, dump_osu_v128, encode
from .errors import (
    DecodeError,
    Decoded,
    DecodeFailure,
    DecodeResult,
    FieldParseError,
    StructuralError,
)
from .load import decode, load_osu, try_decode
