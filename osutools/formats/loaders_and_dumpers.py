from typing import Dict

from . import osu
from .enum import Format
from .typing import Dumper, Loader

LOADERS: Dict[Format, Loader] = {
    Format.OSU_V14: osu.load_osu,
    Format.OSU_V128: osu.load_osu,
}

DUMPERS: Dict[Format, Dumper] = {
    Format.OSU_V14: osu.dump_osu_v14,
    Format.OSU_V128: osu.dump_osu_v128,
}
