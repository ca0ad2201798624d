from enum import Enum


class Format(str, Enum):
    OSU_V14 = "osu:v14"
    OSU_V128 = "osu:v128"
