from __future__ import annotations

from dataclasses import dataclass

from .version import Version

DEFAULT_LAYER = "0"
DEFAULT_LINETYPE = "BYLAYER"
DEFAULT_LINETYPE_SCALE = 1.0
COLOR_BYBLOCK = 0
COLOR_BYLAYER = 256
LINEWEIGHT_BYLAYER = -1
MODELSPACE = 0
PAPERSPACE = 1
MAX_CHUNK_LENGTH = 256
CHUNK_BYTES = 127
DEFAULT_VERSION = Version.R2000

GRAPHICS_SIZE_CODE = 92
GRAPHICS_SIZE_CODE_WIDE = 160


@dataclass(frozen=True)
class CodecOptions:
    wide_graphics_size: bool = False
    echo_comments: bool = True

    @property
    def graphics_size_code(self) -> int:
        if self.wide_graphics_size:
            return GRAPHICS_SIZE_CODE_WIDE
        return GRAPHICS_SIZE_CODE


DEFAULT_OPTIONS = CodecOptions()
