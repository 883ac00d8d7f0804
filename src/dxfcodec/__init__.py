from typing import Sequence

from .binary import get_binary, join_binary, set_binary, split_binary
from .chain import append, chain_length, free_all, free_one, iter_chain, last
from .config import CodecOptions
from .convert import ConvertResult, to_dxf
from .decoder import decode_record
from .diagnostics import Diagnostic, DiagnosticSink, configure_logging
from .document import Drawing, WriteResult, read, read_stream, write, write_stream
from .encoder import encode, encode_tags
from .entity import Arc, Circle, Dimension, Face3D, Line, Point
from .errors import (
    ChainError,
    DxfError,
    FatalError,
    StreamError,
    TagValueError,
    UnsupportedVersionError,
    ValidationError,
)
from .objects import ImageDefReactor, MLeaderStyle, ObjectPtr
from .record import Record
from .registry import schema_for
from .tokenizer import Tag, TagReader
from .version import Version

__all__ = [
    "read",
    "read_stream",
    "write",
    "write_stream",
    "Drawing",
    "WriteResult",
    "to_dxf",
    "ConvertResult",
    "decode_record",
    "encode",
    "encode_tags",
    "schema_for",
    "Tag",
    "TagReader",
    "Version",
    "CodecOptions",
    "Diagnostic",
    "DiagnosticSink",
    "configure_logging",
    "Record",
    "Face3D",
    "Line",
    "Circle",
    "Arc",
    "Point",
    "Dimension",
    "ObjectPtr",
    "ImageDefReactor",
    "MLeaderStyle",
    "append",
    "last",
    "free_one",
    "free_all",
    "iter_chain",
    "chain_length",
    "split_binary",
    "join_binary",
    "set_binary",
    "get_binary",
    "DxfError",
    "FatalError",
    "StreamError",
    "TagValueError",
    "ValidationError",
    "ChainError",
    "UnsupportedVersionError",
]


def main(argv: Sequence[str] | None = None) -> int:
    from dxfcodec.cli import main as cli_main

    return cli_main(argv)
