from __future__ import annotations

import argparse
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Sequence

from .config import CodecOptions
from .convert import to_dxf
from .diagnostics import DiagnosticSink, configure_logging
from .document import read, write
from .errors import DxfError
from .version import SUPPORTED_VERSIONS


def _package_version() -> str:
    try:
        return version("dxfcodec")
    except PackageNotFoundError:
        return "0.0.0"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dxfcodec",
        description="Inspect, rewrite, and convert ASCII DXF files.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )
    parser.add_argument(
        "--log-level",
        default="ERROR",
        help="Logging level for decode/encode diagnostics (DEBUG, INFO, WARNING, ERROR).",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Render log lines as JSON.",
    )
    subparsers = parser.add_subparsers(dest="command")

    inspect_parser = subparsers.add_parser("inspect", help="Show record counts and diagnostics.")
    inspect_parser.add_argument("path", help="Path to DXF file.")
    inspect_parser.add_argument(
        "--verbose",
        action="store_true",
        help="List every diagnostic instead of a summary.",
    )

    rewrite_parser = subparsers.add_parser(
        "rewrite",
        help="Decode a DXF file and encode it again, optionally for another release.",
    )
    rewrite_parser.add_argument("input_path", help="Path to DXF file.")
    rewrite_parser.add_argument("output_path", help="Path to output DXF file.")
    rewrite_parser.add_argument(
        "--dxf-version",
        default=None,
        help=f"Target release, e.g. R12/R2000/AC1024. Supported: {', '.join(SUPPORTED_VERSIONS)}.",
    )
    rewrite_parser.add_argument(
        "--wide-graphics-size",
        action="store_true",
        help="Write the graphics data size with group code 160 instead of 92.",
    )
    rewrite_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail if any record does not validate.",
    )

    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert DXF entities to a new DXF document using ezdxf as the writing backend.",
    )
    convert_parser.add_argument("input_path", help="Path to DXF file.")
    convert_parser.add_argument("output_path", help="Path to output DXF file.")
    convert_parser.add_argument(
        "--types",
        default=None,
        help='Record filter passed to query(), e.g. "LINE ARC 3DFACE".',
    )
    convert_parser.add_argument(
        "--dxf-version",
        default="R2010",
        help="DXF version for ezdxf.new(), e.g. R2000/R2010/R2018.",
    )
    convert_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail if any entity cannot be converted.",
    )
    return parser


def _run_inspect(path: str, *, verbose: bool = False) -> int:
    file_path = Path(path)
    if not file_path.exists():
        print(f"error: file not found: {file_path}", file=sys.stderr)
        return 2

    sink = DiagnosticSink()
    try:
        drawing = read(file_path, sink=sink)
    except DxfError as exc:
        print(f"error: failed to read DXF: {exc}", file=sys.stderr)
        return 2

    counts = drawing.counts()
    print(f"file: {file_path}")
    print(f"version: {drawing.version.acad_string} ({drawing.version.release_name})")
    print(f"total_records: {sum(counts.values())}")
    for dxftype, count in counts.items():
        print(f"records[{dxftype}]: {count}")
    print(f"warnings: {len(sink.warnings)}")
    print(f"errors: {len(sink.errors)}")
    if verbose:
        for diagnostic in sink:
            print(f"diagnostic: {diagnostic}")
    else:
        for message, count in sink.count_by_message().most_common(5):
            print(f"diagnostic[{message}]: {count}")
    return 0


def _run_rewrite(
    input_path: str,
    output_path: str,
    *,
    dxf_version: str | None = None,
    wide_graphics_size: bool = False,
    strict: bool = False,
) -> int:
    dxf_path = Path(input_path)
    if not dxf_path.exists():
        print(f"error: file not found: {dxf_path}", file=sys.stderr)
        return 2

    sink = DiagnosticSink()
    options = CodecOptions(wide_graphics_size=wide_graphics_size)
    try:
        drawing = read(dxf_path, sink=sink, options=options)
        result = write(
            drawing,
            output_path,
            version=dxf_version,
            options=options,
            sink=sink,
            strict=strict,
        )
    except DxfError as exc:
        print(f"error: failed to rewrite DXF: {exc}", file=sys.stderr)
        return 2

    print(f"input: {dxf_path}")
    print(f"output: {result.output_path}")
    print(f"target_version: {result.target_version}")
    print(f"total_records: {result.total_records}")
    print(f"written_records: {result.written_records}")
    print(f"skipped_records: {result.skipped_records}")
    for dxftype, count in result.skipped_by_type.items():
        print(f"skipped[{dxftype}]: {count}")
    return 0


def _run_convert(
    input_path: str,
    output_path: str,
    *,
    types: str | None = None,
    dxf_version: str = "R2010",
    strict: bool = False,
) -> int:
    dxf_path = Path(input_path)
    if not dxf_path.exists():
        print(f"error: file not found: {dxf_path}", file=sys.stderr)
        return 2

    try:
        result = to_dxf(
            str(dxf_path),
            output_path,
            types=types,
            dxf_version=dxf_version,
            strict=strict,
        )
    except Exception as exc:
        print(f"error: failed to convert DXF: {exc}", file=sys.stderr)
        return 2

    print(f"input: {result.source_path}")
    print(f"output: {result.output_path}")
    print(f"total_entities: {result.total_entities}")
    print(f"written_entities: {result.written_entities}")
    print(f"skipped_entities: {result.skipped_entities}")
    for dxftype, count in result.skipped_by_type.items():
        print(f"skipped[{dxftype}]: {count}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, json=bool(args.log_json))

    if args.command == "inspect":
        return _run_inspect(args.path, verbose=bool(args.verbose))
    if args.command == "rewrite":
        return _run_rewrite(
            args.input_path,
            args.output_path,
            dxf_version=args.dxf_version,
            wide_graphics_size=bool(args.wide_graphics_size),
            strict=bool(args.strict),
        )
    if args.command == "convert":
        return _run_convert(
            args.input_path,
            args.output_path,
            types=args.types,
            dxf_version=args.dxf_version,
            strict=bool(args.strict),
        )

    parser.print_help()
    return 0

