from __future__ import annotations

from typing import Any, Iterable, TextIO

from .config import DEFAULT_OPTIONS, MAX_CHUNK_LENGTH, CodecOptions
from .decoder import TagType, tag_type
from .diagnostics import DiagnosticSink
from .errors import StreamError, ValidationError
from .record import Record
from .registry import schema_for
from .schema import Schema
from .version import Version

_INT_TYPES = (TagType.INT16, TagType.INT32, TagType.INT64)


def format_code(code: int) -> str:
    # Peer readers of older releases parse the code line by column.
    return f"{code:>3}\n"


def format_value(code: int, value: Any) -> str:
    kind = tag_type(code)
    if kind is TagType.FLOAT:
        return f"{float(value)!r}\n"
    if kind is TagType.HANDLE:
        return f"{int(value):x}\n"
    if kind is TagType.BOOL:
        return "1\n" if value else "0\n"
    if kind in _INT_TYPES:
        return f"{int(value)}\n"
    return f"{value}\n"


def format_tags(tags: Iterable[tuple[int, Any]]) -> str:
    return "".join(format_code(code) + format_value(code, value) for code, value in tags)


def encode_tags(
    record: Record,
    version: Version,
    *,
    schema: Schema | None = None,
    options: CodecOptions | None = None,
    sink: DiagnosticSink | None = None,
) -> list[tuple[int, Any]]:
    schema = schema if schema is not None else schema_for(record)
    options = options if options is not None else DEFAULT_OPTIONS
    sink = sink if sink is not None else DiagnosticSink()

    kind = schema.kind_of(record)
    if not schema.is_valid_kind(kind):
        sink.warning(
            f"variant selector {kind} out of range, type-specific fields omitted",
            record_type=schema.dxftype,
        )
        kind = None

    tags: list[tuple[int, Any]] = [(0, schema.dxftype)]
    for entry in schema.entries:
        if not entry.applies(version, kind):
            continue
        tags.extend(entry.tags(record, options))
    return tags


def validate_record(record: Record, schema: Schema) -> None:
    for chunk in record.binary_chunks:
        if len(chunk) > MAX_CHUNK_LENGTH:
            raise ValidationError(
                schema.dxftype,
                record.handle,
                f"binary chunk longer than {MAX_CHUNK_LENGTH} characters",
            )
    if schema.validate is not None:
        schema.validate(record)


def encode(
    record: Record,
    version: Version,
    out: TextIO,
    *,
    schema: Schema | None = None,
    options: CodecOptions | None = None,
    sink: DiagnosticSink | None = None,
) -> None:
    """Write ``record`` to ``out`` under the rules of ``version``.

    The record is rendered completely before anything is written, so a
    ValidationError leaves ``out`` untouched.
    """
    schema = schema if schema is not None else schema_for(record)
    sink = sink if sink is not None else DiagnosticSink()

    for attr in record.apply_defaults():
        sink.warning(
            f"empty {attr} replaced by default",
            record_type=schema.dxftype,
        )
    validate_record(record, schema)
    if schema.since is not None and version < schema.since:
        sink.warning(
            f"{schema.dxftype} is not defined before {schema.since.name}",
            record_type=schema.dxftype,
        )

    text = format_tags(encode_tags(record, version, schema=schema, options=options, sink=sink))
    try:
        out.write(text)
    except (OSError, ValueError) as exc:
        raise StreamError(f"write failed: {exc}", name=getattr(out, "name", None)) from exc
