from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .config import DEFAULT_OPTIONS, DEFAULT_VERSION, MAX_CHUNK_LENGTH, CodecOptions
from .diagnostics import INFO, WARNING, Diagnostic, DiagnosticSink
from .errors import TagValueError
from .record import Record
from .schema import BinaryData, Field, Schema
from .tokenizer import Tag, TagReader
from .version import Version


class TagType(Enum):
    STRING = "string"
    FLOAT = "float"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    BOOL = "bool"
    HANDLE = "handle"
    REFERENCE = "reference"
    BINARY = "binary"
    COMMENT = "comment"
    UNKNOWN = "unknown"


_TYPE_RANGES: tuple[tuple[int, int, TagType], ...] = (
    (0, 4, TagType.STRING),
    (5, 5, TagType.HANDLE),
    (6, 9, TagType.STRING),
    (10, 59, TagType.FLOAT),
    (60, 79, TagType.INT16),
    (90, 99, TagType.INT32),
    (100, 102, TagType.STRING),
    (105, 105, TagType.HANDLE),
    (110, 149, TagType.FLOAT),
    (160, 169, TagType.INT64),
    (170, 179, TagType.INT16),
    (210, 239, TagType.FLOAT),
    (270, 289, TagType.INT16),
    (290, 299, TagType.BOOL),
    (300, 309, TagType.STRING),
    (310, 319, TagType.BINARY),
    (320, 369, TagType.REFERENCE),
    (370, 389, TagType.INT16),
    (390, 399, TagType.REFERENCE),
    (400, 409, TagType.INT16),
    (410, 419, TagType.STRING),
    (420, 429, TagType.INT32),
    (430, 439, TagType.STRING),
    (440, 459, TagType.INT32),
    (460, 469, TagType.FLOAT),
    (470, 479, TagType.STRING),
    (480, 481, TagType.REFERENCE),
    (999, 999, TagType.COMMENT),
    (1000, 1003, TagType.STRING),
    (1004, 1004, TagType.BINARY),
    (1005, 1005, TagType.REFERENCE),
    (1006, 1009, TagType.STRING),
    (1010, 1059, TagType.FLOAT),
    (1060, 1070, TagType.INT16),
    (1071, 1071, TagType.INT32),
)

_TAG_TYPES: dict[int, TagType] = {
    code: tag_kind for low, high, tag_kind in _TYPE_RANGES for code in range(low, high + 1)
}

_INT_LIMITS = {
    TagType.INT16: (-(2**15), 2**15 - 1),
    TagType.INT32: (-(2**31), 2**31 - 1),
    TagType.INT64: (-(2**63), 2**63 - 1),
}


def tag_type(code: int) -> TagType:
    return _TAG_TYPES.get(code, TagType.UNKNOWN)


def parse_value(code: int, raw: str) -> Any:
    kind = tag_type(code)
    text = raw.strip()
    try:
        if kind is TagType.FLOAT:
            return float(text)
        if kind in _INT_LIMITS:
            value = int(text)
            low, high = _INT_LIMITS[kind]
            if not low <= value <= high:
                raise ValueError(text)
            return value
        if kind is TagType.BOOL:
            return int(text) != 0
        if kind is TagType.HANDLE:
            return int(text, 16)
    except ValueError:
        raise TagValueError(code, raw, kind.value) from None
    if kind in (TagType.REFERENCE, TagType.BINARY):
        return text
    return raw


@dataclass
class DecodeState:
    owner_count: int = 0
    group: str | None = None
    seen: set[int] = field(default_factory=set)


class TagDecoder:
    def __init__(self, schema: Schema, *, options: CodecOptions | None = None) -> None:
        self.schema = schema
        self.options = options if options is not None else DEFAULT_OPTIONS

    def decode(self, tag: Tag, record: Record, state: DecodeState) -> Diagnostic | None:
        code = tag.code
        state.seen.add(code)

        if code == 999:
            if not self.options.echo_comments:
                return None
            return self._diagnostic(tag, f"comment: {tag.value}", severity=INFO)
        if code == 102:
            return self._application_group(tag, state)
        if state.group is not None and code not in (330, 360):
            return None
        if code == 100:
            marker = tag.value.strip()
            if marker not in self.schema.markers:
                return self._diagnostic(tag, f"unexpected subclass marker {marker!r}")
            return None
        if code == 330:
            state.owner_count += 1
            if state.owner_count == 1:
                record.owner_soft = tag.value.strip()
            elif state.owner_count == 2:
                record.object_owner_soft = tag.value.strip()
            else:
                return self._diagnostic(tag, "extra owner reference ignored")
            return None
        if code == 360:
            record.owner_hard = tag.value.strip()
            return None
        if code == 310:
            chunk = tag.value.strip()
            record.binary_chunks.append(chunk)
            if len(chunk) > MAX_CHUNK_LENGTH:
                return self._diagnostic(tag, f"binary chunk longer than {MAX_CHUNK_LENGTH} characters")
            return None

        slot = self.schema.decode_map.get(code)
        if slot is None:
            return self._diagnostic(tag, "unknown group code")
        entry, index = slot
        try:
            value = parse_value(code, tag.value)
        except TagValueError as exc:
            return self._diagnostic(tag, str(exc))
        try:
            self._assign(record, entry, index, value)
        except AttributeError as exc:
            return self._diagnostic(tag, str(exc))

        if isinstance(entry, Field):
            if entry.valid is not None and not entry.valid(value):
                return self._diagnostic(tag, f"value {value!r} out of range")
            if entry.attr == self.schema.selector_attr:
                kind = self.schema.kind_of(record)
                if not self.schema.is_valid_kind(kind):
                    return self._diagnostic(tag, f"variant selector {kind} out of range")
        return None

    def _application_group(self, tag: Tag, state: DecodeState) -> Diagnostic | None:
        value = tag.value.strip()
        if value.startswith("{"):
            if state.group is not None:
                return self._diagnostic(tag, f"nested application group {value!r}")
            state.group = value[1:]
            return None
        if value == "}":
            if state.group is None:
                return self._diagnostic(tag, "application group closed without being opened")
            state.group = None
            return None
        return self._diagnostic(tag, f"malformed application group marker {value!r}")

    def _assign(self, record: Record, entry: Field | BinaryData, index: int, value: Any) -> None:
        if isinstance(entry, BinaryData):
            setattr(record, entry.size_attr, value)
            return
        if entry.components is not None:
            current = list(getattr(record, entry.attr))
            current[index] = value
            setattr(record, entry.attr, tuple(current))
            return
        if entry.multiple:
            getattr(record, entry.attr).append(value)
            return
        setattr(record, entry.attr, value)

    def _diagnostic(self, tag: Tag, message: str, *, severity: str = WARNING) -> Diagnostic:
        return Diagnostic(
            severity,
            message,
            code=tag.code,
            line=tag.line,
            record_type=self.schema.dxftype,
        )


def decode_record(
    reader: TagReader,
    schema: Schema,
    *,
    version: Version = DEFAULT_VERSION,
    sink: DiagnosticSink | None = None,
    options: CodecOptions | None = None,
) -> Record:
    """Decode one record from ``reader``.

    The reader must be positioned after the record's ``0``/type-name pair.
    Tags are consumed up to the next ``0`` pair, which is pushed back so the
    caller can read the following record's type name.
    """
    sink = sink if sink is not None else DiagnosticSink()
    decoder = TagDecoder(schema, options=options)
    record = schema.new_record()
    state = DecodeState()

    for tag in reader:
        if tag.code == 0:
            reader.push_back(tag)
            break
        diagnostic = decoder.decode(tag, record, state)
        if diagnostic is not None:
            sink.report(diagnostic)

    if state.group is not None:
        sink.warning(
            f"application group {state.group!r} not closed",
            record_type=schema.dxftype,
            line=reader.line_number,
        )
    if schema.after_decode is not None:
        schema.after_decode(record, frozenset(state.seen), version)
    record.apply_defaults()
    return record
