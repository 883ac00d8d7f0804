from __future__ import annotations

import fnmatch
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, TextIO

from . import chain
from .config import DEFAULT_OPTIONS, DEFAULT_VERSION, CodecOptions
from .decoder import decode_record
from .diagnostics import Diagnostic, DiagnosticSink
from .encoder import encode, format_tags
from .errors import StreamError, UnsupportedVersionError, ValidationError
from .record import Record
from .registry import SCHEMAS, schema_for
from .schema import ENTITIES, OBJECTS
from .tokenizer import TagReader
from .version import Version

SUPPORTED_TYPES = tuple(SCHEMAS)

TYPE_ALIASES = {
    "FACE": "3DFACE",
    "DIM": "DIMENSION",
    "MLEADER_STYLE": "MLEADERSTYLE",
}


@dataclass
class Drawing:
    version: Version = DEFAULT_VERSION
    path: str | None = None
    chains: dict[str, Record] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    _tails: dict[str, Record] = field(default_factory=dict, repr=False, compare=False)

    def append(self, record: Record) -> Record:
        dxftype = record.dxftype
        tail = self._tails.get(dxftype)
        if tail is None:
            self.chains[dxftype] = chain.append(self.chains.get(dxftype), record)
        else:
            chain.append(tail, record)
        self._tails[dxftype] = record
        return record

    def query(self, types: str | Iterable[str] | None = None) -> Iterator[Record]:
        for dxftype in _normalize_types(types, present=self.chains):
            yield from chain.iter_chain(self.chains.get(dxftype))

    def counts(self) -> dict[str, int]:
        return {
            dxftype: chain.chain_length(head)
            for dxftype, head in self.chains.items()
            if head is not None
        }

    def free(self) -> int:
        total = sum(chain.free_all(head) for head in self.chains.values())
        self.chains.clear()
        self._tails.clear()
        return total


@dataclass(frozen=True)
class WriteResult:
    output_path: str | None
    target_version: str
    total_records: int
    written_records: int
    skipped_records: int
    skipped_by_type: dict[str, int]


def read(
    path: str | Path,
    *,
    version: str | Version | None = None,
    options: CodecOptions | None = None,
    sink: DiagnosticSink | None = None,
    encoding: str = "utf-8",
) -> Drawing:
    file_path = Path(path)
    try:
        with file_path.open("r", encoding=encoding, errors="replace", newline=None) as stream:
            drawing = read_stream(
                stream,
                version=version,
                options=options,
                sink=sink,
                name=str(file_path),
            )
    except OSError as exc:
        raise StreamError(f"could not open file for reading: {exc}", name=str(file_path)) from exc
    drawing.path = str(file_path)
    return drawing


def read_stream(
    stream: TextIO,
    *,
    version: str | Version | None = None,
    options: CodecOptions | None = None,
    sink: DiagnosticSink | None = None,
    name: str | None = None,
) -> Drawing:
    sink = sink if sink is not None else DiagnosticSink()
    start = len(sink.diagnostics)
    forced = Version.parse(version) if version is not None else None
    drawing = Drawing(version=forced or DEFAULT_VERSION)
    reader = TagReader(stream, name=name)

    while True:
        tag = reader.next_tag()
        if tag is None:
            sink.warning("missing EOF marker", line=reader.line_number)
            break
        if tag.code == 999:
            if (options or DEFAULT_OPTIONS).echo_comments:
                sink.info(f"comment: {tag.value}", code=999, line=tag.line)
            continue
        if tag.code != 0:
            sink.warning("group code outside of a section", code=tag.code, line=tag.line)
            continue
        marker = tag.value.strip()
        if marker == "EOF":
            break
        if marker != "SECTION":
            sink.warning(f"unexpected {marker!r} outside of a section", code=0, line=tag.line)
            continue
        name_tag = reader.next_tag()
        if name_tag is None or name_tag.code != 2:
            raise StreamError("missing section name", name=reader.name, line=tag.line)
        section = name_tag.value.strip()
        if section == "HEADER":
            detected = _read_header(reader, sink)
            if forced is None and detected is not None:
                drawing.version = detected
        elif section in (ENTITIES, OBJECTS):
            _read_records(reader, drawing, sink, options)
        else:
            _skip_section(reader)

    drawing.diagnostics.extend(sink.diagnostics[start:])
    return drawing


def _read_header(reader: TagReader, sink: DiagnosticSink) -> Version | None:
    detected: Version | None = None
    pending_variable: str | None = None
    for tag in reader:
        if tag.code == 0:
            if tag.value.strip() == "ENDSEC":
                return detected
            raise StreamError(f"unexpected {tag.value.strip()!r} in HEADER", name=reader.name, line=tag.line)
        if tag.code == 9:
            pending_variable = tag.value.strip()
            continue
        if pending_variable == "$ACADVER" and tag.code == 1:
            try:
                detected = Version.parse(tag.value)
            except UnsupportedVersionError as exc:
                sink.warning(str(exc), code=1, line=tag.line)
            pending_variable = None
    raise StreamError("unexpected end of stream inside HEADER", name=reader.name, line=reader.line_number)


def _read_records(
    reader: TagReader,
    drawing: Drawing,
    sink: DiagnosticSink,
    options: CodecOptions | None,
) -> None:
    while True:
        tag = reader.next_tag()
        if tag is None:
            raise StreamError("unexpected end of stream inside section", name=reader.name, line=reader.line_number)
        if tag.code != 0:
            sink.warning("group code outside of a record", code=tag.code, line=tag.line)
            continue
        dxftype = tag.value.strip()
        if dxftype == "ENDSEC":
            return
        schema = SCHEMAS.get(dxftype)
        if schema is None:
            sink.warning(f"unsupported record type {dxftype!r} skipped", code=0, line=tag.line)
            _skip_record(reader)
            continue
        record = decode_record(reader, schema, version=drawing.version, sink=sink, options=options)
        drawing.append(record)


def _skip_record(reader: TagReader) -> None:
    for tag in reader:
        if tag.code == 0:
            reader.push_back(tag)
            return


def _skip_section(reader: TagReader) -> None:
    for tag in reader:
        if tag.code == 0 and tag.value.strip() == "ENDSEC":
            return
    raise StreamError("unexpected end of stream inside section", name=reader.name, line=reader.line_number)


def write(
    drawing: Drawing,
    path: str | Path,
    *,
    version: str | Version | None = None,
    options: CodecOptions | None = None,
    sink: DiagnosticSink | None = None,
    strict: bool = False,
) -> WriteResult:
    out_path = Path(path)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8", newline="") as stream:
            result = write_stream(
                drawing,
                stream,
                version=version,
                options=options,
                sink=sink,
                strict=strict,
            )
    except OSError as exc:
        raise StreamError(f"could not open file for writing: {exc}", name=str(out_path)) from exc
    return WriteResult(
        output_path=str(out_path),
        target_version=result.target_version,
        total_records=result.total_records,
        written_records=result.written_records,
        skipped_records=result.skipped_records,
        skipped_by_type=result.skipped_by_type,
    )


def write_stream(
    drawing: Drawing,
    stream: TextIO,
    *,
    version: str | Version | None = None,
    options: CodecOptions | None = None,
    sink: DiagnosticSink | None = None,
    strict: bool = False,
) -> WriteResult:
    sink = sink if sink is not None else DiagnosticSink()
    target = Version.parse(version) if version is not None else drawing.version

    total = 0
    written = 0
    skipped_by_type: dict[str, int] = {}

    _write(stream, format_tags([(0, "SECTION"), (2, "HEADER"), (9, "$ACADVER"), (1, target.acad_string), (0, "ENDSEC")]))
    for section in (ENTITIES, OBJECTS):
        records = [record for record in drawing.query() if schema_for(record).section == section]
        if section == OBJECTS and target < Version.R13:
            if records:
                sink.warning(f"OBJECTS section is not defined before R13, {len(records)} records dropped")
                total += len(records)
                for record in records:
                    skipped_by_type[record.dxftype] = skipped_by_type.get(record.dxftype, 0) + 1
            continue
        _write(stream, format_tags([(0, "SECTION"), (2, section)]))
        for record in records:
            total += 1
            try:
                encode(record, target, stream, options=options, sink=sink)
            except ValidationError as exc:
                if strict:
                    raise
                sink.error(f"{exc.message}, record skipped", record_type=record.dxftype)
                skipped_by_type[record.dxftype] = skipped_by_type.get(record.dxftype, 0) + 1
                continue
            written += 1
        _write(stream, format_tags([(0, "ENDSEC")]))
    _write(stream, format_tags([(0, "EOF")]))

    return WriteResult(
        output_path=None,
        target_version=target.acad_string,
        total_records=total,
        written_records=written,
        skipped_records=total - written,
        skipped_by_type=dict(sorted(skipped_by_type.items())),
    )


def _write(stream: TextIO, text: str) -> None:
    try:
        stream.write(text)
    except (OSError, ValueError) as exc:
        raise StreamError(f"write failed: {exc}", name=getattr(stream, "name", None)) from exc


def _normalize_types(
    types: str | Iterable[str] | None,
    *,
    present: Iterable[str] | None = None,
) -> list[str]:
    candidate_types = list(present) if present is not None else list(SUPPORTED_TYPES)
    if types is None:
        return candidate_types
    if isinstance(types, str):
        tokens = re.split(r"[,\s]+", types.strip())
    else:
        tokens = list(types)

    normalized = [token.strip().upper() for token in tokens if token and token.strip()]
    normalized = [TYPE_ALIASES.get(token, token) for token in normalized]
    if not normalized or any(token in {"*", "ALL"} for token in normalized):
        return candidate_types

    selected: list[str] = []
    seen = set()
    for token in normalized:
        if any(ch in token for ch in "*?[]"):
            matches = [name for name in candidate_types if fnmatch.fnmatchcase(name, token)]
        else:
            matches = [token] if token in candidate_types else []
        for name in matches:
            if name not in seen:
                seen.add(name)
                selected.append(name)
    return selected
