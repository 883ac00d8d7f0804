from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Iterable, Iterator

from dxfcodec.tokenizer import TagReader


def dxf_text(pairs: Iterable[tuple[int, Any]]) -> str:
    return "".join(f"{code:>3}\n{value}\n" for code, value in pairs)


def reader_for(pairs: Iterable[tuple[int, Any]]) -> TagReader:
    return TagReader(io.StringIO(dxf_text(pairs)), name="<test>")


def drawing_text(
    entities: Iterable[tuple[int, Any]] = (),
    objects: Iterable[tuple[int, Any]] | None = None,
    *,
    acadver: str = "AC1015",
) -> str:
    pairs: list[tuple[int, Any]] = [
        (0, "SECTION"),
        (2, "HEADER"),
        (9, "$ACADVER"),
        (1, acadver),
        (0, "ENDSEC"),
        (0, "SECTION"),
        (2, "ENTITIES"),
        *entities,
        (0, "ENDSEC"),
    ]
    if objects is not None:
        pairs += [(0, "SECTION"), (2, "OBJECTS"), *objects, (0, "ENDSEC")]
    pairs.append((0, "EOF"))
    return dxf_text(pairs)


def iter_dxf_records(path: Path, section: str = "ENTITIES") -> Iterator[dict[str, object]]:
    lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    section_name: str | None = None
    expect_section_name = False
    current: dict[str, object] | None = None

    for i in range(0, len(lines) - 1, 2):
        code = lines[i].strip()
        value = lines[i + 1].strip()

        if code == "0":
            if current is not None and section_name == section:
                yield current
                current = None

            if value == "SECTION":
                expect_section_name = True
                continue

            if value == "ENDSEC":
                section_name = None
                continue

            if section_name == section:
                current = {"type": value, "groups": []}
            continue

        if expect_section_name and code == "2":
            section_name = value
            expect_section_name = False
            continue

        if section_name == section and current is not None:
            groups = current["groups"]
            assert isinstance(groups, list)
            groups.append((code, value))

    if current is not None and section_name == section:
        yield current


def dxf_records_of_type(path: Path, dxftype: str, section: str = "ENTITIES") -> list[dict[str, object]]:
    return [record for record in iter_dxf_records(path, section) if record["type"] == dxftype]


def group_values(record: dict[str, object], code: str) -> list[str]:
    groups = record["groups"]
    assert isinstance(groups, list)
    return [raw_value for group_code, raw_value in groups if group_code == code]


def group_float(record: dict[str, object], code: str, default: float = 0.0) -> float:
    values = group_values(record, code)
    if values:
        return float(values[0])
    return default


def codes_of(tags: Iterable[tuple[int, Any]]) -> list[int]:
    return [code for code, _ in tags]
