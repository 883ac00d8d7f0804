from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Any, Callable, Union

from .config import CodecOptions
from .record import Record
from .version import Version

Predicate = Callable[[Any], bool]

ENTITIES = "ENTITIES"
OBJECTS = "OBJECTS"

# Codes routed by the decoder itself rather than through the field lookup.
RESERVED_CODES = frozenset({0, 100, 102, 310, 330, 360, 999})


def never(value: Any) -> bool:
    return False


def is_zero(value: Any) -> bool:
    return value == 0


def is_empty(value: Any) -> bool:
    return value is None or value == "" or value == []


def equals(default: Any) -> Predicate:
    def _equals(value: Any) -> bool:
        return value == default

    _equals.__name__ = f"equals({default!r})"
    return _equals


def one_of(*allowed: Any) -> Predicate:
    def _one_of(value: Any) -> bool:
        return value in allowed

    return _one_of


def in_range(low: int, high: int) -> Predicate:
    def _in_range(value: Any) -> bool:
        return low <= value <= high

    return _in_range


class _Gated:
    since: Version | None
    until: Version | None
    kinds: frozenset[int] | None

    def applies(self, version: Version, kind: int | None = None) -> bool:
        if not version.applies(self.since, self.until):
            return False
        if self.kinds is not None and kind not in self.kinds:
            return False
        return True


@dataclass(frozen=True)
class Field(_Gated):
    code: int
    attr: str
    skip: Predicate = never
    since: Version | None = None
    until: Version | None = None
    kinds: frozenset[int] | None = None
    components: tuple[int, ...] | None = None
    multiple: bool = False
    default: Any = None
    valid: Predicate | None = None

    @property
    def codes(self) -> tuple[int, ...]:
        if self.components is not None:
            return self.components
        return (self.code,)

    def value(self, record: Record) -> Any:
        value = getattr(record, self.attr)
        if value is None:
            return self.default
        return value

    def tags(self, record: Record, options: CodecOptions) -> list[tuple[int, Any]]:
        value = self.value(record)
        if value is None or self.skip(value):
            return []
        if self.components is not None:
            return list(zip(self.components, value))
        if self.multiple:
            return [(self.code, item) for item in value]
        return [(self.code, value)]


@dataclass(frozen=True)
class Marker(_Gated):
    name: str
    since: Version | None = Version.R13
    until: Version | None = None
    kinds: frozenset[int] | None = None

    def tags(self, record: Record, options: CodecOptions) -> list[tuple[int, Any]]:
        return [(100, self.name)]


@dataclass(frozen=True)
class AppGroup(_Gated):
    name: str
    code: int
    attr: str
    since: Version | None = Version.R14
    until: Version | None = None
    kinds: frozenset[int] | None = None

    def tags(self, record: Record, options: CodecOptions) -> list[tuple[int, Any]]:
        value = getattr(record, self.attr)
        if not value:
            return []
        return [(102, "{" + self.name), (self.code, value), (102, "}")]


@dataclass(frozen=True)
class BinaryData(_Gated):
    size_attr: str = "graphics_data_size"
    attr: str = "binary_chunks"
    since: Version | None = Version.R2000
    until: Version | None = None
    kinds: frozenset[int] | None = None

    size_codes = (92, 160)

    def tags(self, record: Record, options: CodecOptions) -> list[tuple[int, Any]]:
        size = getattr(record, self.size_attr)
        if not size:
            return []
        out: list[tuple[int, Any]] = [(options.graphics_size_code, size)]
        out.extend((310, chunk) for chunk in getattr(record, self.attr))
        return out


Entry = Union[Field, Marker, AppGroup, BinaryData]
Slot = tuple[Union[Field, BinaryData], int]


def point(code: int, attr: str, **kwargs: Any) -> Field:
    return Field(code, attr, components=(code, code + 10, code + 20), **kwargs)


@dataclass(frozen=True)
class Schema:
    dxftype: str
    record_class: type[Record]
    entries: tuple[Entry, ...]
    section: str = ENTITIES
    since: Version | None = None
    selector_attr: str | None = None
    variant_attr: str | None = None
    variant_kinds: frozenset[int] = frozenset()
    validate: Callable[[Record], None] | None = None
    after_decode: Callable[[Record, frozenset[int], Version], None] | None = None

    @cached_property
    def decode_map(self) -> dict[int, Slot]:
        out: dict[int, Slot] = {}
        for entry in self.entries:
            if isinstance(entry, BinaryData):
                for code in entry.size_codes:
                    out.setdefault(code, (entry, 0))
                continue
            if not isinstance(entry, Field):
                continue
            for index, code in enumerate(entry.codes):
                if code in RESERVED_CODES:
                    continue
                out.setdefault(code, (entry, index))
        return out

    @cached_property
    def markers(self) -> frozenset[str]:
        return frozenset(entry.name for entry in self.entries if isinstance(entry, Marker))

    @property
    def has_binary_data(self) -> bool:
        return any(isinstance(entry, BinaryData) for entry in self.entries)

    def new_record(self) -> Record:
        return self.record_class()

    def kind_of(self, record: Record) -> int | None:
        if self.variant_attr is None:
            return None
        return getattr(record, self.variant_attr)

    def is_valid_kind(self, kind: int | None) -> bool:
        return self.variant_attr is None or kind in self.variant_kinds
