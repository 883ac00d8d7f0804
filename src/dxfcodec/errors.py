"""
Exception hierarchy for dxfcodec.

DxfError (base)
├── FatalError - the current read/write pass cannot continue
│   └── StreamError - unreadable, unwritable or malformed tag stream
├── TagValueError - a value line does not parse for its group code
├── ValidationError - a record is structurally degenerate and is not written
├── ChainError - a chain precondition was violated
└── UnsupportedVersionError - unknown DXF release

Warnings (unknown group codes, bad subclass markers, out-of-range values)
are never raised; they are reported as diagnostics and decoding continues.
"""

from __future__ import annotations


class DxfError(Exception):
    pass


class FatalError(DxfError):
    pass


class StreamError(FatalError):
    def __init__(self, message: str, *, name: str | None = None, line: int | None = None) -> None:
        self.message = message
        self.name = name
        self.line = line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.name and self.line is not None:
            return f"{self.name}:{self.line}: {self.message}"
        if self.line is not None:
            return f"line {self.line}: {self.message}"
        return self.message


class TagValueError(DxfError):
    def __init__(self, code: int, raw: str, expected: str) -> None:
        self.code = code
        self.raw = raw
        self.expected = expected
        super().__init__(f"group code {code}: invalid {expected} value {raw!r}")


class ValidationError(DxfError):
    def __init__(self, record_type: str, handle: int, message: str) -> None:
        self.record_type = record_type
        self.handle = handle
        self.message = message
        label = f"{record_type} {handle:x}" if handle != -1 else record_type
        super().__init__(f"{label}: {message}")


class ChainError(DxfError):
    pass


class UnsupportedVersionError(DxfError, ValueError):
    pass
