from __future__ import annotations

from typing import Iterator, NamedTuple, TextIO

from .errors import StreamError


class Tag(NamedTuple):
    code: int
    value: str
    line: int = 0


class TagReader:
    def __init__(self, stream: TextIO, *, name: str | None = None) -> None:
        self._stream = stream
        self.name = name if name is not None else str(getattr(stream, "name", "<stream>"))
        self.line_number = 0
        # Returned by the next next_tag() call before the stream is read again.
        self._pending: Tag | None = None

    def __iter__(self) -> Iterator[Tag]:
        while True:
            tag = self.next_tag()
            if tag is None:
                return
            yield tag

    def next_tag(self) -> Tag | None:
        if self._pending is not None:
            tag = self._pending
            self._pending = None
            return tag

        code_line = self._readline()
        if code_line == "":
            return None
        value_line = self._readline()
        self.line_number += 2
        code_line_number = self.line_number - 1
        if value_line == "":
            raise StreamError(
                "unexpected end of stream after group code",
                name=self.name,
                line=code_line_number,
            )
        try:
            code = int(code_line.strip())
        except ValueError:
            raise StreamError(
                f"invalid group code {code_line.strip()!r}",
                name=self.name,
                line=code_line_number,
            ) from None
        return Tag(code, value_line.rstrip("\r\n"), code_line_number)

    def push_back(self, tag: Tag) -> None:
        if self._pending is not None:
            raise StreamError("only one tag can be pushed back", name=self.name, line=tag.line)
        self._pending = tag

    def peek(self) -> Tag | None:
        tag = self.next_tag()
        if tag is not None:
            self.push_back(tag)
        return tag

    def _readline(self) -> str:
        try:
            return self._stream.readline()
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            raise StreamError(
                f"read failed: {exc}",
                name=self.name,
                line=self.line_number + 1,
            ) from exc
