from __future__ import annotations

import logging
import sys
from collections import Counter
from dataclasses import dataclass
from typing import Any

import structlog

INFO = "info"
WARNING = "warning"
ERROR = "error"

logging.getLogger("dxfcodec").addHandler(logging.NullHandler())


def _configure_default() -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = "dxfcodec") -> Any:
    # Until the application configures logging, output goes through stdlib
    # logging, where the package's NullHandler keeps it silent.
    if not structlog.is_configured():
        _configure_default()
    return structlog.get_logger(name)


def configure_logging(level: str | int = "WARNING", *, json: bool = False) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    logging.getLogger().setLevel(level)

    renderer: Any
    if json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


@dataclass(frozen=True)
class Diagnostic:
    severity: str
    message: str
    code: int | None = None
    line: int | None = None
    record_type: str | None = None

    def __str__(self) -> str:
        parts = [self.severity]
        if self.line is not None:
            parts.append(f"line {self.line}")
        if self.record_type:
            parts.append(self.record_type)
        if self.code is not None:
            parts.append(f"code {self.code}")
        return f"{': '.join(parts)}: {self.message}"


class DiagnosticSink:
    def __init__(self, logger: Any = None) -> None:
        self.logger = logger if logger is not None else get_logger()
        self.diagnostics: list[Diagnostic] = []

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __iter__(self):
        return iter(self.diagnostics)

    def report(self, diagnostic: Diagnostic) -> Diagnostic:
        self.diagnostics.append(diagnostic)
        context = {
            key: value
            for key, value in (
                ("code", diagnostic.code),
                ("line", diagnostic.line),
                ("record_type", diagnostic.record_type),
            )
            if value is not None
        }
        if diagnostic.severity == ERROR:
            self.logger.error(diagnostic.message, **context)
        elif diagnostic.severity == WARNING:
            self.logger.warning(diagnostic.message, **context)
        else:
            self.logger.info(diagnostic.message, **context)
        return diagnostic

    def info(self, message: str, **kwargs: Any) -> Diagnostic:
        return self.report(Diagnostic(INFO, message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> Diagnostic:
        return self.report(Diagnostic(WARNING, message, **kwargs))

    def error(self, message: str, **kwargs: Any) -> Diagnostic:
        return self.report(Diagnostic(ERROR, message, **kwargs))

    @property
    def warnings(self) -> list[Diagnostic]:
        return [item for item in self.diagnostics if item.severity == WARNING]

    @property
    def errors(self) -> list[Diagnostic]:
        return [item for item in self.diagnostics if item.severity == ERROR]

    def count_by_message(self) -> Counter[str]:
        return Counter(item.message for item in self.diagnostics if item.severity != INFO)
