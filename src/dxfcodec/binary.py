from __future__ import annotations

from typing import Iterable

from .config import CHUNK_BYTES
from .record import Record


def split_binary(data: bytes, *, chunk_bytes: int = CHUNK_BYTES) -> list[str]:
    if chunk_bytes <= 0:
        raise ValueError(f"invalid chunk size: {chunk_bytes}")
    return [data[i : i + chunk_bytes].hex().upper() for i in range(0, len(data), chunk_bytes)]


def join_binary(chunks: Iterable[str]) -> bytes:
    text = "".join(chunk.strip() for chunk in chunks)
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise ValueError(f"invalid binary chunk data: {exc}") from exc


def set_binary(record: Record, data: bytes) -> Record:
    record.binary_chunks = split_binary(data)
    record.graphics_data_size = len(data)
    return record


def get_binary(record: Record) -> bytes:
    return join_binary(record.binary_chunks)
