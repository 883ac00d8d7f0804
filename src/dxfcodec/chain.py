from __future__ import annotations

from typing import Any, Iterator, Optional, Protocol, TypeVar

from .diagnostics import DiagnosticSink, get_logger
from .errors import ChainError

logger = get_logger(__name__)


class Linked(Protocol):
    next: Any


T = TypeVar("T", bound=Linked)


def iter_chain(head: Optional[T]) -> Iterator[T]:
    node = head
    while node is not None:
        yield node
        node = node.next


def chain_length(head: Optional[T]) -> int:
    return sum(1 for _ in iter_chain(head))


def last(head: Optional[T], *, sink: DiagnosticSink | None = None) -> Optional[T]:
    if head is None:
        return None
    if head.next is None:
        message = "chain has a single element, returning its head"
        if sink is not None:
            sink.warning(message)
        else:
            logger.warning(message)
        return head
    node = head
    while node.next is not None:
        node = node.next
    return node


def append(head: Optional[T], node: T) -> T:
    """Link ``node`` after the last element of ``head`` and return the head.

    ``node`` must be detached. An empty chain (``head is None``) becomes
    ``node`` itself.
    """
    if node.next is not None:
        raise ChainError("node is already linked to another node")
    if head is None:
        return node
    if head is node:
        raise ChainError("node is already the head of this chain")
    tail = head
    while tail.next is not None:
        tail = tail.next
        if tail is node:
            raise ChainError("node is already part of this chain")
    tail.next = node
    return head


def free_one(node: T) -> None:
    if node.next is not None:
        raise ChainError("next is not None, detach the node before freeing it")
    release = getattr(node, "release", None)
    if callable(release):
        release()


def free_all(head: Optional[T]) -> int:
    count = 0
    node = head
    while node is not None:
        following = node.next
        node.next = None
        free_one(node)
        count += 1
        node = following
    return count
