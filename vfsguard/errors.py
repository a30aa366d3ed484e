"""Error kinds and classification helpers for filesystem operations."""

from __future__ import annotations

import enum
from typing import Iterator


class Kind(enum.IntEnum):
    """Broad classification of a filesystem error."""

    INVALID = 0
    NOT_FOUND = 1
    ALREADY_EXISTS = 2
    PERMISSION = 3
    RANGE = 4
    NOT_SUPPORTED = 5
    INTERNAL = 6

    def __str__(self) -> str:
        return _KIND_TEXT.get(self, "invalid")


_KIND_TEXT = {
    Kind.INVALID: "invalid",
    Kind.NOT_FOUND: "not found",
    Kind.ALREADY_EXISTS: "already exists",
    Kind.PERMISSION: "permission denied",
    Kind.RANGE: "invalid range",
    Kind.NOT_SUPPORTED: "not supported",
    Kind.INTERNAL: "internal error",
}


class NotSupportedError(Exception):
    """The backend does not provide the requested operation."""


class InvalidArgumentError(ValueError):
    """An argument to a filesystem operation is invalid."""


class XgfsError(Exception):
    """An error annotated with a kind, the operation and the path involved."""

    def __init__(
        self,
        kind: Kind,
        op: str = "",
        path: str = "",
        err: BaseException | None = None,
    ) -> None:
        super().__init__(kind, op, path, err)
        self.kind = Kind(kind)
        self.op = op
        self.path = path
        self.err = err
        self.__cause__ = err

    def __str__(self) -> str:
        text = str(self.kind)
        if self.op:
            text = f"{self.op}: {text}"
        if self.path:
            text = f"{text} {self.path}"
        if self.err is not None:
            return f"{text}: {self.err}"
        return text


def wrap(
    kind: Kind, op: str, path: str, err: BaseException | None
) -> XgfsError | None:
    """Annotate ``err`` with metadata; return None when ``err`` is None."""
    if err is None:
        return None
    return XgfsError(kind, op, path, err)


def new_error(kind: Kind, op: str, path: str) -> XgfsError:
    """Create an annotated error with no underlying cause."""
    return XgfsError(kind, op, path)


def _chain(err: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


_CLASSIFICATION: tuple[tuple[type[BaseException], Kind], ...] = (
    (FileNotFoundError, Kind.NOT_FOUND),
    (FileExistsError, Kind.ALREADY_EXISTS),
    (NotSupportedError, Kind.NOT_SUPPORTED),
    (PermissionError, Kind.PERMISSION),
    (InvalidArgumentError, Kind.INVALID),
)


def kind_of(err: BaseException | None) -> Kind:
    """Return the kind of ``err``, following its chain of causes."""
    if err is None:
        return Kind.INVALID
    chain = list(_chain(err))
    for item in chain:
        if isinstance(item, XgfsError):
            return item.kind
    for exc_type, kind in _CLASSIFICATION:
        if any(isinstance(item, exc_type) for item in chain):
            return kind
    return Kind.INTERNAL