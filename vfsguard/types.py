"""Value types and protocols describing POSIX operations."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable


class OpenFlags(enum.IntFlag):
    """Flags accepted by open_file, modelled on open(2)."""

    READ_ONLY = 0
    WRITE_ONLY = 1 << 1
    READ_WRITE = 1 << 2
    APPEND = 1 << 3
    CREATE = 1 << 4
    EXCLUSIVE = 1 << 5
    TRUNCATE = 1 << 6
    SYNC = 1 << 7


class AccessMode(enum.IntFlag):
    """Access checks: existence, read, write and execute."""

    EXISTS = 1 << 0
    READ = 1 << 1
    WRITE = 1 << 2
    EXEC = 1 << 3


class SpecialKind(enum.IntEnum):
    """Kinds of non-regular files."""

    NONE = 0
    CHAR_DEVICE = 1
    BLOCK_DEVICE = 2
    FIFO = 3
    SOCKET = 4


class LinkKind(enum.Enum):
    """Kinds of links a backend can create."""

    SYMBOLIC = "symbolic"
    HARD = "hard"


@dataclass(frozen=True)
class DeviceNumber:
    """Major and minor numbers of a special file."""

    major: int = 0
    minor: int = 0


@dataclass(frozen=True)
class User:
    """Identity of the caller."""

    uid: int = 0
    gid: int = 0
    supplementary: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "supplementary", tuple(self.supplementary))

    def in_group(self, gid: int) -> bool:
        """Whether the user belongs to ``gid`` as primary or supplementary group."""
        return self.gid == gid or gid in self.supplementary


@dataclass
class AttrChanges:
    """Attribute updates: chmod, chown, utimes, truncate and xattrs."""

    mode: int | None = None
    uid: int | None = None
    gid: int | None = None
    atime: datetime | None = None
    mtime: datetime | None = None
    ctime: datetime | None = None
    size: int | None = None
    xattrs: dict[str, bytes] = field(default_factory=dict)


@dataclass(frozen=True)
class RenameOptions:
    """Semantics of a rename."""

    overwrite: bool = False
    no_replace: bool = False
    exchange: bool = False


@dataclass(frozen=True)
class FileRange:
    """A byte range; a length of 0 reaches to the end of the file."""

    start: int = 0
    length: int = 0


@dataclass(frozen=True)
class LockOptions:
    """An advisory lock request."""

    exclusive: bool = False
    blocking: bool = False
    owner: str = ""
    range: FileRange = field(default_factory=FileRange)


@runtime_checkable
class PosixFs(Protocol):
    """POSIX operations a backend may provide."""

    def open_file(self, path: str, flags: OpenFlags, perm: int, user: User) -> Any: ...

    def rename(
        self, old_path: str, new_path: str, options: RenameOptions, user: User
    ) -> None: ...

    def set_attr(self, path: str, changes: AttrChanges, user: User) -> None: ...

    def access(self, path: str, mode: AccessMode, user: User) -> None: ...

    def mknod(
        self,
        path: str,
        kind: SpecialKind,
        perm: int,
        dev: DeviceNumber,
        user: User,
    ) -> None: ...

    def mkfifo(self, path: str, perm: int, user: User) -> None: ...

    def symlink(self, target: str, link: str, user: User) -> None: ...

    def readlink(self, link: str, user: User) -> str: ...

    def lock(self, path: str, options: LockOptions, user: User) -> None: ...

    def unlock(self, path: str, options: LockOptions, user: User) -> None: ...