"""A permission-enforcing, metadata-caching wrapper around a filesystem backend."""

from __future__ import annotations

import errno
import posixpath
import stat
import threading
from dataclasses import dataclass
from typing import Any

from cachetools import TTLCache

from .errors import NotSupportedError
from .types import (
    AccessMode,
    AttrChanges,
    DeviceNumber,
    LinkKind,
    LockOptions,
    OpenFlags,
    PosixFs,
    RenameOptions,
    SpecialKind,
    User,
)
from .userctx import current_user

_DEFAULT_TTL = 5.0
_DIR_CHANGE = AccessMode.WRITE | AccessMode.EXEC
_ACCESS_BITS = (
    (AccessMode.READ, 0o4),
    (AccessMode.WRITE, 0o2),
    (AccessMode.EXEC, 0o1),
)


@dataclass
class Options:
    """Settings of the wrapper.

    A ``metadata_cache_size`` of 0 disables the metadata cache; a
    ``metadata_cache_ttl`` of 0 or less means the default of five seconds.
    """

    passthrough_only: bool = False
    metadata_cache_size: int = 0
    metadata_cache_ttl: float = 0.0


@dataclass(frozen=True)
class _MetaEntry:
    meta: Any
    is_dir: bool


def _denied(path: str) -> PermissionError:
    return PermissionError(errno.EACCES, "permission denied", path)


def clean_path(path: str) -> str:
    """Normalise ``path`` to an absolute, slash-separated form."""
    if not path:
        return "/"
    clean = posixpath.normpath(path)
    if clean.startswith("//"):
        clean = "/" + clean.lstrip("/")
    if not clean.startswith("/"):
        clean = "/" + clean
    return clean


def parent_path(path: str) -> str:
    """Return the directory holding ``path``; the root is its own parent."""
    clean = clean_path(path)
    if clean == "/":
        return "/"
    return posixpath.dirname(clean)


def has_permissions(meta: Any, user: User, mode: AccessMode, is_dir: bool) -> bool:
    """Check ``mode`` against the owner/group/other bits of ``meta`` for ``user``."""
    if not mode or user.uid == 0:
        return True
    if user.uid == meta.uid:
        shift = 6
    elif user.in_group(meta.gid):
        shift = 3
    else:
        shift = 0
    perms = int(meta.mode)
    return all(perms & (bit << shift) for req, bit in _ACCESS_BITS if mode & req)


class FS:
    """Wraps a backend, enforcing POSIX permissions and caching metadata."""

    def __init__(self, backend: Any, options: Options | None = None) -> None:
        if backend is None:
            raise ValueError("vfs: backend must not be None")
        self._backend = backend
        self._options = options if options is not None else Options()
        adapter = getattr(backend, "posix_adapter", None)
        if callable(adapter):
            self._posix: PosixFs | None = adapter()
        elif isinstance(backend, PosixFs):
            self._posix = backend
        else:
            self._posix = None
        self._cache: TTLCache | None = None
        self._cache_lock = threading.Lock()
        if self._options.metadata_cache_size > 0:
            ttl = self._options.metadata_cache_ttl
            if ttl <= 0:
                ttl = _DEFAULT_TTL
            self._cache = TTLCache(maxsize=self._options.metadata_cache_size, ttl=ttl)

    # -- plain backend operations -------------------------------------------

    def backend(self) -> Any:
        """Return the wrapped backend."""
        return self._backend

    def name(self) -> str:
        return self._backend.name()

    def features(self) -> Any:
        return self._backend.features()

    def root(self) -> Any:
        return self._backend.root()

    def stat(self, path: str) -> Any:
        obj = self._backend.stat(path)
        self._cache_put(clean_path(path), obj.metadata, False)
        return obj

    def create(self, path: str, options: Any) -> Any:
        self._ensure_dir_perm(parent_path(path), _DIR_CHANGE, current_user())
        obj = self._backend.create(path, options)
        self._invalidate(path, parent_path(path))
        return obj

    def mkdir(self, path: str, options: Any) -> Any:
        self._ensure_dir_perm(parent_path(path), _DIR_CHANGE, current_user())
        directory = self._backend.mkdir(path, options)
        self._invalidate(path, parent_path(path))
        return directory

    def remove(self, path: str, options: Any) -> None:
        user = current_user()
        parent = parent_path(path)
        self._ensure_dir_perm(parent, _DIR_CHANGE, user)
        self._enforce_sticky(parent, path, user)
        self._backend.remove(path, options)
        self._invalidate(path, parent)

    def list(self, path: str, options: Any) -> Any:
        return self._backend.list(path, options)

    def link(self, source: str, target: str, kind: LinkKind) -> None:
        user = current_user()
        self._ensure_dir_perm(parent_path(target), _DIR_CHANGE, user)
        if kind is LinkKind.HARD:
            self.access(source, AccessMode.READ, user)
        self._backend.link(source, target, kind)
        self._invalidate(target, parent_path(target))

    def copy(self, source: str, target: str, options: Any) -> Any:
        return self._backend.copy(source, target, options)

    # -- POSIX operations ----------------------------------------------------

    def open_file(self, path: str, flags: OpenFlags, perm: int, user: User) -> Any:
        return self._posix_backend().open_file(path, flags, perm, user)

    def rename(
        self, old_path: str, new_path: str, options: RenameOptions, user: User
    ) -> None:
        posix = self._posix_backend()
        self._ensure_dir_perm(parent_path(old_path), _DIR_CHANGE, user)
        self._ensure_dir_perm(parent_path(new_path), _DIR_CHANGE, user)
        posix.rename(old_path, new_path, options, user)
        self._invalidate(old_path, new_path, parent_path(old_path), parent_path(new_path))

    def set_attr(self, path: str, changes: AttrChanges, user: User) -> None:
        posix = self._posix_backend()
        self._require_ownership(path, user)
        posix.set_attr(path, changes, user)
        self._invalidate(path)

    def access(self, path: str, mode: AccessMode, user: User) -> None:
        """Raise PermissionError unless ``user`` has ``mode`` access to ``path``."""
        mode = AccessMode(int(mode))
        if not mode:
            return
        if mode & AccessMode.EXISTS:
            mode = AccessMode(int(mode) & ~int(AccessMode.EXISTS))
            if not mode:
                self._metadata_for_path(path)
                return
        try:
            meta, is_dir = self._metadata_for_path(path)
        except NotSupportedError:
            if self._posix is not None:
                self._posix.access(path, mode, user)
                return
            raise
        if not has_permissions(meta, user, mode, is_dir):
            raise _denied(path)

    def mknod(
        self,
        path: str,
        kind: SpecialKind,
        perm: int,
        dev: DeviceNumber,
        user: User,
    ) -> None:
        posix = self._posix_backend()
        self._ensure_dir_perm(parent_path(path), _DIR_CHANGE, user)
        posix.mknod(path, kind, perm, dev, user)
        self._invalidate(path, parent_path(path))

    def mkfifo(self, path: str, perm: int, user: User) -> None:
        posix = self._posix_backend()
        self._ensure_dir_perm(parent_path(path), _DIR_CHANGE, user)
        posix.mkfifo(path, perm, user)
        self._invalidate(path, parent_path(path))

    def symlink(self, target: str, link: str, user: User) -> None:
        posix = self._posix_backend()
        self._ensure_dir_perm(parent_path(link), _DIR_CHANGE, user)
        posix.symlink(target, link, user)
        self._invalidate(link, parent_path(link))

    def readlink(self, link: str, user: User) -> str:
        return self._posix_backend().readlink(link, user)

    def lock(self, path: str, options: LockOptions, user: User) -> None:
        self._posix_backend().lock(path, options, user)

    def unlock(self, path: str, options: LockOptions, user: User) -> None:
        self._posix_backend().unlock(path, options, user)

    # -- internals -----------------------------------------------------------

    def _posix_backend(self) -> PosixFs:
        if self._posix is None:
            raise NotSupportedError("posix op not supported")
        return self._posix

    def _metadata_for_path(self, path: str) -> tuple[Any, bool]:
        clean = clean_path(path)
        cached = self._cache_get(clean)
        if cached is not None:
            return cached.meta, cached.is_dir
        try:
            obj = self._backend.stat(clean)
        except (FileNotFoundError, NotSupportedError):
            pass
        else:
            meta = obj.metadata
            self._cache_put(clean, meta, False)
            return meta, False
        meta = self._resolve_directory(clean).metadata
        self._cache_put(clean, meta, True)
        return meta, True

    def _resolve_directory(self, path: str) -> Any:
        directory = self._backend.root()
        if path == "/":
            return directory
        for segment in path.lstrip("/").split("/"):
            if not segment:
                continue
            found = next(
                (
                    entry.dir
                    for entry in directory.entries(None)
                    if entry.name == segment and entry.dir is not None
                ),
                None,
            )
            if found is None:
                raise FileNotFoundError(errno.ENOENT, "not found", path)
            directory = found
        return directory

    def _ensure_dir_perm(self, dir_path: str, mode: AccessMode, user: User) -> None:
        if user.uid == 0:
            return
        target = clean_path(dir_path)
        while True:
            try:
                meta, _ = self._metadata_for_path(target)
            except FileNotFoundError:
                if target == "/":
                    raise
                target = parent_path(target)
                continue
            if has_permissions(meta, user, mode, True):
                return
            raise _denied(target)

    def _require_ownership(self, path: str, user: User) -> None:
        if user.uid == 0:
            return
        meta, _ = self._metadata_for_path(path)
        if meta.uid != user.uid:
            raise _denied(path)

    def _enforce_sticky(self, parent: str, child: str, user: User) -> None:
        if user.uid == 0:
            return
        parent_meta, _ = self._metadata_for_path(parent)
        if not int(parent_meta.mode) & stat.S_ISVTX:
            return
        try:
            child_meta, _ = self._metadata_for_path(child)
        except FileNotFoundError:
            return
        if user.uid in (parent_meta.uid, child_meta.uid):
            return
        raise _denied(child)

    def _cache_get(self, path: str) -> _MetaEntry | None:
        if self._cache is None:
            return None
        with self._cache_lock:
            return self._cache.get(path)

    def _cache_put(self, path: str, meta: Any, is_dir: bool) -> None:
        if self._cache is None:
            return
        with self._cache_lock:
            self._cache[path] = _MetaEntry(meta, is_dir)

    def _invalidate(self, *paths: str) -> None:
        if self._cache is None:
            return
        with self._cache_lock:
            for path in paths:
                self._cache.pop(path, None)