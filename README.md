# vfsguard

`vfsguard` wraps a filesystem backend that you supply. It adds POSIX-style
permission checks, sticky-bit handling on removal, and an optional
in-memory metadata cache. It also provides a small set of value types and
error helpers for describing filesystem operations.

## Installation

```
pip install vfsguard
```

## Modules

- `vfsguard.filesystem`
  - `FS(backend, options)` is the wrapper.
  - `Options` has three fields:
    - `passthrough_only`
    - `metadata_cache_size`: 0 disables the cache.
    - `metadata_cache_ttl`: in seconds. A value of 0 or less means 5 seconds.
  - It also has the helpers `has_permissions(meta, user, mode, is_dir)`,
    `clean_path(path)` and `parent_path(path)`.
- `vfsguard.types` provides:
  - `User`, with `uid`, `gid`, `supplementary` and `in_group(gid)`.
  - The flag and enum types `AccessMode`, `OpenFlags`, `SpecialKind` and `LinkKind`.
  - The option and value types `AttrChanges`, `RenameOptions`, `LockOptions`,
    `FileRange` and `DeviceNumber`.
  - The `PosixFs` protocol.
- `vfsguard.userctx`
  - `acting_as(user)` is a context manager that sets the caller identity for
    the enclosed block.
  - `current_user()` reads it. When no user has been set, the caller is
    `User()`, which is uid 0 (root).
- `vfsguard.errors` provides:
  - `XgfsError`, an exception carrying a `Kind`, an operation name, a path
    and an optional cause.
  - `wrap(kind, op, path, err)` annotates an error and returns `None` when
    `err` is `None`.
  - `new_error(kind, op, path)`.
  - `NotSupportedError` and `InvalidArgumentError`.
  - `kind_of(err)`, which classifies an exception by following its
    `__cause__` chain:

| Exception in the chain                   | `kind_of` result        |
|------------------------------------------|-------------------------|
| `XgfsError`                              | that error's `kind`     |
| `FileNotFoundError`                      | `Kind.NOT_FOUND`        |
| `FileExistsError`                        | `Kind.ALREADY_EXISTS`   |
| `NotSupportedError`                      | `Kind.NOT_SUPPORTED`    |
| `PermissionError`                        | `Kind.PERMISSION`       |
| `InvalidArgumentError`                   | `Kind.INVALID`          |
| `None`                                   | `Kind.INVALID`          |
| anything else                            | `Kind.INTERNAL`         |

## What the backend must provide

`FS` calls the following methods on the backend:

- `name()`
- `features()`
- `root()`
- `stat(path)`
- `create(path, options)`
- `mkdir(path, options)`
- `remove(path, options)`
- `list(path, options)`
- `link(source, target, kind)`
- `copy(source, target, options)`

The objects these return must meet the following requirements:

- `stat` returns an object with a `metadata` attribute.
- `root()` and its sub-directories have a `metadata` attribute.
- Each directory has an `entries(options)` method that yields entries with
  `name` and `dir` attributes.
- Metadata must carry `uid`, `gid` and `mode`.

Missing paths should be reported with `FileNotFoundError`. Unsupported
operations should be reported with `NotSupportedError`.

POSIX operations are forwarded to one of two places:

- the object returned by the backend's `posix_adapter()` method, if it has
  one;
- otherwise the backend itself, when it satisfies `PosixFs`.

When neither applies, every POSIX operation raises `NotSupportedError`.

## Permission rules

- A denied check raises `PermissionError`. A user with uid 0 passes every
  check.
- Owner, group and other bits are chosen as follows:
  - The owner bits apply when the uid matches.
  - Otherwise the group bits apply when the file's gid is the user's
    primary or a supplementary group.
  - Otherwise the other bits apply.
- `create`, `mkdir`, `remove` and `link` take the caller from
  `current_user()`. They require write and execute permission on the parent
  directory. If the parent does not exist, the nearest existing ancestor is
  checked instead.
- `remove` also honours the sticky bit. In a sticky directory, only the
  owner of the directory or of the entry may remove it.
- A hard `link` also requires read access to the source.
- These operations take the user explicitly and require write and execute
  permission on the parent directory:
  - `rename`, which checks both parent directories;
  - `mknod`;
  - `mkfifo`;
  - `symlink`.
- `set_attr` requires the caller to own the path.
- `access(path, mode, user)` behaves as follows:
  - With `AccessMode.EXISTS` alone, it only checks that the path exists.
  - If the backend cannot report metadata and a POSIX backend is present,
    the check is handed to that backend.
- These operations pass through without checks:
  - `open_file`, `readlink`, `lock` and `unlock`;
  - `stat`, `list` and `copy`;
  - `root`, `name` and `features`.

With the cache enabled, metadata read during checks and by `stat` is kept
for the configured lifetime. The affected path and its parent are dropped
from the cache after every change made through the wrapper.

## Example

```python
from vfsguard.filesystem import FS, Options
from vfsguard.types import AccessMode, User
from vfsguard.userctx import acting_as

fs = FS(backend, Options(metadata_cache_size=256))  # backend: your own

alice = User(uid=1000, gid=1000)

with acting_as(alice):
    fs.mkdir("/home/alice/projects", mkdir_options)  # options: backend-specific

fs.access("/home/alice/projects", AccessMode.READ | AccessMode.EXEC, alice)
```

## What this package does not do

`vfsguard` contains no storage backend of its own. It does not:

- keep files on disk or in memory;
- mount anything;
- offer a command line.

All file data and metadata come from the backend you pass to `FS`.

## Running the tests

```
pip install -e ".[test]"
pytest
```