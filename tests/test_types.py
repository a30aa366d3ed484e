import dataclasses

import pytest

from vfsguard.types import (
    AccessMode,
    AttrChanges,
    DeviceNumber,
    FileRange,
    LinkKind,
    LockOptions,
    OpenFlags,
    RenameOptions,
    SpecialKind,
    User,
)


def test_read_only_is_zero():
    assert OpenFlags(0) == OpenFlags.READ_ONLY


def test_open_flags_are_distinct_single_bits():
    flags = [
        OpenFlags.WRITE_ONLY,
        OpenFlags.READ_WRITE,
        OpenFlags.APPEND,
        OpenFlags.CREATE,
        OpenFlags.EXCLUSIVE,
        OpenFlags.TRUNCATE,
        OpenFlags.SYNC,
    ]
    values = [int(f) for f in flags]
    assert [OpenFlags(v) for v in values] == flags
    assert len(set(values)) == len(values)
    assert all(v > 0 and v & (v - 1) == 0 for v in values)


def test_open_flags_combine():
    combined = OpenFlags(int(OpenFlags.CREATE) | int(OpenFlags.WRITE_ONLY))
    assert combined == OpenFlags.CREATE | OpenFlags.WRITE_ONLY
    assert combined & OpenFlags.CREATE
    assert not combined & OpenFlags.TRUNCATE


def test_access_modes_are_distinct_single_bits():
    modes = [AccessMode.EXISTS, AccessMode.READ, AccessMode.WRITE, AccessMode.EXEC]
    values = [int(m) for m in modes]
    assert [AccessMode(v) for v in values] == modes
    assert len(set(values)) == 4
    assert all(v & (v - 1) == 0 for v in values)


def test_special_kind_order():
    assert SpecialKind(0) is SpecialKind.NONE
    assert [SpecialKind(v).name for v in range(5)] == [
        "NONE",
        "CHAR_DEVICE",
        "BLOCK_DEVICE",
        "FIFO",
        "SOCKET",
    ]


def test_link_kinds_differ():
    assert LinkKind.HARD is not LinkKind.SYMBOLIC
    assert LinkKind(LinkKind.HARD.value) is LinkKind.HARD


def test_user_defaults_are_root():
    assert User() == User(uid=0, gid=0, supplementary=())


def test_user_in_group_primary():
    assert User(uid=1000, gid=2000).in_group(2000)


def test_user_in_group_supplementary():
    user = User(uid=1, gid=2, supplementary=[10, 20])
    assert user.in_group(20)
    assert not user.in_group(30)


def test_user_supplementary_becomes_tuple_and_hashable():
    user = User(uid=1, gid=2, supplementary=[3])
    assert user.supplementary == (3,)
    assert hash(user) == hash(User(uid=1, gid=2, supplementary=(3,)))


def test_user_is_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        User().uid = 5


def test_device_number_equality():
    assert DeviceNumber(major=8, minor=1) == DeviceNumber(8, 1)
    assert DeviceNumber(8, 1) != DeviceNumber(1, 8)


def test_attr_changes_defaults():
    changes = AttrChanges()
    assert changes.mode is None and changes.uid is None and changes.size is None
    assert changes.xattrs == {}


def test_attr_changes_xattrs_not_shared():
    first = AttrChanges()
    first.xattrs["user.tag"] = b"x"
    assert AttrChanges().xattrs == {}


def test_rename_options_default_false():
    options = RenameOptions()
    assert (options.overwrite, options.no_replace, options.exchange) == (False, False, False)


def test_lock_options_default_range_to_eof():
    assert LockOptions().range == FileRange(start=0, length=0)