import pytest

from vfsguard.errors import (
    InvalidArgumentError,
    Kind,
    NotSupportedError,
    XgfsError,
    kind_of,
    new_error,
    wrap,
)


@pytest.mark.parametrize(
    "err, kind",
    [
        (None, Kind.INVALID),
        (wrap(Kind.PERMISSION, "op", "", Exception("boom")), Kind.PERMISSION),
        (FileNotFoundError("missing"), Kind.NOT_FOUND),
        (FileExistsError("exists"), Kind.ALREADY_EXISTS),
        (NotSupportedError("nope"), Kind.NOT_SUPPORTED),
        (PermissionError("denied"), Kind.PERMISSION),
        (InvalidArgumentError("bad"), Kind.INVALID),
        (Exception("other"), Kind.INTERNAL),
    ],
    ids=[
        "nil",
        "wrapped error",
        "fs not found",
        "fs already exists",
        "fs not supported",
        "permission",
        "invalid",
        "unknown error defaults internal",
    ],
)
def test_kind_of(err, kind):
    assert kind_of(err) == kind


def test_kind_of_prefers_annotated_kind_over_cause():
    err = wrap(Kind.PERMISSION, "open", "/a", FileNotFoundError("/a"))
    assert kind_of(err) == Kind.PERMISSION


def test_kind_of_follows_cause_chain():
    inner = new_error(Kind.RANGE, "read", "/f")
    outer = RuntimeError("outer")
    outer.__cause__ = inner
    assert kind_of(outer) == Kind.RANGE


def test_kind_of_classifies_wrapped_builtin_cause():
    outer = RuntimeError("outer")
    outer.__cause__ = FileNotFoundError("/gone")
    assert kind_of(outer) == Kind.NOT_FOUND


def test_wrap_none_returns_none():
    assert wrap(Kind.INTERNAL, "op", "/p", None) is None


def test_wrap_keeps_cause():
    cause = ValueError("boom")
    err = wrap(Kind.INTERNAL, "op", "/p", cause)
    assert err.err is cause
    assert err.__cause__ is cause


def test_message_with_op_and_cause():
    err = wrap(Kind.PERMISSION, "op", "", Exception("boom"))
    assert str(err) == "op: permission denied: boom"


def test_message_with_path_only():
    err = new_error(Kind.NOT_FOUND, "stat", "/a")
    assert str(err) == "stat: not found /a"


def test_message_plain_kind():
    assert str(new_error(Kind.NOT_SUPPORTED, "", "")) == "not supported"


def test_new_error_has_no_cause():
    err = new_error(Kind.INTERNAL, "op", "/x")
    assert err.err is None
    assert err.__cause__ is None


def test_errors_can_be_raised_and_caught():
    err = new_error(Kind.ALREADY_EXISTS, "create", "/dup")
    assert isinstance(err, XgfsError)
    assert err.kind == Kind.ALREADY_EXISTS
    assert err.path == "/dup"
    assert str(err) == "create: already exists /dup"
    with pytest.raises(XgfsError) as info:
        raise err
    assert info.value is err