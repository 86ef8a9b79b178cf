"""Tests for key validation, filename sanitizing and shard layout."""
import pytest

from lrufiles.errors import InvalidKeyError
from lrufiles.keys.resolver import KeyResolver, sanitize, validate_key

TRICKY_KEYS = [
    "plain",
    ".",
    "..",
    "...",
    "con",
    "CON.txt",
    "com1",
    "con .",
    "a:b*c?d",
    'quote"pipe|lt<gt>',
    "trailing. . ",
    "\x00null\x1fctrl",
    "x" * 300,
    "é" * 200,
    "\\leading",
]


@pytest.mark.parametrize("key", TRICKY_KEYS)
def test_sanitize_is_idempotent(key: str) -> None:
    once = sanitize(key)
    assert sanitize(once) == once


@pytest.mark.parametrize("key", TRICKY_KEYS)
def test_sanitize_never_escapes_directory(key: str) -> None:
    name = sanitize(key)
    assert name not in ("", ".", "..")
    assert "/" not in name and "\\" not in name
    assert len(name.encode("utf-8")) <= 255


def test_sanitize_keeps_safe_names() -> None:
    assert sanitize("thumb_640x480.webp") == "thumb_640x480.webp"


def test_sanitize_replaces_illegal_characters() -> None:
    assert sanitize("a:b*c") == "a_b_c"


def test_sanitize_strips_leading_separator() -> None:
    assert sanitize("/etc") == "etc"


def test_sanitize_prefixes_reserved_device_names() -> None:
    assert sanitize("nul") == "_nul"
    assert sanitize("con .") == "_con"


@pytest.mark.parametrize("key", ["a/b", "/abs", "", None, 42])
def test_validate_key_rejects(key) -> None:
    with pytest.raises(InvalidKeyError):
        validate_key(key)


def test_invalid_key_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        validate_key("../x/y")


def test_level_one_resolves_into_root(tmp_path) -> None:
    resolver = KeyResolver(tmp_path, sharding_level=1)
    assert resolver.resolve("hello") == tmp_path / "hello"


def test_level_two_uses_last_two_characters(tmp_path) -> None:
    """The shard is named after the key suffix and created on first use."""
    resolver = KeyResolver(tmp_path, sharding_level=2)
    path = resolver.resolve("image-1234")
    assert path == tmp_path / "34" / "image-1234"
    assert path.parent.is_dir()
    # second resolve into the existing shard is fine
    assert resolver.resolve("other-34") == tmp_path / "34" / "other-34"


def test_level_two_short_and_dotted_keys_stay_inside_root(tmp_path) -> None:
    resolver = KeyResolver(tmp_path, sharding_level=2)
    assert resolver.resolve("a") == tmp_path / "a" / "a"
    dotted = resolver.resolve("..")
    assert dotted.parent.parent == tmp_path
    assert dotted.parent.name == "_"


def test_invalid_key_touches_nothing(tmp_path) -> None:
    root = tmp_path / "missing-root"
    resolver = KeyResolver(root, sharding_level=2)
    with pytest.raises(InvalidKeyError):
        resolver.resolve("a/bc")
    assert not root.exists()


def test_unknown_sharding_level(tmp_path) -> None:
    with pytest.raises(ValueError):
        KeyResolver(tmp_path, sharding_level=3)
