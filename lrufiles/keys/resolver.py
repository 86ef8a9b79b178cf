import os
import re
from pathlib import Path

from lrufiles.errors import InvalidKeyError

SEPARATORS = tuple(sorted({"/", os.sep} | ({os.altsep} if os.altsep else set())))
MAX_NAME_BYTES = 255
REPLACEMENT = "_"

ILLEGAL_RE = re.compile(r'[/\\?<>:*|"\x00-\x1f\x80-\x9f]')
TRAILING_RE = re.compile(r"[. ]+$")
WINDOWS_RESERVED_RE = re.compile(r"^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$", re.IGNORECASE)


def _truncate_utf8(name: str, limit: int = MAX_NAME_BYTES) -> str:
    raw = name.encode("utf-8")
    if len(raw) <= limit:
        return name
    return raw[:limit].decode("utf-8", errors="ignore")


def sanitize(key: str) -> str:
    """Turns a key into a single safe filename.

    The result never contains a separator, is never empty, "." or "..", and
    sanitizing it again returns it unchanged.
    """
    name = key.lstrip("".join(SEPARATORS))
    name = ILLEGAL_RE.sub(REPLACEMENT, name)
    name = TRAILING_RE.sub("", _truncate_utf8(name))
    if not name:
        return REPLACEMENT
    if WINDOWS_RESERVED_RE.match(name):
        name = TRAILING_RE.sub("", _truncate_utf8(REPLACEMENT + name))
    return name


def validate_key(key) -> str:
    if not isinstance(key, str):
        raise InvalidKeyError(f"Cache key must be a string, got {type(key).__name__}")
    if not key:
        raise InvalidKeyError("Cache key must not be empty")
    for sep in SEPARATORS:
        if sep in key:
            raise InvalidKeyError(f"{sep!r} is not supported character as key: {key!r}")
    return key


class KeyResolver:
    """Maps keys to file paths under the cache root.

    Level 1 stores every entry directly in the root. Level 2 adds one
    directory named after the last two characters of the key, created on
    first use.
    """

    def __init__(self, root: Path, sharding_level: int = 1):
        if sharding_level not in (1, 2):
            raise ValueError(f"Unsupported sharding level: {sharding_level}")
        self.root = Path(root)
        self.sharding_level = int(sharding_level)

    @staticmethod
    def shard_for(key: str) -> str:
        return sanitize(key[-2:])

    def resolve(self, key: str) -> Path:
        validate_key(key)
        name = sanitize(key)
        if self.sharding_level == 1:
            return self.root / name

        shard_dir = self.root / self.shard_for(key)
        # parents=True also brings the root back after clear()
        shard_dir.mkdir(parents=True, exist_ok=True)
        return shard_dir / name
