class CacheError(Exception):
    """Base class for errors raised by the cache itself."""


class InvalidKeyError(CacheError, ValueError):
    """Key is not usable as a filename (empty, not a string, or has a path separator)."""


class NotFoundError(CacheError, FileNotFoundError):
    """Entry is missing where the caller required it to exist (touch)."""
