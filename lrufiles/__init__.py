from lrufiles.cache import FileCache
from lrufiles.errors import CacheError, InvalidKeyError, NotFoundError
from lrufiles.eviction.sweeper import SweepReport
from lrufiles.settings import CacheSettings
from lrufiles.store.payload import Bytes, StreamSource, Structured, Text

__all__ = [
    "FileCache",
    "CacheSettings",
    "CacheError",
    "InvalidKeyError",
    "NotFoundError",
    "SweepReport",
    "Bytes",
    "Text",
    "Structured",
    "StreamSource",
]
