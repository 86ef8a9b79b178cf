import logging
from typing import Optional

from lrufiles.cache import FileCache
from lrufiles.settings import CacheSettings


def create_cache(settings: Optional[CacheSettings] = None) -> FileCache:
    settings = settings or CacheSettings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    log = logging.getLogger("lrufiles")
    log.info("Starting cache...")
    log.info("Cache directory: %s", settings.resolve_directory())
    log.info("Limits: max_files=%s max_size=%s", settings.max_files, settings.max_size)
    if settings.has_limits and settings.check_interval_minutes > 0:
        log.info("Eviction sweep every %s min", settings.check_interval_minutes)
    else:
        log.info("Eviction sweep disabled")

    return FileCache(settings)
