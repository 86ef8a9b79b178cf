import os
import re
import sys
from pathlib import Path
from typing import Literal, Optional

from pydantic import ByteSize, Field, field_validator
from pydantic_settings import BaseSettings

# ByteSize knows "KiB" but not the bare "Ki" suffix
_BARE_BINARY_UNIT_RE = re.compile(r"([KMGTPE]i)\s*$", re.IGNORECASE)

ShardingLevel = Literal[1, 2]


class CacheSettings(BaseSettings):
    directory: str = "cache"  # relative paths are resolved against the entry point's directory
    max_files: Optional[int] = Field(None, ge=0)  # 0 / unset = no count limit
    max_size: Optional[ByteSize] = None  # bytes or "1 GB", "512 MiB"; 0 / unset = no size limit
    check_interval_minutes: float = Field(10, ge=0)  # 0 = never sweep in the background
    sharding_level: ShardingLevel = 1  # 1 = flat, 2 = two-character shard directories

    log_level: str = "INFO"

    class Config:
        env_prefix = "LRUFILES_"
        env_file = ".env"
        extra = "ignore"

    @field_validator("max_files", mode="before")
    @classmethod
    def _zero_files_is_unset(cls, v):
        if v in (None, "", 0, "0", False):
            return None
        return v

    @field_validator("sharding_level", mode="before")
    @classmethod
    def _level_from_env_string(cls, v):
        # env values arrive as "1" / "2"
        if isinstance(v, str) and v.strip().isdigit():
            return int(v)
        return v

    @field_validator("max_size", mode="before")
    @classmethod
    def _normalize_size(cls, v):
        if v in (None, "", 0, "0", False):
            return None
        if isinstance(v, str):
            v = _BARE_BINARY_UNIT_RE.sub(r"\1B", v.strip())
        return v

    @field_validator("max_size")
    @classmethod
    def _zero_size_is_unset(cls, v):
        # "0 GB" passes the before-validator as a string
        return v or None

    @property
    def check_interval_seconds(self) -> float:
        return self.check_interval_minutes * 60.0

    @property
    def has_limits(self) -> bool:
        return bool(self.max_files or self.max_size)

    def resolve_directory(self) -> Path:
        """Absolute cache root; relative paths hang off the host program's directory."""
        path = Path(self.directory).expanduser()
        if path.is_absolute():
            return path
        main = sys.modules.get("__main__")
        main_file = getattr(main, "__file__", None)
        base = Path(main_file).resolve().parent if main_file else Path(os.getcwd())
        return base / path
