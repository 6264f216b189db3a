"""
Версия установленного дистрибутива zstache.

Модуль не импортирует остальной пакет, чтобы его можно было
использовать из __init__ без циклов.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import metadata

DIST_NAME = "zstache"
UNKNOWN_VERSION = "0.0.0"


@lru_cache(maxsize=1)
def tool_version() -> str:
    """Версия из метаданных дистрибутива; для неустановленного дерева исходников UNKNOWN_VERSION."""
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return UNKNOWN_VERSION


__all__ = ["tool_version", "DIST_NAME", "UNKNOWN_VERSION"]
