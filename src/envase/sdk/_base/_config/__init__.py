################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""Saving and loading ``envase login`` profiles."""

from ._adapters import FileSystemAdapter, InMemoryAdapter, StorageAdapter
from ._store import (
    CONFIG_FILE_NAME,
    DEFAULT_PROFILE_NAME,
    LOCK_FILE_NAME,
    ConfigStore,
    get_config_file_path,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigStore",
    "DEFAULT_PROFILE_NAME",
    "FileSystemAdapter",
    "InMemoryAdapter",
    "LOCK_FILE_NAME",
    "StorageAdapter",
    "get_config_file_path",
]
