################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""Profiles saved by ``envase login``.

The config file is a JSON document validated with ``envase.sdk.schema.configs``::

    {"version": "0.0.1", "default_profile": "default", "profiles": {...}}
"""
import os
import typing as t
from pathlib import Path

import pydantic

from ... import exceptions
from ...schema.configs import (
    CONFIG_FILE_CURRENT_VERSION,
    ConfigFile,
    Profile,
    ProfileName,
)
from .._env import CONFIG_PATH_ENV
from ._adapters import FileSystemAdapter, StorageAdapter

CONFIG_FILE_NAME = "config.json"
LOCK_FILE_NAME = "config.json.lock"
DEFAULT_PROFILE_NAME = "default"


def get_config_file_path() -> Path:
    """Get the absolute path to the config file.

    Returns:
        Path: Path to the configuration file. The default is `~/.envase/config.json`
            but can be configured using the `ENVASE_CONFIG_PATH` environment variable.
    """
    config_file_path = os.getenv(CONFIG_PATH_ENV)
    if config_file_path is not None:
        return Path(config_file_path).resolve()
    return Path.home() / ".envase" / CONFIG_FILE_NAME


class ConfigStore:
    """Reads and writes saved profiles through a storage adapter.

    Args:
        adapter: where the config file lives. Defaults to the file system, at
            ``get_config_file_path()``.
    """

    def __init__(self, adapter: t.Optional[StorageAdapter] = None):
        self._adapter = adapter or FileSystemAdapter(
            get_config_file_path(), LOCK_FILE_NAME
        )

    @property
    def adapter(self) -> StorageAdapter:
        return self._adapter

    def _open(self) -> t.Optional[ConfigFile]:
        content = self._adapter.read(self._adapter.config_path())
        if content is None:
            return None
        try:
            return ConfigFile.model_validate_json(content)
        except pydantic.ValidationError as e:
            raise exceptions.ConfigurationError(
                f"Config file {self._adapter.config_path()} is malformed."
            ) from e

    def _save(self, config_file: ConfigFile):
        self._adapter.write(
            self._adapter.config_path(), config_file.model_dump_json(indent=2)
        )

    def _open_or_empty(self) -> ConfigFile:
        return self._open() or ConfigFile(version=CONFIG_FILE_CURRENT_VERSION)

    def read_profile(self, name: t.Optional[ProfileName] = None) -> Profile:
        """Reads a saved profile.

        Args:
            name: profile to read. If omitted, the default profile is used.

        Raises:
            envase.sdk.exceptions.ConfigFileNotFoundError: when no config file
                exists.
            envase.sdk.exceptions.ProfileNotFoundError: when there's no such profile,
                or no default one.
        """
        with self._adapter.lock():
            config_file = self._open()

        if config_file is None:
            raise exceptions.ConfigFileNotFoundError(
                f"Config file {self._adapter.config_path()} not found."
            )

        resolved_name = name or config_file.default_profile
        if resolved_name is None or resolved_name not in config_file.profiles:
            raise exceptions.ProfileNotFoundError(resolved_name)

        return config_file.profiles[resolved_name]

    def save_profile(
        self, name: ProfileName, profile: Profile, make_default: bool = False
    ):
        """Adds or replaces a profile.

        The first profile ever saved becomes the default one.
        """
        with self._adapter.lock():
            config_file = self._open_or_empty()
            config_file.profiles[name] = profile
            if make_default or config_file.default_profile is None:
                config_file.default_profile = name
            self._save(config_file)

    def update_tokens(
        self,
        name: ProfileName,
        token: t.Optional[str],
        refresh_token: t.Optional[str] = None,
    ):
        """Stores rotated tokens in an existing profile.

        ``refresh_token`` is only overwritten when it's passed.

        Raises:
            envase.sdk.exceptions.ProfileNotFoundError: when there's no such profile.
        """
        with self._adapter.lock():
            config_file = self._open_or_empty()
            if name not in config_file.profiles:
                raise exceptions.ProfileNotFoundError(name)

            profile = config_file.profiles[name]
            updates: t.Dict[str, t.Any] = {"token": token}
            if refresh_token is not None:
                updates["refresh_token"] = refresh_token
            config_file.profiles[name] = profile.model_copy(update=updates)
            self._save(config_file)

    def list_profile_names(self) -> t.List[ProfileName]:
        """Names of all saved profiles. Empty if there's no config file yet."""
        with self._adapter.lock():
            config_file = self._open()
        if config_file is None:
            return []
        return list(config_file.profiles)

    def default_profile_name(self) -> t.Optional[ProfileName]:
        with self._adapter.lock():
            config_file = self._open()
        return config_file.default_profile if config_file else None

    def remove_profile(self, name: ProfileName):
        """Deletes a profile. If it was the default one, no default is left.

        Raises:
            envase.sdk.exceptions.ProfileNotFoundError: when there's no such profile.
        """
        with self._adapter.lock():
            config_file = self._open_or_empty()
            if name not in config_file.profiles:
                raise exceptions.ProfileNotFoundError(name)

            del config_file.profiles[name]
            if config_file.default_profile == name:
                config_file.default_profile = None
            self._save(config_file)
