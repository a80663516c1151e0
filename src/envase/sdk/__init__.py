################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""Envase SDK: a client for the Envase secrets-management API."""

from ._base._auth import AuthManager, AuthState
from ._base._config import ConfigStore, FileSystemAdapter, InMemoryAdapter
from ._base._crypto import EncryptionService
from ._base._http import ApiClient, Credentials, RequestDescriptor
from ._base._retry import RetryPolicy
from ._client import EnvaseClient
from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    EncryptionError,
    EnvaseError,
    ErrorKind,
    NetworkError,
    ValidationError,
)
from .schema.configs import ClientOptions, Profile
from .schema.environments import Environment
from .schema.projects import Project
from .schema.secrets import Secret
from .schema.teams import TeamMember

__all__ = [
    "ApiClient",
    "AuthManager",
    "AuthState",
    "AuthenticationError",
    "AuthorizationError",
    "ClientOptions",
    "ConfigStore",
    "ConfigurationError",
    "Credentials",
    "EncryptionError",
    "EncryptionService",
    "EnvaseClient",
    "EnvaseError",
    "Environment",
    "ErrorKind",
    "FileSystemAdapter",
    "InMemoryAdapter",
    "NetworkError",
    "Profile",
    "Project",
    "RequestDescriptor",
    "RetryPolicy",
    "Secret",
    "TeamMember",
    "ValidationError",
]
