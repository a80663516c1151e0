################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################

"""Custom exceptions for the SDK.

Every failure that crosses the SDK boundary is one of the classes defined here.
``EnvaseError.kind`` tells the variant apart without ``isinstance`` checks.
"""

import enum
import typing as t

from .schema.responses import ValidationErrorDetail


class ErrorKind(enum.Enum):
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    NETWORK = "network"
    ENCRYPTION = "encryption"
    CONFIGURATION = "configuration"
    GENERIC = "generic"


class EnvaseError(Exception):
    """Base class for errors raised by the SDK."""

    kind: t.ClassVar[ErrorKind] = ErrorKind.GENERIC
    default_message: t.ClassVar[str] = "Request failed"

    def __init__(
        self,
        message: t.Optional[str] = None,
        code: t.Optional[str] = None,
        status_code: t.Optional[int] = None,
    ):
        self.message = message or self.default_message
        self.code = code
        self.status_code = status_code
        super().__init__(self.message)

    def __repr__(self):
        return (
            f"{type(self).__name__}(message={self.message!r}, code={self.code!r}, "
            f"status_code={self.status_code!r})"
        )


class AuthenticationError(EnvaseError):
    """Raised when the API rejects the token, or when it couldn't be refreshed."""

    kind = ErrorKind.AUTHENTICATION
    default_message = "Authentication failed"

    def __init__(self, message: t.Optional[str] = None, code: t.Optional[str] = None):
        super().__init__(message, code, 401)


class AuthorizationError(EnvaseError):
    """Raised when the user did not have permission to access a specific resource.

    ``requires`` lists the extra factors (``"mfa"``, ``"jit"``) the API asked for,
    if any.
    """

    kind = ErrorKind.AUTHORIZATION
    default_message = "Access denied"

    def __init__(
        self,
        message: t.Optional[str] = None,
        code: t.Optional[str] = None,
        requires: t.Optional[t.Sequence[str]] = None,
    ):
        super().__init__(message, code, 403)
        self.requires = list(requires or [])


class ValidationError(EnvaseError):
    """Raised when the payload is rejected, either by the API or before sending."""

    kind = ErrorKind.VALIDATION
    default_message = "Validation failed"

    def __init__(
        self,
        message: t.Optional[str] = None,
        details: t.Optional[t.Sequence[ValidationErrorDetail]] = None,
    ):
        super().__init__(message, "VALIDATION_ERROR", 422)
        self.details: t.List[ValidationErrorDetail] = list(details or [])


class NetworkError(EnvaseError):
    """
    Raised for transport failures and HTTP errors we don't handle otherwise.
    ``status_code`` is 0 when no response was received at all.
    """  # noqa: D205, D212

    kind = ErrorKind.NETWORK
    default_message = "Network error"

    def __init__(self, message: t.Optional[str] = None, status_code: int = 0):
        super().__init__(message, "NETWORK_ERROR", status_code)


class EncryptionError(EnvaseError):
    """Raised when a value can't be encrypted/decrypted, or the key is invalid."""

    kind = ErrorKind.ENCRYPTION
    default_message = "Encryption failed"


class ConfigurationError(EnvaseError):
    """Raised when the client options are inconsistent or invalid."""

    kind = ErrorKind.CONFIGURATION
    default_message = "Configuration error"


# Config file errors
class ConfigFileNotFoundError(ConfigurationError):
    """Raised when the configuration file cannot be identified."""

    pass


class ProfileNotFoundError(ConfigurationError):
    """Raised if the specified profile is not stored in the config file."""

    def __init__(self, profile_name: t.Optional[str]):
        self.profile_name = profile_name
        super().__init__(
            f"Profile '{profile_name}' not found. Use 'envase login' to create it."
            if profile_name
            else "No default profile set. Use 'envase login' to create one."
        )
