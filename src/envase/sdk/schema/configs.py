################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
import logging
import typing as t

import pydantic

CONFIG_FILE_CURRENT_VERSION = "0.0.1"

ProfileName = str

TokenRefreshCallback = t.Callable[[str], None]
UnauthorizedHandler = t.Callable[[], t.Awaitable[t.Optional[str]]]


class ClientOptions(pydantic.BaseModel):
    """
    Everything ``EnvaseClient`` can be configured with. Durations are in seconds.
    """

    model_config = pydantic.ConfigDict(arbitrary_types_allowed=True)

    api_url: str = pydantic.Field(pattern=r"^https?://\S+$")
    token: t.Optional[str] = None
    organization: t.Optional[str] = None

    timeout: float = pydantic.Field(default=30.0, gt=0)
    retries: int = pydantic.Field(default=3, ge=0)
    retry_delay: float = pydantic.Field(default=1.0, ge=0)

    refresh_token: t.Optional[str] = None
    auto_refresh: bool = False
    on_token_refresh: t.Optional[TokenRefreshCallback] = None
    unauthorized_handler: t.Optional[UnauthorizedHandler] = None

    encryption_key: t.Optional[str] = None
    enable_encryption: bool = False

    logger: t.Optional[logging.Logger] = None


class Profile(pydantic.BaseModel):
    """Credentials saved by ``envase login``."""

    api_url: str
    token: t.Optional[str] = None
    refresh_token: t.Optional[str] = None
    organization: t.Optional[str] = None

    def __str__(self):
        outstr = f"Profile for {self.api_url}:"
        outstr += f"\n- organization: {self.organization or 'not set'}"
        outstr += f"\n- token: {'set' if self.token else 'not set'}"
        outstr += f"\n- refresh token: {'set' if self.refresh_token else 'not set'}"
        return outstr


class ConfigFile(pydantic.BaseModel):
    """
    This schema is for the storage of saved profiles.
    The version should be bumped when the shape of ``Profile`` or of this model
    changes.
    """

    version: str = CONFIG_FILE_CURRENT_VERSION
    profiles: t.Dict[ProfileName, Profile] = {}
    default_profile: t.Optional[ProfileName] = None
