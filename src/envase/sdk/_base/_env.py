################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################

"""Global constants used to access environment variables."""

import os
import typing as t

# --------------------------------- API --------------------------------------

API_URL_ENV = "ENVASE_API_URL"
"""
Base URL of the Envase API
Example:
    ENVASE_API_URL=https://api.envase.example.com
"""

TOKEN_ENV = "ENVASE_TOKEN"
"""
Bearer token used to authenticate requests
"""

REFRESH_TOKEN_ENV = "ENVASE_REFRESH_TOKEN"
"""
Refresh token used to obtain a new bearer token when the current one expires
"""

ORGANIZATION_ENV = "ENVASE_ORGANIZATION"
"""
Organization sent with every request in the ``X-Envase-Organization`` header
"""

ENCRYPTION_KEY_ENV = "ENVASE_ENCRYPTION_KEY"
"""
64 hex characters used to encrypt secret values client-side
"""

# -------------------------------- Config ------------------------------------

CONFIG_PATH_ENV = "ENVASE_CONFIG_PATH"
"""
Used to configure the location of the `config.json`
Example:
    ENVASE_CONFIG_PATH=/tmp/config.json
"""

PROFILE_ENV = "ENVASE_PROFILE"
"""
Name of the saved profile used when none is passed explicitly
"""

# --------------------------------- CLI --------------------------------------

ENVASE_VERBOSE = "ENVASE_VERBOSE"
"""
If set to a truthy value, enables printing debug information when running the
``envase`` CLI commands.
"""

# ------------------------------- utilities ----------------------------------


def _is_truthy(env_var_value: t.Optional[str]):
    if env_var_value is None:
        return False

    return env_var_value.lower() in {"1", "true"}


def flag_set(env_var_name: str) -> bool:
    value = os.getenv(env_var_name)
    return _is_truthy(value)
