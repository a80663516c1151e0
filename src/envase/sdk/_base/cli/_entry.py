################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
"envase" CLI entrypoint.

``click`` uses function name as the group and command name.
"""
import typing as t

import cloup

from .._config import DEFAULT_PROFILE_NAME
from .._env import ENCRYPTION_KEY_ENV, PROFILE_ENV
from ._cli_logs import configure_verboseness_if_needed

# Adds '-h' alias for '--help'
CLICK_CTX_SETTINGS = {"help_option_names": ["-h", "--help"]}

PROFILE_OPTION = cloup.option(
    "-p",
    "--profile",
    required=False,
    envvar=PROFILE_ENV,
    help=(
        "Name of the profile saved with 'envase login'. If omitted, the default "
        "profile is used."
    ),
)

ENCRYPTION_KEY_OPTION = cloup.option(
    "-k",
    "--encryption-key",
    required=False,
    envvar=ENCRYPTION_KEY_ENV,
    help=(
        "64 hex characters used to encrypt and decrypt secret values. Generate one "
        "with 'envase keygen'."
    ),
)

ENVIRONMENT_OPTION = cloup.option(
    "-e",
    "--env",
    "environment_id",
    required=False,
    help="ID of the environment. If omitted, project-wide secrets are used.",
)


@cloup.group(context_settings=CLICK_CTX_SETTINGS)
def envase():
    # Normally, click would infer command name from function name. This is different,
    # because it's the top-level group. User-facing name depends on the script entry
    # in pyproject.toml.
    pass


@envase.command()
@cloup.option("-u", "--url", required=True, help="Base URL of the Envase API.")
@cloup.option("-t", "--token", required=True, help="API token.")
@cloup.option(
    "-r",
    "--refresh-token",
    required=False,
    help="Refresh token. If set, expired tokens are refreshed automatically.",
)
@cloup.option("-o", "--organization", required=False, help="Organization ID.")
@cloup.option(
    "-p",
    "--profile",
    default=DEFAULT_PROFILE_NAME,
    show_default=True,
    help="Name under which the credentials are saved.",
)
@cloup.option(
    "--set-default",
    is_flag=True,
    default=False,
    help="Make this profile the default one.",
)
def login(
    url: str,
    token: str,
    refresh_token: t.Optional[str],
    organization: t.Optional[str],
    profile: str,
    set_default: bool,
):
    """
    Verifies a token and saves it in a profile.
    """
    from ._login import Action

    action = Action()
    action.on_cmd_call(url, token, refresh_token, organization, profile, set_default)


@envase.command()
def keygen():
    """
    Prints a new random encryption key.
    """
    from ._keygen import Action

    action = Action()
    action.on_cmd_call()


# ----------- 'envase project' commands ----------


@envase.group()
def project():
    """
    Commands related to projects.
    """
    pass


@project.command(name="list")
@PROFILE_OPTION
def project_list(profile: t.Optional[str]):
    """
    Lists projects visible to the logged-in user.
    """
    from ._project._list import Action

    action = Action()
    action.on_cmd_call(profile)


# ----------- 'envase env' commands ----------


@envase.group()
def env():
    """
    Commands related to environments.
    """
    pass


@env.command(name="list")
@cloup.argument("project_id", required=True)
@PROFILE_OPTION
def env_list(project_id: str, profile: t.Optional[str]):
    """
    Lists environments of a project.
    """
    from ._env._list import Action

    action = Action()
    action.on_cmd_call(project_id, profile)


# ----------- 'envase secret' commands ----------


@envase.group()
def secret():
    """
    Commands related to secrets.
    """
    pass


@secret.command(name="list")
@cloup.argument("project_id", required=True)
@ENVIRONMENT_OPTION
@PROFILE_OPTION
@ENCRYPTION_KEY_OPTION
def secret_list(
    project_id: str,
    environment_id: t.Optional[str],
    profile: t.Optional[str],
    encryption_key: t.Optional[str],
):
    """
    Lists secrets of a project.
    """
    from ._secret._list import Action

    action = Action()
    action.on_cmd_call(project_id, environment_id, profile, encryption_key)


@secret.command(name="get")
@cloup.argument("project_id", required=True)
@cloup.argument("key", required=True)
@ENVIRONMENT_OPTION
@PROFILE_OPTION
@ENCRYPTION_KEY_OPTION
def secret_get(
    project_id: str,
    key: str,
    environment_id: t.Optional[str],
    profile: t.Optional[str],
    encryption_key: t.Optional[str],
):
    """
    Prints the value of a secret.
    """
    from ._secret._get import Action

    action = Action()
    action.on_cmd_call(project_id, key, environment_id, profile, encryption_key)


@secret.command(name="set")
@cloup.argument("project_id", required=True)
@cloup.argument("key", required=True)
@cloup.argument("value", required=True)
@ENVIRONMENT_OPTION
@PROFILE_OPTION
@ENCRYPTION_KEY_OPTION
@cloup.option(
    "--encrypt/--no-encrypt",
    default=True,
    help="Encrypt the value before it's sent to the server.",
)
def secret_set(
    project_id: str,
    key: str,
    value: str,
    environment_id: t.Optional[str],
    profile: t.Optional[str],
    encryption_key: t.Optional[str],
    encrypt: bool,
):
    """
    Creates a secret.
    """
    from ._secret._set import Action

    action = Action()
    action.on_cmd_call(
        project_id, key, value, environment_id, profile, encryption_key, encrypt
    )


@secret.command(name="delete")
@cloup.argument("project_id", required=True)
@cloup.argument("key", required=True)
@ENVIRONMENT_OPTION
@PROFILE_OPTION
def secret_delete(
    project_id: str,
    key: str,
    environment_id: t.Optional[str],
    profile: t.Optional[str],
):
    """
    Deletes a secret.
    """
    from ._secret._delete import Action

    action = Action()
    action.on_cmd_call(project_id, key, environment_id, profile)


envase.section("Secrets", project, env, secret)
envase.section("Account", login, keygen)


def main():
    configure_verboseness_if_needed()
    envase()


if __name__ == "__main__":
    main()
