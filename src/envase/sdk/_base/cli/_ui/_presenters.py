################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Utilities for presenting human-readable text output from envase commands.
"""
import sys
import typing as t
from datetime import datetime

import click
from tabulate import tabulate

from ....schema.configs import Profile, ProfileName
from ....schema.environments import Environment
from ....schema.projects import Project
from ....schema.secrets import Secret
from . import _errors


def _format_datetime(dt: t.Optional[datetime]) -> str:
    if dt is None:
        # Print empty table cell
        return ""

    return dt.isoformat()


class ErrorPresenter:
    def show_error(self, exception: Exception):
        status_code = _errors.pretty_print_exception(exception)

        sys.exit(status_code.value)


class LoginPresenter:
    def show_profile_saved(self, profile_name: ProfileName, profile: Profile):
        click.echo(f"Token saved in profile '{profile_name}'.")
        click.echo(str(profile))


class KeyPresenter:
    def show_key(self, key: str):
        click.echo(key)
        click.echo(
            "Store this key safely. Secrets encrypted with it can't be recovered "
            "without it.",
            err=True,
        )


class ProjectPresenter:
    def show_projects(self, projects: t.Sequence[Project]):
        if not projects:
            click.echo("No projects found.")
            return

        rows = [["ID", "name", "slug", "updated"]]
        for project in projects:
            rows.append(
                [
                    project.id,
                    project.name,
                    project.slug,
                    _format_datetime(project.updatedAt),
                ]
            )
        click.echo(tabulate(rows, headers="firstrow"))


class EnvironmentPresenter:
    def show_environments(self, environments: t.Sequence[Environment]):
        if not environments:
            click.echo("No environments found.")
            return

        rows = [["ID", "name", "slug", "protected"]]
        for env in environments:
            rows.append(
                [env.id, env.name, env.slug, "yes" if env.protected else "no"]
            )
        click.echo(tabulate(rows, headers="firstrow"))


class SecretPresenter:
    def show_secrets(self, secrets: t.Sequence[Secret]):
        if not secrets:
            click.echo("No secrets found.")
            return

        rows = [["key", "scope", "environment", "version", "updated"]]
        for secret in secrets:
            rows.append(
                [
                    secret.key,
                    secret.scope,
                    secret.environmentId or "",
                    secret.version,
                    _format_datetime(secret.updatedAt),
                ]
            )
        click.echo(tabulate(rows, headers="firstrow"))

    def show_value(self, secret: Secret):
        # Bare value, so the output can be piped.
        click.echo(secret.value or "")

    def show_saved(self, secret: Secret):
        click.echo(f"Saved secret '{secret.key}' (version {secret.version}).")

    def show_deleted(self, key: str):
        click.echo(f"Deleted secret '{key}'.")
