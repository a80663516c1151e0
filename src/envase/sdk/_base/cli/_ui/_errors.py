################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
import enum
import sys
import traceback
from functools import singledispatch

import click

from .... import exceptions
from ... import _env


class ResponseStatusCode(enum.Enum):
    UNKNOWN_ERROR = -1
    OK = 0
    PERMISSION_ERROR = 1
    NOT_FOUND = 2
    INVALID_INPUT = 3
    ENCRYPTION_ERROR = 4
    CONFIGURATION_ERROR = 5
    API_ERROR = 6
    CONNECTION_ERROR = 11
    UNAUTHORIZED = 12


def _print_traceback(e: Exception):
    if not _env.flag_set(_env.ENVASE_VERBOSE):
        return

    tb_lines = traceback.format_exception(type(e), e, e.__traceback__)
    click.secho("".join(tb_lines), fg="red", file=sys.stderr)


@singledispatch
def pretty_print_exception(e: Exception) -> ResponseStatusCode:
    # The default case
    tb_lines = traceback.format_exception(type(e), e, e.__traceback__)
    click.secho("".join(tb_lines), fg="red", file=sys.stderr)
    click.echo(
        "Something unexpected happened. Please consider reporting this error to the "
        "Envase SDK maintainers."
    )

    return ResponseStatusCode.UNKNOWN_ERROR


@pretty_print_exception.register
def _(e: exceptions.EnvaseError) -> ResponseStatusCode:
    _print_traceback(e)
    code = f" [{e.code}]" if e.code else ""
    click.echo(f"Error: {e.message}{code}")
    return ResponseStatusCode.API_ERROR


@pretty_print_exception.register
def _(e: exceptions.AuthenticationError) -> ResponseStatusCode:
    _print_traceback(e)
    click.echo(f"Error: {e.message}.\nPlease log in again with 'envase login'.")
    return ResponseStatusCode.UNAUTHORIZED


@pretty_print_exception.register
def _(e: exceptions.AuthorizationError) -> ResponseStatusCode:
    _print_traceback(e)
    click.echo(f"Error: {e.message}.")
    if e.requires:
        click.echo(f"The server requires additional factors: {', '.join(e.requires)}")
    return ResponseStatusCode.PERMISSION_ERROR


@pretty_print_exception.register
def _(e: exceptions.ValidationError) -> ResponseStatusCode:
    _print_traceback(e)
    click.echo(f"Error: {e.message}.")
    for detail in e.details:
        click.echo(f"  {detail.field}: {detail.message} ({detail.code})")
    return ResponseStatusCode.INVALID_INPUT


@pretty_print_exception.register
def _(e: exceptions.NetworkError) -> ResponseStatusCode:
    _print_traceback(e)
    if e.status_code:
        click.echo(f"Error: the server responded with {e.status_code}: {e.message}")
    else:
        click.echo(
            f"Error: couldn't reach the server: {e.message}. "
            "Try checking your network connection and the API URL."
        )
    return ResponseStatusCode.CONNECTION_ERROR


@pretty_print_exception.register
def _(e: exceptions.EncryptionError) -> ResponseStatusCode:
    _print_traceback(e)
    click.echo(f"Error: {e.message}. Check the encryption key.")
    return ResponseStatusCode.ENCRYPTION_ERROR


@pretty_print_exception.register
def _(e: exceptions.ConfigurationError) -> ResponseStatusCode:
    _print_traceback(e)
    click.echo(f"Error: {e.message}")
    return ResponseStatusCode.CONFIGURATION_ERROR


@pretty_print_exception.register
def _(e: exceptions.ConfigFileNotFoundError) -> ResponseStatusCode:
    _print_traceback(e)
    click.echo(f"{e.message} Use 'envase login' to create it.")
    return ResponseStatusCode.NOT_FOUND


@pretty_print_exception.register
def _(e: exceptions.ProfileNotFoundError) -> ResponseStatusCode:
    _print_traceback(e)
    click.echo(e.message)
    return ResponseStatusCode.NOT_FOUND
