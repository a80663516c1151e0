################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Internal models for the request pipeline.
"""
import typing as t
from dataclasses import dataclass, field
from types import MappingProxyType

QueryValue = t.Union[str, int, float, bool, None]


@dataclass
class Credentials:
    """Mutable session state shared between the auth manager and the API client.

    The API client reads it when building each attempt's headers, so a rotated
    token is picked up by the very next attempt.
    """

    token: t.Optional[str] = None
    refresh_token: t.Optional[str] = None
    organization: t.Optional[str] = None

    def __repr__(self):
        return (
            f"Credentials(token={'***' if self.token else None}, "
            f"refresh_token={'***' if self.refresh_token else None}, "
            f"organization={self.organization!r})"
        )


@dataclass(frozen=True)
class RequestDescriptor:
    """One logical request. Replayed unchanged on every retry.

    Args:
        method: HTTP verb.
        path: path relative to the API base URL, like ``/api/projects``.
        query: query parameters. ``None`` values are dropped.
        body: JSON-serializable request body.
        headers: per-request headers. They override the defaults, including
            ``Content-Type``.
        authenticate: when ``False``, no bearer token is attached and an HTTP 401
            doesn't trigger the unauthorized handler.
    """

    method: str
    path: str
    query: t.Optional[t.Mapping[str, QueryValue]] = None
    body: t.Any = None
    headers: t.Mapping[str, str] = field(default_factory=dict)
    authenticate: bool = True

    def __post_init__(self):
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        if self.query is not None:
            object.__setattr__(self, "query", MappingProxyType(dict(self.query)))


def encode_query(
    query: t.Optional[t.Mapping[str, QueryValue]],
) -> t.Optional[t.Dict[str, str]]:
    """Turns query params into strings that ``aiohttp`` accepts."""
    if not query:
        return None

    encoded = {}
    for name, value in query.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[name] = "true" if value else "false"
        else:
            encoded[name] = str(value)

    return encoded or None
