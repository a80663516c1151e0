################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Code for talking to the Envase API over HTTP.

Every request goes through ``ApiClient.send()``, which attaches the auth headers,
retries transient failures with exponential backoff, and turns every failure into
one of the ``envase.sdk.exceptions`` types.
"""
import asyncio
import json
import logging
import typing as t

import aiohttp
import pydantic

from ... import exceptions
from ...schema.responses import ValidationErrorDetail
from .._retry import RetryPolicy
from ._models import Credentials, QueryValue, RequestDescriptor, encode_query

_logger = logging.getLogger(__name__)

UnauthorizedHandler = t.Callable[[], t.Awaitable[t.Optional[str]]]

DEFAULT_CONTENT_TYPE = "application/json"
ORGANIZATION_HEADER = "X-Envase-Organization"

_DETAIL_ADAPTER = pydantic.TypeAdapter(ValidationErrorDetail)


def _normalize_base_url(url: str) -> str:
    return url[:-1] if url.endswith("/") else url


def _try_parse_json(raw: bytes) -> t.Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


def _parse_details(raw_details: t.Any) -> t.List[ValidationErrorDetail]:
    if not isinstance(raw_details, list):
        return []

    details = []
    for entry in raw_details:
        try:
            details.append(_DETAIL_ADAPTER.validate_python(entry))
        except pydantic.ValidationError:
            _logger.debug("Skipping malformed validation detail: %r", entry)
    return details


def _map_http_error(
    status: int, reason: t.Optional[str], raw: bytes
) -> exceptions.EnvaseError:
    """Maps a non-2xx response to an SDK error.

    401 -> AuthenticationError, 403 -> AuthorizationError, 422 -> ValidationError,
    anything else -> NetworkError carrying the status code.
    """
    body = _try_parse_json(raw)
    if not isinstance(body, dict):
        body = {}

    message = (
        body.get("message")
        or body.get("error")
        or reason
        or f"Request failed with status code {status}"
    )
    code = body.get("code")

    if status == 401:
        return exceptions.AuthenticationError(message, code)
    elif status == 403:
        requires = body.get("requires")
        return exceptions.AuthorizationError(
            message, code, requires=requires if isinstance(requires, list) else None
        )
    elif status == 422:
        details = _parse_details(body.get("details"))
        return exceptions.ValidationError(message, details)
    else:
        return exceptions.NetworkError(message, status)


class ApiClient:
    """Client for interacting with the Envase API via HTTP.

    Args:
        base_url: Envase API URL, like 'https://api.envase.example.com'.
        credentials: session state read when building each request's headers.
        timeout: seconds after which a single attempt is aborted and reported as
            ``NetworkError(status_code=0)``.
        retry_policy: decides which failures are retried and how long to wait.
        logger: where the per-attempt debug trace goes.
        unauthorized_handler: coroutine function called once when the first attempt
            of a request fails with HTTP 401. It should return a fresh token (or
            ``None`` to keep the current one); the request is then replayed once.
    """

    def __init__(
        self,
        base_url: str,
        credentials: t.Optional[Credentials] = None,
        *,
        timeout: float = 30.0,
        retry_policy: t.Optional[RetryPolicy] = None,
        logger: t.Optional[logging.Logger] = None,
        unauthorized_handler: t.Optional[UnauthorizedHandler] = None,
        session: t.Optional[aiohttp.ClientSession] = None,
    ):
        self._base_url = _normalize_base_url(base_url)
        self._credentials = credentials if credentials is not None else Credentials()
        self._timeout_s = timeout
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._retry_policy = retry_policy or RetryPolicy()
        self._logger = logger or _logger
        self._unauthorized_handler = unauthorized_handler
        self._session = session

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    def get_token(self) -> t.Optional[str]:
        return self._credentials.token

    def set_token(self, token: t.Optional[str]):
        self._credentials.token = token

    def set_organization(self, organization: t.Optional[str]):
        self._credentials.organization = organization

    def set_unauthorized_handler(self, handler: t.Optional[UnauthorizedHandler]):
        self._unauthorized_handler = handler

    def set_logger(self, logger: t.Optional[logging.Logger]):
        self._logger = logger or _logger

    # --- lifecycle ---

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def close(self):
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        # aiohttp sessions have to be created inside a running event loop.
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    # --- helpers ---

    def _build_headers(
        self, descriptor: RequestDescriptor
    ) -> t.Tuple[t.Dict[str, str], t.Optional[str]]:
        """Computes headers for a single attempt.

        Returns:
            the headers, and the bearer token they carry (if any).
        """
        headers: t.Dict[str, str] = {}

        token = self._credentials.token if descriptor.authenticate else None
        if token:
            headers["Authorization"] = f"Bearer {token}"

        organization = self._credentials.organization
        if organization:
            headers[ORGANIZATION_HEADER] = organization

        headers.update(descriptor.headers)
        if not any(name.lower() == "content-type" for name in headers):
            headers["Content-Type"] = DEFAULT_CONTENT_TYPE

        return headers, token

    async def _attempt(
        self, descriptor: RequestDescriptor, headers: t.Mapping[str, str]
    ) -> t.Any:
        """Makes a single HTTP request.

        Raises:
            envase.sdk.exceptions.EnvaseError: one of the subclasses, depending on
                the response status or transport failure.
        """
        data: t.Optional[str] = None
        if descriptor.body is not None:
            try:
                data = json.dumps(descriptor.body)
            except (TypeError, ValueError) as e:
                raise exceptions.EnvaseError(
                    "Request body is not JSON-serializable", code="INVALID_REQUEST"
                ) from e

        session = self._get_session()
        try:
            async with session.request(
                descriptor.method,
                self._base_url + descriptor.path,
                params=encode_query(descriptor.query),
                data=data,
                headers=headers,
                timeout=self._timeout,
            ) as response:
                raw = await response.read()
                status = response.status
                reason = response.reason
        except asyncio.TimeoutError as e:
            raise exceptions.NetworkError(
                f"Request timed out after {self._timeout_s}s", 0
            ) from e
        except aiohttp.ClientError as e:
            raise exceptions.NetworkError(str(e) or type(e).__name__, 0) from e
        except ValueError as e:
            # aiohttp rejects header values with control characters before sending.
            raise exceptions.EnvaseError(
                f"Couldn't build the request: {e}", code="INVALID_REQUEST"
            ) from e

        if status >= 400:
            raise _map_http_error(status, reason, raw)

        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise exceptions.EnvaseError(
                "Couldn't parse the response as JSON",
                code="INVALID_RESPONSE",
                status_code=status,
            ) from e

    async def _renew_token(self, token_used: t.Optional[str]):
        """Asks the unauthorized handler for a new token.

        Skipped if another request has already rotated the token that was rejected.

        Raises:
            envase.sdk.exceptions.AuthenticationError: if the handler fails, whatever
                the underlying cause.
        """
        current = self._credentials.token
        if current and current != token_used:
            return

        assert self._unauthorized_handler is not None
        try:
            new_token = await self._unauthorized_handler()
        except exceptions.AuthenticationError:
            raise
        except exceptions.EnvaseError as e:
            raise exceptions.AuthenticationError(e.message, e.code) from e
        except Exception as e:
            raise exceptions.AuthenticationError(str(e) or None) from e

        if new_token:
            self._credentials.token = new_token

    # --- queries ---

    async def send(self, descriptor: RequestDescriptor) -> t.Any:
        """Sends a request, retrying and re-authenticating as needed.

        Transient failures (no response, HTTP 429, HTTP 5xx) are retried up to
        ``retry_policy.max_retries`` times. An HTTP 401 on the first attempt is
        handed to the unauthorized handler, and the request is replayed once with
        the new token. This replay doesn't count against the retry budget.

        Returns:
            the decoded JSON body, or ``None`` if the response had no body.

        Raises:
            envase.sdk.exceptions.AuthenticationError: HTTP 401 that couldn't be
                recovered from.
            envase.sdk.exceptions.AuthorizationError: HTTP 403.
            envase.sdk.exceptions.ValidationError: HTTP 422.
            envase.sdk.exceptions.NetworkError: any other HTTP error or transport
                failure, after retries were exhausted.
        """
        attempt = 0
        retries = 0
        while True:
            headers, token_used = self._build_headers(descriptor)
            self._logger.debug(
                "[Envase SDK] Request %s %s (attempt %d)",
                descriptor.method,
                descriptor.path,
                attempt + 1,
            )
            try:
                return await self._attempt(descriptor, headers)
            except exceptions.AuthenticationError:
                if (
                    attempt > 0
                    or not descriptor.authenticate
                    or self._unauthorized_handler is None
                ):
                    raise
                await self._renew_token(token_used)
            except exceptions.EnvaseError as e:
                if not self._retry_policy.should_retry(e, retries):
                    raise
                retries += 1
                delay = self._retry_policy.delay_for(retries)
                self._logger.debug(
                    "[Envase SDK] %s %s failed with %r, retrying in %.3fs",
                    descriptor.method,
                    descriptor.path,
                    e,
                    delay,
                )
                await asyncio.sleep(delay)
            attempt += 1

    async def request(
        self,
        method: str,
        path: str,
        body: t.Any = None,
        query: t.Optional[t.Mapping[str, QueryValue]] = None,
        headers: t.Optional[t.Mapping[str, str]] = None,
    ) -> t.Any:
        """Shorthand for ``send(RequestDescriptor(...))``."""
        return await self.send(
            RequestDescriptor(
                method=method,
                path=path,
                query=query,
                body=body,
                headers=headers or {},
            )
        )

    async def get(
        self, path: str, query: t.Optional[t.Mapping[str, QueryValue]] = None
    ) -> t.Any:
        return await self.request("GET", path, query=query)

    async def post(
        self,
        path: str,
        body: t.Any = None,
        query: t.Optional[t.Mapping[str, QueryValue]] = None,
    ) -> t.Any:
        return await self.request("POST", path, body=body, query=query)

    async def put(
        self,
        path: str,
        body: t.Any = None,
        query: t.Optional[t.Mapping[str, QueryValue]] = None,
    ) -> t.Any:
        return await self.request("PUT", path, body=body, query=query)

    async def patch(
        self,
        path: str,
        body: t.Any = None,
        query: t.Optional[t.Mapping[str, QueryValue]] = None,
    ) -> t.Any:
        return await self.request("PATCH", path, body=body, query=query)

    async def delete(
        self, path: str, query: t.Optional[t.Mapping[str, QueryValue]] = None
    ) -> t.Any:
        return await self.request("DELETE", path, query=query)
