################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""Helpers shared by the resource modules."""
import typing as t
from urllib.parse import quote

import pydantic

from ... import exceptions
from ...schema.responses import ValidationErrorDetail

ModelT = t.TypeVar("ModelT", bound=pydantic.BaseModel)
DataT = t.TypeVar("DataT")


def path_segment(value: str) -> str:
    """Quotes a value so it's safe to embed in a URL path, slashes included."""
    return quote(value, safe="")


def to_validation_error(e: pydantic.ValidationError) -> exceptions.ValidationError:
    details = [
        ValidationErrorDetail(
            field=".".join(str(part) for part in error["loc"]),
            message=error["msg"],
            code=error["type"],
        )
        for error in e.errors()
    ]
    return exceptions.ValidationError("Invalid request payload", details)


def validate_payload(
    model: t.Type[ModelT], data: t.Union[ModelT, t.Mapping[str, t.Any]]
) -> ModelT:
    """Checks a request payload before it's sent.

    Raises:
        envase.sdk.exceptions.ValidationError: with one detail per invalid field.
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        raise to_validation_error(e) from e


def dump_payload(payload: pydantic.BaseModel) -> t.Dict[str, t.Any]:
    return payload.model_dump(mode="json", exclude_none=True)


def parse_response(model: t.Type[ModelT], body: t.Any) -> ModelT:
    """Parses an API envelope.

    Raises:
        envase.sdk.exceptions.EnvaseError: with code ``INVALID_RESPONSE`` if the body
            doesn't have the expected shape.
    """
    try:
        return model.model_validate(body)
    except pydantic.ValidationError as e:
        raise exceptions.EnvaseError(
            "Unexpected response from the API", code="INVALID_RESPONSE"
        ) from e


def require_data(data: t.Optional[DataT], message: str, code: str) -> DataT:
    if data is None:
        raise exceptions.EnvaseError(message, code=code)
    return data
