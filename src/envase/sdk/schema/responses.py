################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Envelopes shared by every Envase API endpoint.

Field names follow the API's camelCase spelling.
"""
import typing as t

import pydantic

DataT = t.TypeVar("DataT")

ExtraFactor = t.Literal["mfa", "jit"]


class ApiResponse(pydantic.BaseModel, t.Generic[DataT]):
    """
    Implements the standard envelope::

        {"success": bool, "data": T, "error": str, "code": str, "requires": [...]}
    """

    success: bool = True
    data: t.Optional[DataT] = None
    error: t.Optional[str] = None
    code: t.Optional[str] = None
    requires: t.Optional[t.List[ExtraFactor]] = None


class Pagination(pydantic.BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class PaginatedResponse(pydantic.BaseModel, t.Generic[DataT]):
    """
    Envelope used by list endpoints that page their results.
    """

    data: t.List[DataT] = []
    pagination: t.Optional[Pagination] = None


class ValidationErrorDetail(pydantic.BaseModel):
    """One field-level problem reported with an HTTP 422 response."""

    field: str
    message: str
    code: str


class TokenPair(pydantic.BaseModel):
    """Payload of ``POST /api/auth/refresh``."""

    token: str = pydantic.Field(min_length=1)
    refreshToken: t.Optional[str] = None


class TokenVerification(pydantic.BaseModel):
    """Payload of ``GET /api/auth/verify``."""

    valid: bool
