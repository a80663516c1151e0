################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
import typing as t
from datetime import datetime

import pydantic

from .environments import EnvironmentId
from .projects import ProjectId

SecretId = str
SecretKey = str
FolderId = str
SecretScope = t.Literal["project", "environment"]


class Secret(pydantic.BaseModel):
    """
    A secret as returned by the API. ``value`` is optional because list endpoints
    may omit it.
    """

    id: SecretId
    projectId: ProjectId
    key: SecretKey = pydantic.Field(min_length=1)
    value: t.Optional[str] = None
    description: t.Optional[str] = None
    scope: SecretScope
    environmentId: t.Optional[EnvironmentId] = None
    folderId: t.Optional[FolderId] = None
    version: int = pydantic.Field(gt=0)
    createdBy: str
    createdAt: datetime
    updatedAt: datetime
    deletedAt: t.Optional[datetime] = None


class CreateSecret(pydantic.BaseModel):
    key: SecretKey = pydantic.Field(min_length=1)
    value: str = pydantic.Field(min_length=1)
    description: t.Optional[str] = None
    scope: SecretScope
    environmentId: t.Optional[EnvironmentId] = None
    folderId: t.Optional[FolderId] = None


class UpdateSecret(pydantic.BaseModel):
    value: t.Optional[str] = pydantic.Field(default=None, min_length=1)
    description: t.Optional[str] = None
    folderId: t.Optional[FolderId] = None
