################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
import typing as t
from datetime import datetime

import pydantic

from .projects import ProjectId

EnvironmentId = str


class Environment(pydantic.BaseModel):
    id: EnvironmentId
    projectId: ProjectId
    name: str = pydantic.Field(min_length=1)
    slug: str = pydantic.Field(min_length=1)
    protected: bool = False
    createdAt: datetime
    updatedAt: datetime


class CreateEnvironment(pydantic.BaseModel):
    name: str = pydantic.Field(min_length=1)
    slug: str = pydantic.Field(min_length=1)
    protected: bool = False


class UpdateEnvironment(pydantic.BaseModel):
    name: t.Optional[str] = pydantic.Field(default=None, min_length=1)
    slug: t.Optional[str] = pydantic.Field(default=None, min_length=1)
    protected: t.Optional[bool] = None
