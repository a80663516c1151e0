################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
import typing as t
from datetime import datetime

import pydantic

ProjectId = str
OrganizationId = str


class Project(pydantic.BaseModel):
    id: ProjectId
    name: str = pydantic.Field(min_length=1)
    description: t.Optional[str] = None
    organizationId: OrganizationId
    slug: str = pydantic.Field(min_length=1)
    archivedAt: t.Optional[datetime] = None
    createdAt: datetime
    updatedAt: datetime


class CreateProject(pydantic.BaseModel):
    name: str = pydantic.Field(min_length=1)
    description: t.Optional[str] = None
    organization: str = pydantic.Field(min_length=1)


class UpdateProject(pydantic.BaseModel):
    name: t.Optional[str] = pydantic.Field(default=None, min_length=1)
    description: t.Optional[str] = None
