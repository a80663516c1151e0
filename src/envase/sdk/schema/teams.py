################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
import typing as t
from datetime import datetime

import pydantic

from .projects import ProjectId

UserId = str
MemberRole = t.Literal["owner", "developer", "read_only"]
InvitableRole = t.Literal["developer", "read_only"]
MemberStatus = t.Literal["active", "pending", "inactive"]


class TeamMember(pydantic.BaseModel):
    id: str
    projectId: ProjectId
    userId: UserId
    email: str
    name: str = pydantic.Field(min_length=1)
    role: MemberRole
    status: MemberStatus
    invitedBy: t.Optional[UserId] = None
    invitedAt: t.Optional[datetime] = None
    joinedAt: t.Optional[datetime] = None
    lastActiveAt: t.Optional[datetime] = None
    createdAt: datetime
    updatedAt: datetime


class InviteMember(pydantic.BaseModel):
    email: str = pydantic.Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    role: InvitableRole
    message: t.Optional[str] = None


class UpdateMemberRole(pydantic.BaseModel):
    role: MemberRole
