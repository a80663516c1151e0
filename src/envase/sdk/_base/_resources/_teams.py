################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
import typing as t

from ...schema.projects import ProjectId
from ...schema.responses import ApiResponse, PaginatedResponse
from ...schema.teams import (
    InviteMember,
    MemberRole,
    MemberStatus,
    TeamMember,
    UpdateMemberRole,
    UserId,
)
from .._http import ApiClient
from ._common import (
    dump_payload,
    parse_response,
    path_segment,
    require_data,
    validate_payload,
)


def _members_path(project_id: ProjectId) -> str:
    return f"/api/projects/{path_segment(project_id)}/members"


def _member_path(project_id: ProjectId, user_id: UserId) -> str:
    return f"{_members_path(project_id)}/{path_segment(user_id)}"


class TeamsResource:
    """Members of a project and invitations to join it."""

    def __init__(self, api: ApiClient):
        self._api = api

    async def list(
        self,
        project_id: ProjectId,
        page: t.Optional[int] = None,
        limit: t.Optional[int] = None,
        search: t.Optional[str] = None,
        role: t.Optional[MemberRole] = None,
        status: t.Optional[MemberStatus] = None,
    ) -> t.List[TeamMember]:
        body = await self._api.get(
            _members_path(project_id),
            query={
                "page": page,
                "limit": limit,
                "search": search,
                "role": role,
                "status": status,
            },
        )
        return parse_response(PaginatedResponse[TeamMember], body).data

    async def get(self, project_id: ProjectId, user_id: UserId) -> TeamMember:
        body = await self._api.get(_member_path(project_id, user_id))
        return require_data(
            parse_response(ApiResponse[TeamMember], body).data,
            "Team member not found",
            "TEAM_MEMBER_NOT_FOUND",
        )

    async def invite(
        self,
        project_id: ProjectId,
        data: t.Union[InviteMember, t.Mapping[str, t.Any]],
    ):
        payload = validate_payload(InviteMember, data)
        await self._api.post(
            f"/api/projects/{path_segment(project_id)}/invitations",
            dump_payload(payload),
        )

    async def update_role(
        self,
        project_id: ProjectId,
        user_id: UserId,
        data: t.Union[UpdateMemberRole, t.Mapping[str, t.Any]],
    ) -> TeamMember:
        payload = validate_payload(UpdateMemberRole, data)
        body = await self._api.put(
            _member_path(project_id, user_id), dump_payload(payload)
        )
        return require_data(
            parse_response(ApiResponse[TeamMember], body).data,
            "Failed to update member",
            "TEAM_MEMBER_UPDATE_FAILED",
        )

    async def remove(self, project_id: ProjectId, user_id: UserId):
        await self._api.delete(_member_path(project_id, user_id))
