################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Code for 'envase env list'.
"""
import typing as t

from ....schema.configs import ProfileName
from ....schema.projects import ProjectId
from .. import _repos
from .._ui import _presenters


class Action:
    def __init__(
        self,
        presenter=_presenters.EnvironmentPresenter(),
        error_presenter=_presenters.ErrorPresenter(),
        env_repo: t.Optional[_repos.EnvironmentRepo] = None,
    ):
        self._env_repo = env_repo or _repos.EnvironmentRepo()
        self._presenter = presenter
        self._error_presenter = error_presenter

    def on_cmd_call(self, *args, **kwargs):
        try:
            self._on_cmd_call_with_exceptions(*args, **kwargs)
        except Exception as e:
            self._error_presenter.show_error(e)

    def _on_cmd_call_with_exceptions(
        self, project_id: ProjectId, profile: t.Optional[ProfileName]
    ):
        environments = self._env_repo.list_environments(profile, project_id)
        self._presenter.show_environments(environments)
