################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Code for 'envase project list'.
"""
import typing as t

from ....schema.configs import ProfileName
from .. import _repos
from .._ui import _presenters


class Action:
    def __init__(
        self,
        presenter=_presenters.ProjectPresenter(),
        error_presenter=_presenters.ErrorPresenter(),
        project_repo: t.Optional[_repos.ProjectRepo] = None,
    ):
        self._project_repo = project_repo or _repos.ProjectRepo()
        self._presenter = presenter
        self._error_presenter = error_presenter

    def on_cmd_call(self, *args, **kwargs):
        try:
            self._on_cmd_call_with_exceptions(*args, **kwargs)
        except Exception as e:
            self._error_presenter.show_error(e)

    def _on_cmd_call_with_exceptions(self, profile: t.Optional[ProfileName]):
        projects = self._project_repo.list_projects(profile)
        self._presenter.show_projects(projects)
