################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Code for 'envase secret set'.
"""
import typing as t

from ....schema.configs import ProfileName
from ....schema.projects import ProjectId
from .. import _repos
from .._ui import _presenters


class Action:
    def __init__(
        self,
        presenter=_presenters.SecretPresenter(),
        error_presenter=_presenters.ErrorPresenter(),
        secret_repo: t.Optional[_repos.SecretRepo] = None,
    ):
        self._secret_repo = secret_repo or _repos.SecretRepo()
        self._presenter = presenter
        self._error_presenter = error_presenter

    def on_cmd_call(self, *args, **kwargs):
        try:
            self._on_cmd_call_with_exceptions(*args, **kwargs)
        except Exception as e:
            self._error_presenter.show_error(e)

    def _on_cmd_call_with_exceptions(
        self,
        project_id: ProjectId,
        key: str,
        value: str,
        environment_id: t.Optional[str],
        profile: t.Optional[ProfileName],
        encryption_key: t.Optional[str],
        encrypt: bool,
    ):
        secret = self._secret_repo.set_secret(
            profile,
            project_id,
            key,
            value,
            environment_id,
            encryption_key,
            encrypt,
        )
        self._presenter.show_saved(secret)
