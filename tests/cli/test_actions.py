################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Unit tests for the CLI actions. Repos and presenters are mocked.

Test boundary: [Action] -> [repo]
                        -> [presenter]
"""
from unittest.mock import Mock, create_autospec

import pytest

from envase.sdk import exceptions
from envase.sdk._base.cli import _keygen, _login, _repos
from envase.sdk._base.cli._env import _list as _env_list
from envase.sdk._base.cli._project import _list as _project_list
from envase.sdk._base.cli._secret import _delete, _get, _set
from envase.sdk._base.cli._secret import _list as _secret_list
from envase.sdk.schema.configs import Profile

URL = "https://envase.example.com"


class TestLogin:
    @staticmethod
    def test_saves_verified_token():
        # Given
        presenter = Mock()
        error_presenter = Mock()
        profile_repo = create_autospec(_repos.ProfileRepo)
        profile_repo.verify_token.return_value = True

        action = _login.Action(
            presenter=presenter,
            error_presenter=error_presenter,
            profile_repo=profile_repo,
        )

        # When
        action.on_cmd_call(URL, "tok", "ref", "org-1", "staging", True)

        # Then
        expected = Profile(
            api_url=URL, token="tok", refresh_token="ref", organization="org-1"
        )
        profile_repo.verify_token.assert_called_once_with(URL, "tok", "org-1")
        profile_repo.save_profile.assert_called_once_with("staging", expected, True)
        presenter.show_profile_saved.assert_called_once_with("staging", expected)
        error_presenter.show_error.assert_not_called()

    @staticmethod
    def test_rejected_token_isnt_saved():
        presenter = Mock()
        error_presenter = Mock()
        profile_repo = create_autospec(_repos.ProfileRepo)
        profile_repo.verify_token.return_value = False

        action = _login.Action(
            presenter=presenter,
            error_presenter=error_presenter,
            profile_repo=profile_repo,
        )

        action.on_cmd_call(URL, "tok", None, None, "default", False)

        profile_repo.save_profile.assert_not_called()
        presenter.show_profile_saved.assert_not_called()
        (error,) = error_presenter.show_error.call_args.args
        assert isinstance(error, exceptions.AuthenticationError)
        assert URL in error.message


class TestKeygen:
    @staticmethod
    def test_shows_valid_key():
        presenter = Mock()
        error_presenter = Mock()

        action = _keygen.Action(presenter=presenter, error_presenter=error_presenter)

        action.on_cmd_call()

        (key,) = presenter.show_key.call_args.args
        assert len(key) == 64
        int(key, 16)
        error_presenter.show_error.assert_not_called()


class TestProjectList:
    @staticmethod
    def test_data_passing():
        presenter = Mock()
        error_presenter = Mock()
        project_repo = create_autospec(_repos.ProjectRepo)
        project_repo.list_projects.return_value = ["<project sentinel>"]

        action = _project_list.Action(
            presenter=presenter,
            error_presenter=error_presenter,
            project_repo=project_repo,
        )

        action.on_cmd_call("staging")

        project_repo.list_projects.assert_called_once_with("staging")
        presenter.show_projects.assert_called_once_with(["<project sentinel>"])

    @staticmethod
    def test_errors_go_to_error_presenter():
        error = exceptions.NetworkError("Connection refused")
        error_presenter = Mock()
        project_repo = create_autospec(_repos.ProjectRepo)
        project_repo.list_projects.side_effect = error

        action = _project_list.Action(
            presenter=Mock(),
            error_presenter=error_presenter,
            project_repo=project_repo,
        )

        action.on_cmd_call(None)

        error_presenter.show_error.assert_called_once_with(error)


class TestEnvList:
    @staticmethod
    def test_data_passing():
        presenter = Mock()
        env_repo = create_autospec(_repos.EnvironmentRepo)
        env_repo.list_environments.return_value = ["<env sentinel>"]

        action = _env_list.Action(
            presenter=presenter, error_presenter=Mock(), env_repo=env_repo
        )

        action.on_cmd_call("proj-1", None)

        env_repo.list_environments.assert_called_once_with(None, "proj-1")
        presenter.show_environments.assert_called_once_with(["<env sentinel>"])


class TestSecretActions:
    @pytest.fixture
    def secret_repo(self):
        return create_autospec(_repos.SecretRepo)

    @pytest.fixture
    def presenter(self):
        return Mock()

    @pytest.fixture
    def error_presenter(self):
        return Mock()

    def test_list(self, secret_repo, presenter, error_presenter):
        secret_repo.list_secrets.return_value = ["<secret sentinel>"]
        action = _secret_list.Action(
            presenter=presenter,
            error_presenter=error_presenter,
            secret_repo=secret_repo,
        )

        action.on_cmd_call("proj-1", "env-1", "staging", "key")

        secret_repo.list_secrets.assert_called_once_with(
            "staging", "proj-1", "env-1", "key"
        )
        presenter.show_secrets.assert_called_once_with(["<secret sentinel>"])
        error_presenter.show_error.assert_not_called()

    def test_get(self, secret_repo, presenter, error_presenter):
        secret_repo.get_secret.return_value = "<secret sentinel>"
        action = _get.Action(
            presenter=presenter,
            error_presenter=error_presenter,
            secret_repo=secret_repo,
        )

        action.on_cmd_call("proj-1", "DB_PASSWORD", None, None, "key")

        secret_repo.get_secret.assert_called_once_with(
            None, "proj-1", "DB_PASSWORD", None, "key"
        )
        presenter.show_value.assert_called_once_with("<secret sentinel>")

    def test_get_decryption_failure(self, secret_repo, presenter, error_presenter):
        error = exceptions.EncryptionError("Failed to decrypt data")
        secret_repo.get_secret.side_effect = error
        action = _get.Action(
            presenter=presenter,
            error_presenter=error_presenter,
            secret_repo=secret_repo,
        )

        action.on_cmd_call("proj-1", "DB_PASSWORD", None, None, "key")

        presenter.show_value.assert_not_called()
        error_presenter.show_error.assert_called_once_with(error)

    def test_set(self, secret_repo, presenter, error_presenter):
        secret_repo.set_secret.return_value = "<secret sentinel>"
        action = _set.Action(
            presenter=presenter,
            error_presenter=error_presenter,
            secret_repo=secret_repo,
        )

        action.on_cmd_call("proj-1", "DB_PASSWORD", "hunter2", None, None, None, False)

        secret_repo.set_secret.assert_called_once_with(
            None, "proj-1", "DB_PASSWORD", "hunter2", None, None, False
        )
        presenter.show_saved.assert_called_once_with("<secret sentinel>")

    def test_delete(self, secret_repo, presenter, error_presenter):
        action = _delete.Action(
            presenter=presenter,
            error_presenter=error_presenter,
            secret_repo=secret_repo,
        )

        action.on_cmd_call("proj-1", "DB_PASSWORD", "env-1", "prod")

        secret_repo.delete_secret.assert_called_once_with(
            "prod", "proj-1", "DB_PASSWORD", "env-1"
        )
        presenter.show_deleted.assert_called_once_with("DB_PASSWORD")
