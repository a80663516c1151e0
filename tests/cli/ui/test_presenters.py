################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
import sys
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from envase.sdk import exceptions
from envase.sdk._base.cli._ui import _presenters
from envase.sdk.schema.configs import Profile
from envase.sdk.schema.environments import Environment
from envase.sdk.schema.projects import Project
from envase.sdk.schema.secrets import Secret

UPDATED = datetime(2024, 1, 2, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def sys_exit_mock(monkeypatch):
    exit_mock = Mock()
    monkeypatch.setattr(sys, "exit", exit_mock)
    return exit_mock


def _secret(**overrides) -> Secret:
    fields = {
        "id": "sec-1",
        "projectId": "proj-1",
        "key": "DB_PASSWORD",
        "value": "hunter2",
        "scope": "project",
        "version": 3,
        "createdBy": "user-1",
        "createdAt": UPDATED,
        "updatedAt": UPDATED,
    }
    fields.update(overrides)
    return Secret(**fields)


class TestErrorPresenter:
    @staticmethod
    def test_exits_with_status_code(capsys, sys_exit_mock):
        _presenters.ErrorPresenter().show_error(
            exceptions.ProfileNotFoundError("staging")
        )

        assert "Profile 'staging' not found" in capsys.readouterr().out
        sys_exit_mock.assert_called_once_with(2)


class TestLoginPresenter:
    @staticmethod
    def test_show_profile_saved(capsys):
        profile = Profile(api_url="https://e.example.com", token="t")

        _presenters.LoginPresenter().show_profile_saved("staging", profile)

        out = capsys.readouterr().out
        assert "Token saved in profile 'staging'." in out
        assert "Profile for https://e.example.com:" in out
        assert "- token: set" in out
        assert "- refresh token: not set" in out
        # The token itself is never printed.
        assert "- token: t\n" not in out


class TestKeyPresenter:
    @staticmethod
    def test_key_on_stdout_warning_on_stderr(capsys):
        _presenters.KeyPresenter().show_key("ab" * 32)

        captured = capsys.readouterr()
        assert captured.out == "ab" * 32 + "\n"
        assert "Store this key safely" in captured.err


class TestProjectPresenter:
    @staticmethod
    def test_empty(capsys):
        _presenters.ProjectPresenter().show_projects([])

        assert capsys.readouterr().out == "No projects found.\n"

    @staticmethod
    def test_table(capsys):
        project = Project(
            id="proj-1",
            name="Billing",
            organizationId="org-1",
            slug="billing",
            createdAt=UPDATED,
            updatedAt=UPDATED,
        )

        _presenters.ProjectPresenter().show_projects([project])

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["ID", "name", "slug", "updated"]
        assert lines[2].split() == [
            "proj-1",
            "Billing",
            "billing",
            "2024-01-02T10:00:00+00:00",
        ]


class TestEnvironmentPresenter:
    @staticmethod
    def test_empty(capsys):
        _presenters.EnvironmentPresenter().show_environments([])

        assert capsys.readouterr().out == "No environments found.\n"

    @staticmethod
    def test_table(capsys):
        environments = [
            Environment(
                id=f"env-{i}",
                projectId="proj-1",
                name=name,
                slug=name.lower(),
                protected=protected,
                createdAt=UPDATED,
                updatedAt=UPDATED,
            )
            for i, (name, protected) in enumerate(
                [("Staging", False), ("Production", True)]
            )
        ]

        _presenters.EnvironmentPresenter().show_environments(environments)

        lines = capsys.readouterr().out.splitlines()
        assert lines[2].split() == ["env-0", "Staging", "staging", "no"]
        assert lines[3].split() == ["env-1", "Production", "production", "yes"]


class TestSecretPresenter:
    @staticmethod
    def test_empty(capsys):
        _presenters.SecretPresenter().show_secrets([])

        assert capsys.readouterr().out == "No secrets found.\n"

    @staticmethod
    def test_table_hides_values(capsys):
        secrets = [
            _secret(),
            _secret(
                id="sec-2",
                key="API_KEY",
                scope="environment",
                environmentId="env-1",
                version=1,
            ),
        ]

        _presenters.SecretPresenter().show_secrets(secrets)

        out = capsys.readouterr().out
        lines = out.splitlines()
        assert lines[0].split() == ["key", "scope", "environment", "version", "updated"]
        assert lines[2].split() == [
            "DB_PASSWORD",
            "project",
            "3",
            "2024-01-02T10:00:00+00:00",
        ]
        assert lines[3].split()[:3] == ["API_KEY", "environment", "env-1"]
        assert "hunter2" not in out

    @staticmethod
    def test_show_value(capsys):
        _presenters.SecretPresenter().show_value(_secret())

        assert capsys.readouterr().out == "hunter2\n"

    @staticmethod
    def test_show_value_missing(capsys):
        _presenters.SecretPresenter().show_value(_secret(value=None))

        assert capsys.readouterr().out == "\n"

    @staticmethod
    def test_show_saved(capsys):
        _presenters.SecretPresenter().show_saved(_secret())

        assert capsys.readouterr().out == "Saved secret 'DB_PASSWORD' (version 3).\n"

    @staticmethod
    def test_show_deleted(capsys):
        _presenters.SecretPresenter().show_deleted("DB_PASSWORD")

        assert capsys.readouterr().out == "Deleted secret 'DB_PASSWORD'.\n"
