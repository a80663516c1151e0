################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Code for 'envase login'.
"""
import typing as t

from ... import exceptions
from ...schema.configs import Profile, ProfileName
from . import _repos
from ._ui import _presenters


class Action:
    """
    Encapsulates app-related logic for handling ``envase login``.

    Verifies the token against the server before saving it, so a typo doesn't
    end up in the config file.
    """

    def __init__(
        self,
        presenter=_presenters.LoginPresenter(),
        error_presenter=_presenters.ErrorPresenter(),
        profile_repo: t.Optional[_repos.ProfileRepo] = None,
    ):
        # data sources
        self._profile_repo = profile_repo or _repos.ProfileRepo()

        # text IO
        self._presenter = presenter
        self._error_presenter = error_presenter

    def on_cmd_call(self, *args, **kwargs):
        try:
            self._on_cmd_call_with_exceptions(*args, **kwargs)
        except Exception as e:
            self._error_presenter.show_error(e)

    def _on_cmd_call_with_exceptions(
        self,
        api_url: str,
        token: str,
        refresh_token: t.Optional[str],
        organization: t.Optional[str],
        profile: ProfileName,
        make_default: bool,
    ):
        if not self._profile_repo.verify_token(api_url, token, organization):
            raise exceptions.AuthenticationError(
                f"The token was rejected by {api_url}"
            )

        new_profile = Profile(
            api_url=api_url,
            token=token,
            refresh_token=refresh_token,
            organization=organization,
        )
        self._profile_repo.save_profile(profile, new_profile, make_default)

        self._presenter.show_profile_saved(profile, new_profile)
