################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Code for 'envase keygen'.
"""
from .._crypto import EncryptionService
from ._ui import _presenters


class Action:
    def __init__(
        self,
        presenter=_presenters.KeyPresenter(),
        error_presenter=_presenters.ErrorPresenter(),
    ):
        self._presenter = presenter
        self._error_presenter = error_presenter

    def on_cmd_call(self):
        try:
            self._presenter.show_key(EncryptionService.generate_key())
        except Exception as e:
            self._error_presenter.show_error(e)
