################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""
Logging setup for the ``envase`` command.

The ``envase-sdk`` library only emits records. Handlers are attached here, and only
when the user asks for verbose output.
"""

import logging

from .. import _env

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Third-party loggers (aiohttp, asyncio) stay at WARNING.
SDK_LOGGER_NAME = "envase"


def configure_verboseness_if_needed():
    if not _env.flag_set(_env.ENVASE_VERBOSE):
        return

    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    logging.getLogger(SDK_LOGGER_NAME).setLevel(logging.DEBUG)
