################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
from ._environments import EnvironmentsResource
from ._projects import ProjectsResource
from ._secrets import SecretsResource
from ._teams import TeamsResource

__all__ = [
    "EnvironmentsResource",
    "ProjectsResource",
    "SecretsResource",
    "TeamsResource",
]
