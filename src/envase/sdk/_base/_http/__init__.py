################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
from ._client import ApiClient, UnauthorizedHandler
from ._models import Credentials, RequestDescriptor

__all__ = [
    "ApiClient",
    "Credentials",
    "RequestDescriptor",
    "UnauthorizedHandler",
]
