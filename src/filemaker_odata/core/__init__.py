# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the FileMaker OData client.

This module contains the foundational components including credentials,
configuration, HTTP transport, result types and error handling.
"""

from .config import ConnectionInfo, FileMakerConfig
from .credentials import (
    BasicCredentials,
    Credentials,
    NullCredentials,
    OAuthCredentials,
    RawCredentials,
    TokenCredentials,
)
from .errors import (
    FileMakerError,
    OperationError,
    ProtocolError,
    RequestError,
    ValidationError,
)
from .request import Request, Response, Transport
from .results import OperationResult, RecordsWithCount, ScriptResult

__all__ = [
    "ConnectionInfo",
    "FileMakerConfig",
    "Credentials",
    "NullCredentials",
    "BasicCredentials",
    "OAuthCredentials",
    "RawCredentials",
    "TokenCredentials",
    "FileMakerError",
    "RequestError",
    "ProtocolError",
    "OperationError",
    "ValidationError",
    "Request",
    "Response",
    "Transport",
    "OperationResult",
    "RecordsWithCount",
    "ScriptResult",
]
