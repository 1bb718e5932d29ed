# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured exceptions raised by the FileMaker OData client.

- :class:`RequestError`: the HTTP request itself failed (network error or non-2xx status).
- :class:`ProtocolError`: a ``$batch`` response does not have the expected multipart shape.
- :class:`OperationError`: one operation inside a ``$batch`` changeset was rejected.
- :class:`ValidationError`: invalid input supplied by the caller.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Optional

from ._error_codes import http_subcode


class FileMakerError(Exception):
    """Base structured error for the FileMaker OData client."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class ValidationError(FileMakerError):
    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="validation_error", subcode=subcode, details=details, source="client")


class ProtocolError(FileMakerError):
    """The server response does not follow the multipart ``$batch`` grammar."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="protocol_error", subcode=subcode, details=details, source="server")


class RequestError(FileMakerError):
    """
    Raised by the transport when an HTTP request fails.

    :param message: Human readable description.
    :type message: :class:`str`
    :param data: Response body captured from the server, if any. Parsed JSON when the
        body was JSON, raw text otherwise.
    :param status_code: HTTP status of the failed response. ``None`` for network errors.
    :type status_code: :class:`int` | None
    """

    def __init__(
        self,
        message: str,
        *,
        data: Any = None,
        status_code: Optional[int] = None,
        subcode: Optional[str] = None,
        url: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        d = details or {}
        if url is not None:
            d["url"] = url
        super().__init__(
            message,
            code="http_error",
            subcode=subcode,
            status_code=status_code,
            details=d,
            source="server" if status_code is not None else "client",
        )
        self.data = data


class OperationError(FileMakerError):
    """
    Raised when a single operation of a ``$batch`` changeset is rejected by the server.

    The message reads ``[<KIND> OPERATION: <table>] <server message>``.

    :param kind: Operation kind, one of ``CREATE``, ``UPDATE`` or ``DELETE``.
    :type kind: :class:`str`
    :param table: Table the operation targeted.
    :type table: :class:`str`
    :param server_message: The ``error.message`` value returned by the server.
    :type server_message: :class:`str`
    """

    def __init__(
        self,
        kind: str,
        table: str,
        server_message: str,
        *,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            f"[{kind} OPERATION: {table}] {server_message}",
            code="operation_error",
            subcode=http_subcode(status_code) if status_code is not None else None,
            status_code=status_code,
            details=details,
            source="server",
        )
        self.kind = kind
        self.table = table
        self.server_message = server_message


__all__ = ["FileMakerError", "RequestError", "ProtocolError", "OperationError", "ValidationError"]
