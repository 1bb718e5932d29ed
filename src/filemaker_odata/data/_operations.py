# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Write operations that can be sent inside a ``$batch`` changeset.

The set of operations is closed: :class:`CreateOperation`, :class:`UpdateOperation`
and :class:`DeleteOperation`. Each one renders itself as one ``application/http``
MIME part of the request and parses the matching part of the response.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..common.constants import CONTENT_TYPE_HTTP, CONTENT_TYPE_JSON, CRLF, IDENTITY_FIELD
from ..core._error_codes import PROTOCOL_STATUS_MISSING, VALIDATION_IDENTITY_MISSING
from ..core.config import ConnectionInfo
from ..core.errors import OperationError, ProtocolError, ValidationError
from ..core.results import OperationResult

_STATUS_RE = re.compile(r"HTTP/1\.1\s+(\d+)\s")


@dataclass(frozen=True)
class ChangeContext:
    """
    Position of an operation inside a changeset.

    :param boundary: Changeset boundary token.
    :type boundary: str
    :param change_id: 1-based sequence number, sent as ``Content-ID``.
    :type change_id: int
    """

    boundary: str
    change_id: int


def _escape_key(value: Any) -> str:
    """Escape single quotes for OData key literals (by doubling them)."""
    return str(value).replace("'", "''")


def _freeze(record: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(record))


def _to_json(record: Mapping[str, Any]) -> str:
    return json.dumps(dict(record), separators=(",", ":"), ensure_ascii=False)


def _part_header(context: ChangeContext) -> str:
    return (
        f"--{context.boundary}{CRLF}"
        f"Content-Type: {CONTENT_TYPE_HTTP}{CRLF}"
        f"Content-ID: {context.change_id}{CRLF}{CRLF}"
    )


def _json_request(method: str, url: str, payload: str) -> str:
    return (
        f"{method} {url} HTTP/1.1{CRLF}"
        f"Content-Type: {CONTENT_TYPE_JSON}{CRLF}"
        f"Content-Length: {len(payload.encode('utf-8'))}{CRLF}{CRLF}"
        f"{payload}{CRLF}"
    )


def _status_code(part: str) -> int:
    m = _STATUS_RE.search(part)
    if m is None:
        raise ProtocolError("Could not find status in response", subcode=PROTOCOL_STATUS_MISSING)
    return int(m.group(1))


def _json_body(part: str) -> Optional[Any]:
    """Decode the first JSON object found in a response part, if any."""
    start = part.find("{")
    if start < 0:
        return None
    try:
        value, _ = json.JSONDecoder().raw_decode(part[start:].strip())
    except ValueError:
        return None
    return value


def _raise_for_status(kind: str, table: str, status: int, part: str) -> None:
    if status < 300:
        return
    envelope = _json_body(part)
    error = envelope.get("error") if isinstance(envelope, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    raise OperationError(
        kind,
        table,
        message if message is not None else f"HTTP {status}",
        status_code=status,
        details={"error": error} if error is not None else {},
    )


@dataclass(frozen=True)
class CreateOperation:
    """
    Insert a new record.

    :param connection: Database the operation targets.
    :type connection: ~filemaker_odata.core.config.ConnectionInfo
    :param table: Table name.
    :type table: str
    :param record: Field values of the new record.
    :type record: dict
    """

    connection: ConnectionInfo
    table: str
    record: Mapping[str, Any]

    kind = "CREATE"

    def __post_init__(self) -> None:
        object.__setattr__(self, "record", _freeze(self.record))

    def render(self, context: ChangeContext) -> str:
        return _part_header(context) + _json_request("POST", self.connection.url(self.table), _to_json(self.record))

    def parse(self, part: str) -> OperationResult:
        status = _status_code(part)
        _raise_for_status(self.kind, self.table, status, part)
        return OperationResult(status, None)


@dataclass(frozen=True)
class UpdateOperation:
    """
    Patch an existing record.

    ``record`` must contain the ``ID`` field; it addresses the record in the URL and is
    left out of the request body. The server echoes the updated record, which becomes
    the result body.

    :raises ValidationError: If ``record`` has no ``ID``.
    """

    connection: ConnectionInfo
    table: str
    record: Mapping[str, Any]

    kind = "UPDATE"

    def __post_init__(self) -> None:
        object.__setattr__(self, "record", _freeze(self.record))
        if IDENTITY_FIELD not in self.record:
            raise ValidationError(
                f"Update on {self.table!r} requires the {IDENTITY_FIELD!r} field",
                subcode=VALIDATION_IDENTITY_MISSING,
            )

    @property
    def id(self) -> Any:
        return self.record[IDENTITY_FIELD]

    def changes(self) -> Dict[str, Any]:
        return {k: v for k, v in self.record.items() if k != IDENTITY_FIELD}

    def render(self, context: ChangeContext) -> str:
        url = f"{self.connection.url(self.table)}('{_escape_key(self.id)}')"
        return _part_header(context) + _json_request("PATCH", url, _to_json(self.changes()))

    def parse(self, part: str) -> OperationResult:
        status = _status_code(part)
        _raise_for_status(self.kind, self.table, status, part)
        return OperationResult(status, _json_body(part))


@dataclass(frozen=True)
class DeleteOperation:
    """Delete the record of ``table`` whose ``ID`` is ``id``."""

    connection: ConnectionInfo
    table: str
    id: str

    kind = "DELETE"

    def render(self, context: ChangeContext) -> str:
        url = f"{self.connection.url(self.table)}('{_escape_key(self.id)}')"
        return _part_header(context) + f"DELETE {url} HTTP/1.1{CRLF}{CRLF}{CRLF}"

    def parse(self, part: str) -> OperationResult:
        status = _status_code(part)
        _raise_for_status(self.kind, self.table, status, part)
        return OperationResult(status, None)


BatchOperation = Union[CreateOperation, UpdateOperation, DeleteOperation]
OPERATION_TYPES: Tuple[type, ...] = (CreateOperation, UpdateOperation, DeleteOperation)

__all__ = [
    "ChangeContext",
    "CreateOperation",
    "UpdateOperation",
    "DeleteOperation",
    "BatchOperation",
    "OPERATION_TYPES",
]
