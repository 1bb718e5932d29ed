# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
``$batch`` support: multipart encoding, decoding and execution.

A batch request wraps every operation in a single changeset so the server applies
them as one transaction::

    --batch_<token>
    Content-Type: multipart/mixed; boundary=changeset_<token>

    --changeset_<token>
    Content-Type: application/http
    Content-ID: 1

    POST https://<server>/fmi/odata/v4/<database>/<table> HTTP/1.1
    ...
    --changeset_<token>--
    --batch_<token>--

Details regarding batch requests and changesets:
http://docs.oasis-open.org/odata/odata/v4.01/odata-v4.01-part1-protocol.html#sec_BatchRequests
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ..common.constants import (
    BATCH_BOUNDARY_PREFIX,
    BATCH_PATH,
    CHANGESET_BOUNDARY_PREFIX,
    CRLF,
)
from ..core._error_codes import (
    PROTOCOL_BOUNDARY_MISSING,
    PROTOCOL_CONTENT_ID_MISMATCH,
    PROTOCOL_PART_COUNT_MISMATCH,
)
from ..core.config import ConnectionInfo
from ..core.errors import ProtocolError, RequestError
from ..core.request import Transport
from ..core.results import OperationResult
from ._operations import OPERATION_TYPES, BatchOperation, ChangeContext

_logger = logging.getLogger(__name__)

_BOUNDARY_RE = re.compile(r"boundary=(.+?)\r\n")
_CONTENT_ID_RE = re.compile(r"^Content-ID:\s*(\S+)\s*$", re.IGNORECASE | re.MULTILINE)

TokenFactory = Callable[[], str]


def new_boundary_token() -> str:
    """Return a fresh random token for a multipart boundary."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class BatchEnvelope:
    """
    An encoded ``$batch`` request body.

    :param batch_boundary: Boundary of the outer batch, announced in the request header.
    :type batch_boundary: str
    :param changeset_boundary: Boundary of the inner changeset.
    :type changeset_boundary: str
    :param body: The multipart body, CRLF line endings throughout.
    :type body: str
    """

    batch_boundary: str
    changeset_boundary: str
    body: str

    @property
    def content_type(self) -> str:
        return f"multipart/mixed; boundary={self.batch_boundary}"


class BatchCodec:
    """
    Encodes operations into a multipart ``$batch`` body and decodes the response.

    :param token_factory: Callable returning a new random token on each call. Tokens are
        prefixed with ``batch_`` / ``changeset_``. Inject a deterministic factory to
        assert exact wire bytes in tests.
    :type token_factory: Callable[[], str]
    """

    def __init__(self, token_factory: TokenFactory = new_boundary_token) -> None:
        self._token_factory = token_factory

    def encode(self, operations: Sequence[BatchOperation]) -> BatchEnvelope:
        """
        Encode ``operations`` as one changeset inside a batch.

        :param operations: Operations in execution order.
        :type operations: Sequence[BatchOperation]
        :return: The envelope with freshly generated boundaries.
        :rtype: BatchEnvelope
        :raises TypeError: If an item is not a batch operation.
        """
        for op in operations:
            if not isinstance(op, OPERATION_TYPES):
                raise TypeError(f"Unsupported batch operation: {type(op).__name__}")

        batch_boundary = f"{BATCH_BOUNDARY_PREFIX}{self._token_factory()}"
        changeset_boundary = f"{CHANGESET_BOUNDARY_PREFIX}{self._token_factory()}"

        parts = "".join(
            op.render(ChangeContext(boundary=changeset_boundary, change_id=index))
            for index, op in enumerate(operations, start=1)
        )
        body = (
            f"--{batch_boundary}{CRLF}"
            f"Content-Type: multipart/mixed; boundary={changeset_boundary}{CRLF}{CRLF}"
            f"{parts}"
            f"--{changeset_boundary}--{CRLF}"
            f"--{batch_boundary}--{CRLF}"
        )
        return BatchEnvelope(batch_boundary=batch_boundary, changeset_boundary=changeset_boundary, body=body)

    @staticmethod
    def _changeset_boundary(body: str) -> str:
        m = _BOUNDARY_RE.search(body)
        if m is None:
            raise ProtocolError("Could not find changeset", subcode=PROTOCOL_BOUNDARY_MISSING)
        return m.group(1).strip().strip('"')

    @staticmethod
    def _content_id(segment: str) -> Optional[str]:
        headers = segment.lstrip(CRLF).split(CRLF + CRLF, 1)[0]
        m = _CONTENT_ID_RE.search(headers)
        return m.group(1) if m else None

    def decode(self, operations: Sequence[BatchOperation], body: str) -> List[OperationResult]:
        """
        Decode a ``$batch`` response body.

        The response segment at position *i* is attributed to ``operations[i]``. When a
        segment carries a ``Content-ID`` it must equal its 1-based position.

        :param operations: The operations that were encoded for this request.
        :type operations: Sequence[BatchOperation]
        :param body: Raw multipart response body.
        :type body: str
        :return: One result per operation, in order.
        :rtype: list[OperationResult]
        :raises ProtocolError: If the body is not a well-formed changeset response.
        :raises OperationError: If an operation was rejected; later parts are not processed.
        """
        boundary = self._changeset_boundary(body)
        segments = body.split(f"--{boundary}")[1:-1]
        if len(segments) > len(operations):
            raise ProtocolError(
                f"Batch response has {len(segments)} parts for {len(operations)} operations",
                subcode=PROTOCOL_PART_COUNT_MISMATCH,
            )

        results: List[OperationResult] = []
        for position, (segment, op) in enumerate(zip(segments, operations), start=1):
            content_id = self._content_id(segment)
            if content_id is not None and content_id != str(position):
                raise ProtocolError(
                    f"Batch response part {position} has Content-ID {content_id}",
                    subcode=PROTOCOL_CONTENT_ID_MISMATCH,
                    details={"position": position, "content_id": content_id},
                )
            results.append(op.parse(segment))

        if len(results) != len(operations):
            raise ProtocolError(
                f"Batch response has {len(results)} parts for {len(operations)} operations",
                subcode=PROTOCOL_PART_COUNT_MISMATCH,
            )
        return results


class BatchExecutor:
    """
    Sends a list of operations as a single transactional ``$batch`` request.

    :param transport: HTTP transport used for the single POST.
    :type transport: ~filemaker_odata.core.request.Transport
    :param connection: Database the batch is sent to.
    :type connection: ~filemaker_odata.core.config.ConnectionInfo
    :param codec: Multipart codec. A default one is created when omitted.
    :type codec: BatchCodec | None
    :param logger: Logger for diagnostics. Defaults to this module's logger.
    :type logger: logging.Logger | None
    """

    def __init__(
        self,
        transport: Transport,
        connection: ConnectionInfo,
        codec: Optional[BatchCodec] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._transport = transport
        self._connection = connection
        self._codec = codec or BatchCodec()
        self._logger = logger or _logger

    def execute(self, operations: Sequence[BatchOperation]) -> List[OperationResult]:
        """
        Execute ``operations`` transactionally: either all succeed or none does.

        :param operations: Operations in execution order.
        :type operations: Sequence[BatchOperation]
        :return: One result per operation, in order.
        :rtype: list[OperationResult]
        :raises RequestError: If the HTTP request fails.
        :raises ProtocolError: If the response cannot be decoded.
        :raises OperationError: If the server rejected one of the operations. No partial
            results are returned.
        """
        ops: Tuple[BatchOperation, ...] = tuple(operations)
        envelope = self._codec.encode(ops)
        url = self._connection.url(BATCH_PATH)
        self._logger.debug("Sending batch of %d operation(s) to %s", len(ops), url)

        try:
            response = self._transport.post(
                url,
                envelope.body,
                headers={"Content-Type": envelope.content_type},
                response_type="text",
            )
        except RequestError as exc:
            self._logger.warning("Batch request failed: %s", exc.data)
            raise

        return self._codec.decode(ops, response.data)


__all__ = ["BatchCodec", "BatchEnvelope", "BatchExecutor", "new_boundary_token"]
