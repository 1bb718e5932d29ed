# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Low-level FileMaker OData client.

:class:`_ODataClient` builds URLs, serializes query options, sends requests through
a :class:`~filemaker_odata.core.request.Transport` and unwraps OData payloads. The
public namespaces in :mod:`filemaker_odata.operations` delegate to it.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence
from urllib.parse import quote

import requests

from ..common.constants import ACCEPT_ATOM, CONTENT_TYPE_JSON
from ..core._http import _HttpClient
from ..core.config import ConnectionInfo, FileMakerConfig
from ..core.credentials import Credentials
from ..core.errors import RequestError
from ..core.request import Request, Transport
from ..core.results import OperationResult, RecordsWithCount, ScriptResult
from ..models.query import QueryOptions, serialize_query
from ._batch import BatchCodec, BatchExecutor
from ._operations import BatchOperation

_logger = logging.getLogger(__name__)


def _quote_segment(value: Any) -> str:
    """Percent-encode a URL path segment like ``encodeURIComponent``."""
    return quote(str(value), safe="!*'()")


def _payload(data: Any) -> Dict[str, Any]:
    """The JSON object of a response, or an empty dict when the body was not one."""
    return data if isinstance(data, dict) else {}


class _ODataClient:
    """
    FileMaker OData client: record reads, scripts, metadata and ``$batch`` writes.

    :param credentials: Strategy providing authorization headers.
    :type credentials: ~filemaker_odata.core.credentials.Credentials
    :param connection: Server and database to talk to.
    :type connection: ~filemaker_odata.core.config.ConnectionInfo
    :param config: Client configuration. Defaults to :meth:`FileMakerConfig.from_env`.
    :type config: ~filemaker_odata.core.config.FileMakerConfig | None
    :param session: Optional session reused for every request.
    :type session: requests.Session | None
    :param logger: Logger for diagnostics.
    :type logger: logging.Logger | None
    :param transport: Pre-built transport; overrides ``credentials``, ``config`` and ``session``.
    :type transport: ~filemaker_odata.core.request.Transport | None
    :param codec: Multipart codec used for ``$batch`` requests.
    :type codec: ~filemaker_odata.data._batch.BatchCodec | None
    """

    def __init__(
        self,
        credentials: Optional[Credentials],
        connection: ConnectionInfo,
        config: Optional[FileMakerConfig] = None,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
        transport: Optional[Transport] = None,
        codec: Optional[BatchCodec] = None,
    ) -> None:
        self.connection = connection
        self.config = config or FileMakerConfig.from_env()
        self._logger = logger or _logger
        if transport is None:
            if credentials is None:
                raise ValueError("credentials are required when no transport is given.")
            transport = Request(
                credentials,
                _HttpClient(timeout=self.config.http_timeout, verify=self.config.verify_ssl, session=session),
            )
        self._transport = transport
        self._codec = codec or BatchCodec()

    def url(self, path: str) -> str:
        return self.connection.url(path)

    def _query_url(self, path: str, options: Optional[QueryOptions]) -> str:
        return f"{self.url(path)}?{serialize_query(options)}"

    def _record_path(self, table: str, record_id: str) -> str:
        return f"{table}('{_quote_segment(record_id)}')"

    @contextmanager
    def _logged_errors(self, action: str) -> Iterator[None]:
        """Log the captured body of a failed request, then let the error propagate."""
        try:
            yield
        except RequestError as exc:
            self._logger.warning("%s HTTP error: %s", action, exc.data)
            raise

    # ----------------------------- Reads ---------------------------------
    def _metadata(self) -> Any:
        with self._logged_errors("Get metadata"):
            return self._transport.get(self.url("$metadata"), response_type="text").data

    def _get_records(self, table: str, options: Optional[QueryOptions] = None) -> List[Dict[str, Any]]:
        url = self._query_url(table, options)
        self._logger.debug("Get records from %s; options=%r; url=%s", table, options, url)
        with self._logged_errors("Get records"):
            response = self._transport.get(url)
        return list(_payload(response.data).get("value", []))

    def _get_records_with_count(self, table: str, options: Optional[QueryOptions] = None) -> RecordsWithCount:
        # Always include the count, whatever the caller passed
        actual = (options or QueryOptions()).with_count()
        url = self._query_url(table, actual)
        self._logger.debug("Get records with count from %s; options=%r; url=%s", table, actual, url)
        with self._logged_errors("Get records with count"):
            response = self._transport.get(url)
        data = _payload(response.data)
        return RecordsWithCount(data=list(data.get("value", [])), count=int(data.get("@odata.count") or 0))

    def _get_record(self, table: str, record_id: str) -> Dict[str, Any]:
        self._logger.debug("Get record %s from %s", record_id, table)
        with self._logged_errors("Get record"):
            return self._transport.get(self.url(self._record_path(table, record_id))).data

    def _get_value(self, table: str, record_id: str, field_name: str) -> bytes:
        path = f"{self._record_path(table, record_id)}/{_quote_segment(field_name)}/$value"
        with self._logged_errors("Get value"):
            return self._transport.get(self.url(path), response_type="bytes").data

    def _get_related(
        self,
        table: str,
        record_id: str,
        path: str,
        options: Optional[QueryOptions] = None,
    ) -> List[Dict[str, Any]]:
        url = self._query_url(f"{self._record_path(table, record_id)}/{path}", options)
        self._logger.debug("Get related records %s of %s; options=%r; url=%s", path, table, options, url)
        with self._logged_errors("Get related records"):
            response = self._transport.get(url)
        return list(_payload(response.data).get("value", []))

    def _crossjoin(self, tables: Sequence[str], filter: str, expand: str) -> str:
        url = f"{self.url('$crossjoin')}({','.join(tables)})?$filter={filter}&$expand={expand}"
        with self._logged_errors("Crossjoin"):
            return self._transport.get(url, headers={"Accept": ACCEPT_ATOM}, response_type="text").data

    # ----------------------------- Scripts -------------------------------
    def _run_script(self, name: str, params: Optional[Dict[str, Any]] = None) -> ScriptResult:
        self._logger.debug("Running script %s with parameters %r", name, params)
        body = None if params is None else {"scriptParameterValue": params}
        with self._logged_errors("Run script"):
            response = self._transport.post(
                self.url(f"Script.{_quote_segment(name)}"),
                body,
                headers={"Content-Type": CONTENT_TYPE_JSON},
            )
        self._logger.debug("Script %s finished: %r", name, response.data)

        script_result = _payload(response.data).get("scriptResult") or {}
        success = script_result.get("code") == 0
        return ScriptResult(success=success, data=script_result.get("resultParameter") if success else None)

    # ----------------------------- Batch ---------------------------------
    def _batch(self, operations: Sequence[BatchOperation]) -> List[OperationResult]:
        executor = BatchExecutor(self._transport, self.connection, codec=self._codec, logger=self._logger)
        return executor.execute(operations)
