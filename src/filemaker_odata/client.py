# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from .common.constants import (
    CONTENT_TYPE_JSON,
    HEADER_FMS_APPLICATION_TYPE,
    HEADER_FMS_APPLICATION_VERSION,
    HEADER_FMS_REQUEST_ID,
    HEADER_FMS_RETURN_URL,
)
from .core._error_codes import CLIENT_OAUTH_REQUEST_ID_MISSING
from .core._http import _HttpClient
from .core.config import ConnectionInfo, FileMakerConfig
from .core.credentials import BasicCredentials, Credentials, NullCredentials, OAuthCredentials
from .core.errors import FileMakerError
from .core.request import Request, Transport
from .core.results import OperationResult, ScriptResult
from .data._batch import BatchCodec
from .data._odata import _ODataClient
from .operations.batch import BatchBuilder
from .operations.query import QueryOperations
from .operations.records import RecordOperations


class FileMaker:
    """
    Client for one FileMaker database exposed through OData.

    Usually obtained from :class:`FileMakerClient`, which wires the credentials.

    **Context Manager Support (Recommended)**:
        Using the client as a context manager reuses one HTTP session for every
        request and closes it on exit::

            with FileMakerClient("fms.example.com", "Contacts").with_basic_auth("user", "pass") as fm:
                people = fm.query.get("People", QueryOptions(top=10))

    Namespaces:

    - ``fm.records``: single-record reads (get, get_value, related)
    - ``fm.query``: multi-record queries (get, get_with_count, crossjoin, builder)

    Writes are transactional and go through :meth:`batch`.

    :param connection: Server and database.
    :type connection: ~filemaker_odata.core.config.ConnectionInfo
    :param credentials: Authorization strategy.
    :type credentials: ~filemaker_odata.core.credentials.Credentials | None
    :param config: Optional configuration for timeouts and TLS verification.
    :type config: ~filemaker_odata.core.config.FileMakerConfig | None
    :param logger: Logger used for request diagnostics.
    :type logger: logging.Logger | None
    :param session: Session to reuse. The caller keeps ownership of it.
    :type session: requests.Session | None
    :param transport: Pre-built transport, mostly for tests. Overrides ``credentials``.
    :type transport: ~filemaker_odata.core.request.Transport | None
    :param codec: Multipart codec for ``$batch`` requests.
    :type codec: ~filemaker_odata.data._batch.BatchCodec | None
    """

    def __init__(
        self,
        connection: ConnectionInfo,
        credentials: Optional[Credentials] = None,
        *,
        config: Optional[FileMakerConfig] = None,
        logger: Optional[logging.Logger] = None,
        session: Optional[requests.Session] = None,
        transport: Optional[Transport] = None,
        codec: Optional[BatchCodec] = None,
    ) -> None:
        if credentials is None and transport is None:
            raise ValueError("Either credentials or transport is required.")
        self.connection = connection
        self._credentials = credentials
        self._config = config or FileMakerConfig.from_env()
        self._logger = logger
        self._transport = transport
        self._codec = codec
        self._odata: Optional[_ODataClient] = None
        self._session: Optional[requests.Session] = session
        self._owns_session: bool = False

        self.records = RecordOperations(self)
        self.query = QueryOperations(self)

    def __enter__(self) -> "FileMaker":
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Release the HTTP session if this instance created it.

        A session passed in by the caller is left open. Safe to call multiple times.
        """
        self._odata = None
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
            self._owns_session = False

    def _get_odata(self) -> _ODataClient:
        """
        Get or create the internal OData client instance.

        :return: The lazily-initialized low-level client used to perform HTTP requests.
        :rtype: ~filemaker_odata.data._odata._ODataClient
        """
        if self._odata is None:
            self._odata = _ODataClient(
                self._credentials,
                self.connection,
                self._config,
                session=self._session,
                logger=self._logger,
                transport=self._transport,
                codec=self._codec,
            )
        return self._odata

    def url(self, path: str) -> str:
        """Full OData URL of ``path`` in this database."""
        return self.connection.url(path)

    def metadata(self) -> Any:
        """
        Fetch the service's ``$metadata`` document.

        :return: The CSDL document as text.
        :rtype: str
        """
        return self._get_odata()._metadata()

    def script(self, name: str, params: Optional[Dict[str, Any]] = None) -> ScriptResult:
        """
        Run a FileMaker script.

        :param name: Script name.
        :type name: str
        :param params: Value passed as the script parameter.
        :type params: dict or None
        :return: Whether the script returned code 0 and its result parameter.
        :rtype: ~filemaker_odata.core.results.ScriptResult
        """
        return self._get_odata()._run_script(name, params)

    def batch(self) -> BatchBuilder:
        """
        Start a transactional ``$batch``: operations either all succeed or none does.

        :return: Builder collecting create, update and delete operations.
        :rtype: ~filemaker_odata.operations.batch.BatchBuilder

        Example::

            results = (fm.batch()
                       .update("Findings", {"ID": "FINDING-1", "FINDING": "Example 1 2 3"})
                       .create("Findings", {"FINDING": "Example body"})
                       .delete("Findings", "FINDING-2")
                       .execute())
        """
        return BatchBuilder(self.connection, self._execute_batch)

    def _execute_batch(self, operations) -> List[OperationResult]:
        return self._get_odata()._batch(operations)


class FileMakerClient:
    """
    Entry point: creates configured :class:`FileMaker` instances and runs the
    unauthenticated OAuth handshake.

    :param server: Host name of the FileMaker Server.
    :type server: str
    :param database: Hosted database name.
    :type database: str
    :param config: Optional configuration.
    :type config: ~filemaker_odata.core.config.FileMakerConfig | None
    :param logger: Logger handed to every :class:`FileMaker` created.
    :type logger: logging.Logger | None
    :param session: Session handed to every :class:`FileMaker` created.
    :type session: requests.Session | None

    :raises ValueError: If ``server`` or ``database`` is empty.

    Example:
        Basic authentication::

            client = FileMakerClient("fms.example.com", "Contacts")
            fm = client.with_basic_auth("user", "pass")

        OAuth::

            redirect_url, request_id = client.get_oauth_url("unique-id", "Google")
            # ... after the OAuth redirect
            fm = client.with_oauth(request_id, identifier)
    """

    def __init__(
        self,
        server: str,
        database: str,
        *,
        config: Optional[FileMakerConfig] = None,
        logger: Optional[logging.Logger] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        server = (server or "").strip().rstrip("/")
        if not server:
            raise ValueError("server is required.")
        if not database:
            raise ValueError("database is required.")
        self.connection = ConnectionInfo(server=server, database=database)
        self._config = config or FileMakerConfig.from_env()
        self._logger = logger
        self._session = session

    @property
    def server(self) -> str:
        return self.connection.server

    def url(self, path: str) -> str:
        """Full OData URL of ``path`` in the configured database."""
        return self.connection.url(path)

    def with_credentials(self, credentials: Credentials) -> FileMaker:
        """Create a :class:`FileMaker` instance using ``credentials``."""
        return FileMaker(
            self.connection,
            credentials,
            config=self._config,
            logger=self._logger,
            session=self._session,
        )

    def with_basic_auth(self, username: str, password: str) -> FileMaker:
        """
        Create a :class:`FileMaker` instance using basic authentication.

        :param username: FileMaker account name.
        :type username: str
        :param password: FileMaker account password.
        :type password: str
        :rtype: FileMaker
        """
        return self.with_credentials(BasicCredentials(username, password))

    def with_oauth(self, request_id: str, identifier: str) -> FileMaker:
        """
        Create a :class:`FileMaker` instance using OAuth credentials.

        :param request_id: The request ID obtained from :meth:`get_oauth_url`.
        :type request_id: str
        :param identifier: The identifier received from the OAuth redirect.
        :type identifier: str
        :rtype: FileMaker
        """
        return self.with_credentials(OAuthCredentials(request_id, identifier))

    def _anonymous_transport(self) -> Transport:
        return Request(
            NullCredentials(),
            _HttpClient(timeout=self._config.http_timeout, verify=self._config.verify_ssl, session=self._session),
        )

    def get_oauth_url(
        self,
        tracking_id: str,
        provider: str,
        return_url: Optional[str] = None,
    ) -> Tuple[str, str]:
        """
        Start the OAuth flow. Redirect the user to the returned URL.

        :param tracking_id: Unique identifier for this OAuth request.
        :type tracking_id: str
        :param provider: OAuth provider name, e.g. ``"Google"`` or ``"Microsoft"``.
        :type provider: str
        :param return_url: URL the provider returns to. Defaults to
            ``https://<server>/oauth-handler``.
        :type return_url: str or None
        :return: ``(redirect_url, request_id)``; keep ``request_id`` for :meth:`with_oauth`.
        :rtype: tuple[str, str]
        :raises ~filemaker_odata.core.errors.FileMakerError: If the server does not return an
            ``X-FMS-Request-ID`` header.
        """
        server = self.server
        url = (
            f"https://{server}/oauth/getoauthurl?trackingID={tracking_id}"
            f"&provider={provider}&address={server}&X-FMS-OAuth-AuthType=2"
        )
        response = self._anonymous_transport().get(
            url,
            headers={
                HEADER_FMS_APPLICATION_TYPE: self._config.application_type,
                HEADER_FMS_APPLICATION_VERSION: self._config.application_version,
                HEADER_FMS_RETURN_URL: return_url or f"https://{server}/oauth-handler",
            },
            response_type="text",
        )

        request_id = ""
        for key, value in response.headers.items():
            if key.lower() == HEADER_FMS_REQUEST_ID.lower():
                request_id = value
                break
        if not request_id:
            raise FileMakerError(
                f'Did not get back an "{HEADER_FMS_REQUEST_ID}" header from FileMaker',
                code="client_error",
                subcode=CLIENT_OAUTH_REQUEST_ID_MISSING,
            )
        return response.data, request_id

    def get_auth_types(self) -> List[str]:
        """
        Detect the authentication types the server supports.

        :return: OAuth provider names, or ``["basic"]`` when none is configured.
        :rtype: list[str]
        """
        response = self._anonymous_transport().get(
            f"https://{self.server}/fmws/oauthproviderinfo",
            headers={"Content-Type": CONTENT_TYPE_JSON},
        )
        body = response.data if isinstance(response.data, dict) else {}
        info = body.get("data")
        if info is not None:
            return [provider["Name"] for provider in info.get("Provider", [])]
        return ["basic"]


__all__ = ["FileMaker", "FileMakerClient"]
