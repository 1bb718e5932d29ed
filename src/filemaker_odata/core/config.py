# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.constants import ODATA_PATH


@dataclass(frozen=True)
class ConnectionInfo:
    """
    Identity of a FileMaker database exposed through OData.

    :param server: Host name of the FileMaker Server, for example ``"fms.example.com"``.
    :type server: str
    :param database: Name of the hosted database (file).
    :type database: str
    """

    server: str
    database: str

    @property
    def base_url(self) -> str:
        """Root URL of the database's OData service."""
        return f"https://{self.server}/{ODATA_PATH}/{self.database}"

    def url(self, path: str) -> str:
        """
        Build the full OData URL for ``path``.

        :param path: Path segment relative to the database root, e.g. ``"Contacts"`` or ``"$batch"``.
        :type path: str
        :return: Absolute URL.
        :rtype: str
        """
        return f"{self.base_url}/{path}"


@dataclass(frozen=True)
class FileMakerConfig:
    """
    Configuration settings for FileMaker OData client operations.

    :param http_timeout: Request timeout in seconds (default: method-dependent).
    :type http_timeout: float or None
    :param verify_ssl: Whether to verify the server's TLS certificate. FileMaker Servers
        running with a self-signed certificate need ``False`` (default: True).
    :type verify_ssl: bool
    :param application_type: Value of the ``X-FMS-Application-Type`` header sent during the
        OAuth handshake (default: ``"9"``).
    :type application_type: str
    :param application_version: Value of the ``X-FMS-Application-Version`` header sent during
        the OAuth handshake (default: ``"15"``).
    :type application_version: str
    """

    http_timeout: Optional[float] = None
    verify_ssl: bool = True
    application_type: str = "9"
    application_version: str = "15"

    @classmethod
    def from_env(cls) -> "FileMakerConfig":
        """
        Create a configuration instance with default settings.

        :return: Configuration instance with default values.
        :rtype: ~filemaker_odata.core.config.FileMakerConfig
        """
        # Environment-free defaults
        return cls(
            http_timeout=None,  # Will use method-dependent defaults in _HttpClient
            verify_ssl=True,
            application_type="9",
            application_version="15",
        )
