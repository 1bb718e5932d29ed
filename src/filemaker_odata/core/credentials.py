# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Authorization strategies for FileMaker OData requests.

Every strategy exposes :attr:`authorization_headers`, a mapping of header name to
value which the transport merges into each outgoing request.
"""

from __future__ import annotations

import base64
from typing import Dict, Protocol, runtime_checkable

from azure.core.credentials import TokenCredential

from ..common.constants import HEADER_OAUTH_IDENTIFIER, HEADER_OAUTH_REQUEST_ID, ODATA_VERSION


@runtime_checkable
class Credentials(Protocol):
    """Anything able to produce authorization headers."""

    @property
    def authorization_headers(self) -> Dict[str, str]: ...


class NullCredentials:
    """Sends no authorization headers. Used for unauthenticated endpoints."""

    @property
    def authorization_headers(self) -> Dict[str, str]:
        return {}


class BasicCredentials:
    """
    HTTP Basic authentication with a FileMaker account.

    :param username: FileMaker account name.
    :type username: str
    :param password: FileMaker account password.
    :type password: str
    """

    def __init__(self, username: str, password: str) -> None:
        self._username = username
        self._password = password

    @property
    def authorization_headers(self) -> Dict[str, str]:
        token = base64.b64encode(f"{self._username}:{self._password}".encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {token}"}


class OAuthCredentials:
    """
    Credentials obtained through the FileMaker Server OAuth flow.

    :param request_id: Request ID returned by :meth:`~filemaker_odata.client.FileMakerClient.get_oauth_url`.
    :type request_id: str
    :param identifier: Identifier received on the OAuth redirect.
    :type identifier: str
    """

    def __init__(self, request_id: str, identifier: str) -> None:
        self._request_id = request_id
        self._identifier = identifier

    @property
    def authorization_headers(self) -> Dict[str, str]:
        return {
            "OData-Version": ODATA_VERSION,
            "OData-MaxVersion": ODATA_VERSION,
            HEADER_OAUTH_REQUEST_ID: self._request_id,
            HEADER_OAUTH_IDENTIFIER: self._identifier,
        }


class RawCredentials:
    """
    Passes a preformatted ``Authorization`` header value through unchanged.

    Example::

        RawCredentials("Basic <access-token>")
    """

    def __init__(self, authorization: str) -> None:
        self._authorization = authorization

    @property
    def authorization_headers(self) -> Dict[str, str]:
        return {"Authorization": self._authorization}


class TokenCredentials:
    """
    Bearer authentication backed by an Azure Identity style token provider.

    A token is requested from ``credential`` every time headers are built; caching and
    refreshing are left to the credential implementation.

    :param credential: Token provider.
    :type credential: ~azure.core.credentials.TokenCredential
    :param scope: Scope requested from the provider.
    :type scope: str
    :raises TypeError: If ``credential`` does not implement ``TokenCredential``.
    """

    def __init__(self, credential: TokenCredential, scope: str) -> None:
        if not isinstance(credential, TokenCredential):
            raise TypeError("credential must implement azure.core.credentials.TokenCredential.")
        self.credential: TokenCredential = credential
        self.scope = scope

    @property
    def authorization_headers(self) -> Dict[str, str]:
        token = self.credential.get_token(self.scope)
        return {"Authorization": f"Bearer {token.token}"}


__all__ = [
    "Credentials",
    "NullCredentials",
    "BasicCredentials",
    "OAuthCredentials",
    "RawCredentials",
    "TokenCredentials",
]
