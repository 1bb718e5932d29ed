# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Transport used by the FileMaker OData client.

:class:`Transport` is the interface the rest of the package depends on;
:class:`Request` implements it on top of :class:`~filemaker_odata.core._http._HttpClient`
and merges the configured credentials into every request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Mapping, Optional, Protocol, Union

import requests

from ._error_codes import TRANSPORT_NETWORK, http_subcode
from ._http import _HttpClient
from .credentials import Credentials
from .errors import RequestError

logger = logging.getLogger(__name__)

ResponseType = Literal["json", "text", "bytes"]
Body = Union[str, bytes, Dict[str, Any], None]


@dataclass(frozen=True)
class Response:
    """
    Outcome of a successful HTTP request.

    :param data: Decoded body. Parsed JSON, text or raw bytes depending on the requested
        response type.
    :param headers: Response headers (case-insensitive mapping when produced by requests).
    :param status_code: HTTP status code.
    """

    data: Any
    headers: Mapping[str, str] = field(default_factory=dict)
    status_code: int = 200


class Transport(Protocol):
    """Minimal HTTP interface consumed by the OData client and the batch executor."""

    def get(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        response_type: ResponseType = "json",
    ) -> Response: ...

    def post(
        self,
        url: str,
        body: Body,
        *,
        headers: Optional[Dict[str, str]] = None,
        response_type: ResponseType = "json",
    ) -> Response: ...


def _decode(response: requests.Response, response_type: ResponseType) -> Any:
    if response_type == "bytes":
        return response.content
    if response_type == "text":
        if response.encoding is None:
            # No charset in Content-Type; FileMaker sends UTF-8
            return response.content.decode("utf-8", errors="replace")
        return response.text
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class Request:
    """
    :class:`Transport` implementation using requests.

    :param credentials: Strategy providing the authorization headers.
    :type credentials: ~filemaker_odata.core.credentials.Credentials
    :param http: Underlying HTTP client. A default one is created when omitted.
    :type http: ~filemaker_odata.core._http._HttpClient | None
    """

    def __init__(self, credentials: Credentials, http: Optional[_HttpClient] = None) -> None:
        self.credentials = credentials
        self._http = http or _HttpClient()

    def _headers(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged = dict(headers or {})
        merged.update(self.credentials.authorization_headers)
        return merged

    def _send(self, method: str, url: str, response_type: ResponseType, **kwargs: Any) -> Response:
        try:
            r = self._http._request(method, url, **kwargs)
        except requests.exceptions.RequestException as exc:
            raise RequestError(
                f"{method.upper()} {url} failed: {exc}",
                subcode=TRANSPORT_NETWORK,
                url=url,
            ) from exc

        if r.status_code >= 400:
            data = _decode(r, "json")
            raise RequestError(
                f"{method.upper()} {url} failed with status {r.status_code}",
                data=data,
                status_code=r.status_code,
                subcode=http_subcode(r.status_code),
                url=url,
            )
        logger.debug("%s %s -> %s", method.upper(), url, r.status_code)
        return Response(data=_decode(r, response_type), headers=r.headers, status_code=r.status_code)

    def get(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        response_type: ResponseType = "json",
    ) -> Response:
        return self._send("get", url, response_type, headers=self._headers(headers))

    def post(
        self,
        url: str,
        body: Body,
        *,
        headers: Optional[Dict[str, str]] = None,
        response_type: ResponseType = "json",
    ) -> Response:
        kwargs: Dict[str, Any] = {"headers": self._headers(headers)}
        if isinstance(body, dict):
            kwargs["json"] = body
        elif isinstance(body, str):
            kwargs["data"] = body.encode("utf-8")
        elif body is not None:
            kwargs["data"] = body
        return self._send("post", url, response_type, **kwargs)

    def close(self) -> None:
        self._http.close()


__all__ = ["Response", "Transport", "Request", "ResponseType"]
