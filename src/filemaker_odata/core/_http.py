# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
HTTP client with timeout handling, TLS verification settings and optional session support.

This module provides :class:`~filemaker_odata.core._http._HttpClient`, a wrapper
around the requests library that applies default timeouts based on HTTP method
types, the configured certificate verification policy, and optional connection
reuse via a caller-provided session.
"""

from __future__ import annotations

from typing import Any, Optional

import requests


class _HttpClient:
    """
    HTTP client with default timeouts and optional session support.

    Requests are issued exactly once; failures surface as
    :class:`requests.exceptions.RequestException` to the caller.

    :param timeout: Default request timeout in seconds. If None, uses per-method defaults.
    :type timeout: :class:`float` | None
    :param verify: Whether TLS certificates are verified. Default is True.
    :type verify: :class:`bool`
    :param session: Optional requests.Session for connection reuse. If provided,
        all requests use this session.
    :type session: :class:`requests.Session` | None
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        verify: bool = True,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.default_timeout: Optional[float] = timeout
        self.verify = verify
        self._session = session

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Execute an HTTP request with timeout management.

        Applies default timeouts based on HTTP method (120s for POST/PATCH/DELETE, 10s for
        others). When a session is configured, uses the session; otherwise uses standalone
        requests.

        :param method: HTTP method (GET, POST, PATCH, DELETE, etc.).
        :type method: :class:`str`
        :param url: Target URL for the request.
        :type url: :class:`str`
        :param kwargs: Additional arguments passed to ``requests.request()`` or
            ``session.request()``, including headers, data, etc.
        :return: HTTP response object.
        :rtype: :class:`requests.Response`
        :raises requests.exceptions.RequestException: If the request fails.
        """
        # If no timeout is provided, use the user-specified default timeout if set;
        # otherwise, apply per-method defaults (120s for writes, 10s for others).
        if "timeout" not in kwargs:
            if self.default_timeout is not None:
                kwargs["timeout"] = self.default_timeout
            else:
                m = (method or "").lower()
                kwargs["timeout"] = 120 if m in ("post", "patch", "delete") else 10
        kwargs.setdefault("verify", self.verify)

        if self._session is not None:
            return self._session.request(method, url, **kwargs)
        return requests.request(method, url, **kwargs)

    def close(self) -> None:
        """
        Close the HTTP client and release resources.

        If a session was provided, this method closes it. Safe to call multiple times.
        After closing, the client should not be used for further requests.
        """
        if self._session is not None:
            self._session.close()
            self._session = None
