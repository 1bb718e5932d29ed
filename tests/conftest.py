# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for FileMaker OData tests.

This module provides a fake transport, a deterministic boundary token factory
and a builder for multipart ``$batch`` response bodies.
"""

import itertools
import json
import types

import pytest

from filemaker_odata.core.config import ConnectionInfo
from filemaker_odata.core.request import Response

_REASONS = {200: "OK", 201: "Created", 204: "No Content", 400: "Bad Request", 404: "Not Found", 500: "Internal Server Error"}


class FakeTransport:
    """Transport returning pre-configured responses and recording every call.

    Items of ``responses`` are returned in order; exception instances are raised instead.
    """

    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    def _next(self, method, url, body, headers, response_type):
        self.calls.append(
            types.SimpleNamespace(method=method, url=url, body=body, headers=headers or {}, response_type=response_type)
        )
        if not self._responses:
            raise AssertionError("No more fake responses configured")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url, *, headers=None, response_type="json"):
        return self._next("get", url, None, headers, response_type)

    def post(self, url, body, *, headers=None, response_type="json"):
        return self._next("post", url, body, headers, response_type)


def build_batch_response(parts, *, boundary="changesetresponse_0a1b", content_ids=True):
    """Build a multipart ``$batch`` response body.

    Args:
        parts: List of ``(status, payload)`` tuples; ``payload`` is JSON-serializable or None.
        boundary: Changeset boundary used by the "server".
        content_ids: Whether each part carries a ``Content-ID`` header matching its position.
    """
    batch = "batchresponse_9f8e"
    out = f"--{batch}\r\nContent-Type: multipart/mixed; boundary={boundary}\r\n\r\n"
    for position, (status, payload) in enumerate(parts, start=1):
        out += f"--{boundary}\r\nContent-Type: application/http\r\nContent-Transfer-Encoding: binary\r\n"
        if content_ids:
            out += f"Content-ID: {position}\r\n"
        out += f"\r\nHTTP/1.1 {status} {_REASONS.get(status, 'Status')}\r\n"
        if payload is None:
            out += "\r\n"
        else:
            text = json.dumps(payload)
            out += f"Content-Type: application/json\r\nContent-Length: {len(text)}\r\n\r\n{text}\r\n"
    out += f"--{boundary}--\r\n--{batch}--\r\n"
    return out


@pytest.fixture
def connection():
    """Connection used throughout the tests."""
    return ConnectionInfo(server="demo.server.beezwax.net", database="test")


@pytest.fixture
def fake_transport():
    """Factory: ``fake_transport(resp1, resp2, ...)`` returns a FakeTransport."""

    def make(*responses):
        return FakeTransport(responses)

    return make


@pytest.fixture
def text_response():
    """Factory wrapping a body into a successful Response."""

    def make(data, headers=None, status_code=200):
        return Response(data=data, headers=headers or {}, status_code=status_code)

    return make


@pytest.fixture
def sequential_tokens():
    """Deterministic boundary token factory yielding ``t1``, ``t2``, ..."""
    counter = itertools.count(1)
    return lambda: f"t{next(counter)}"


@pytest.fixture
def batch_response():
    """Expose :func:`build_batch_response` to tests."""
    return build_batch_response
