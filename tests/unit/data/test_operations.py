# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pytest

from filemaker_odata.core.config import ConnectionInfo
from filemaker_odata.core.errors import OperationError, ProtocolError, ValidationError
from filemaker_odata.data._operations import ChangeContext, CreateOperation, DeleteOperation, UpdateOperation

BASE = "https://demo.server.beezwax.net/fmi/odata/v4/test"
CTX = ChangeContext(boundary="changeset_t2", change_id=1)


@pytest.fixture
def conn():
    return ConnectionInfo(server="demo.server.beezwax.net", database="test")


def test_create_renders_post_part(conn):
    op = CreateOperation(conn, "Findings", {"FINDING": "Example body"})
    assert op.render(CTX) == (
        "--changeset_t2\r\n"
        "Content-Type: application/http\r\n"
        "Content-ID: 1\r\n"
        "\r\n"
        f"POST {BASE}/Findings HTTP/1.1\r\n"
        "Content-Type: application/json\r\n"
        "Content-Length: 26\r\n"
        "\r\n"
        '{"FINDING":"Example body"}\r\n'
    )


def test_content_length_counts_utf8_bytes(conn):
    """Non-ASCII payloads are measured in encoded bytes, not characters."""
    op = CreateOperation(conn, "People", {"name": "Zoë"})
    payload = '{"name":"Zoë"}'
    assert f"Content-Length: {len(payload.encode('utf-8'))}\r\n" in op.render(CTX)
    assert len(payload.encode("utf-8")) == len(payload) + 1
    assert payload in op.render(CTX)


def test_update_strips_identity_from_body(conn):
    op = UpdateOperation(conn, "Findings", {"ID": "FINDING-1", "FINDING": "Example 1 2 3"})
    rendered = op.render(ChangeContext(boundary="changeset_x", change_id=3))
    assert "Content-ID: 3\r\n" in rendered
    assert f"PATCH {BASE}/Findings('FINDING-1') HTTP/1.1\r\n" in rendered
    assert '{"FINDING":"Example 1 2 3"}\r\n' in rendered
    assert '"ID"' not in rendered


def test_update_without_identity_raises(conn):
    with pytest.raises(ValidationError):
        UpdateOperation(conn, "Findings", {"FINDING": "x"})


def test_update_does_not_mutate_caller_record(conn):
    record = {"ID": "1", "name": "Ada"}
    op = UpdateOperation(conn, "People", record)
    assert op.changes() == {"name": "Ada"}
    assert record == {"ID": "1", "name": "Ada"}
    record["name"] = "Grace"
    assert op.changes() == {"name": "Ada"}


def test_delete_renders_request_line_only(conn):
    op = DeleteOperation(conn, "Findings", "FINDING-2")
    assert op.render(ChangeContext(boundary="changeset_t2", change_id=2)) == (
        "--changeset_t2\r\n"
        "Content-Type: application/http\r\n"
        "Content-ID: 2\r\n"
        "\r\n"
        f"DELETE {BASE}/Findings('FINDING-2') HTTP/1.1\r\n"
        "\r\n"
        "\r\n"
    )


def test_key_literal_quotes_are_doubled(conn):
    op = DeleteOperation(conn, "People", "O'Brien")
    assert f"{BASE}/People('O''Brien')" in op.render(CTX)


def test_create_parse_success(conn):
    part = "\r\nContent-Type: application/http\r\n\r\nHTTP/1.1 201 Created\r\nLocation: x\r\n\r\n{\"ID\": \"9\"}\r\n"
    result = CreateOperation(conn, "People", {"name": "Ada"}).parse(part)
    assert result.status_code == 201
    assert result.body is None
    assert result.ok


def test_update_parse_returns_echoed_record(conn):
    part = (
        "\r\nContent-Type: application/http\r\n\r\n"
        "HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n\r\n"
        '{"ID": "1", "name": "Ada"}\r\n'
    )
    result = UpdateOperation(conn, "People", {"ID": "1", "name": "Ada"}).parse(part)
    assert result.status_code == 200
    assert result.body == {"ID": "1", "name": "Ada"}


def test_update_parse_without_body(conn):
    part = "\r\nContent-Type: application/http\r\n\r\nHTTP/1.1 204 No Content\r\n\r\n"
    result = UpdateOperation(conn, "People", {"ID": "1"}).parse(part)
    assert result.status_code == 204
    assert result.body is None


def test_delete_parse_error_raises_operation_error(conn):
    part = (
        "\r\nContent-Type: application/http\r\n\r\n"
        "HTTP/1.1 404 Not Found\r\nContent-Type: application/json\r\n\r\n"
        '{"error": {"code": "-1023", "message": "Record not found"}}\r\n'
    )
    with pytest.raises(OperationError) as exc_info:
        DeleteOperation(conn, "Findings", "FINDING-2").parse(part)
    err = exc_info.value
    assert str(err) == "[DELETE OPERATION: Findings] Record not found"
    assert err.kind == "DELETE"
    assert err.table == "Findings"
    assert err.status_code == 404
    assert err.details["error"]["code"] == "-1023"


def test_error_without_message_uses_status(conn):
    part = "\r\nHTTP/1.1 500 Internal Server Error\r\n\r\n"
    with pytest.raises(OperationError) as exc_info:
        CreateOperation(conn, "People", {}).parse(part)
    assert str(exc_info.value) == "[CREATE OPERATION: People] HTTP 500"


def test_parse_without_status_line_raises_protocol_error(conn):
    with pytest.raises(ProtocolError):
        CreateOperation(conn, "People", {}).parse("\r\nContent-Type: application/http\r\n\r\ngarbage\r\n")
