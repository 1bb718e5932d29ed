# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import unittest
from unittest.mock import MagicMock, patch

from filemaker_odata import FileMaker, FileMakerClient
from filemaker_odata.core.config import ConnectionInfo
from filemaker_odata.core.credentials import BasicCredentials, OAuthCredentials
from filemaker_odata.core.errors import FileMakerError, ValidationError
from filemaker_odata.core.request import Response
from filemaker_odata.core.results import OperationResult, RecordsWithCount, ScriptResult
from filemaker_odata.data._operations import CreateOperation, DeleteOperation, UpdateOperation
from filemaker_odata.models.query import QueryOptions

_BATCH_RESPONSE = (
    "--batchresponse_1\r\n"
    "Content-Type: multipart/mixed; boundary=changesetresponse_1\r\n\r\n"
    "--changesetresponse_1\r\n"
    "Content-Type: application/http\r\nContent-ID: 1\r\n\r\n"
    "HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n\r\n"
    '{"ID": "FINDING-1"}\r\n'
    "--changesetresponse_1\r\n"
    "Content-Type: application/http\r\nContent-ID: 2\r\n\r\n"
    "HTTP/1.1 201 Created\r\n\r\n"
    "--changesetresponse_1\r\n"
    "Content-Type: application/http\r\nContent-ID: 3\r\n\r\n"
    "HTTP/1.1 204 No Content\r\n\r\n"
    "--changesetresponse_1--\r\n"
    "--batchresponse_1--\r\n"
)


class TestFileMakerClient(unittest.TestCase):
    """Unit tests for FileMakerClient factory and OAuth helpers."""

    def setUp(self):
        self.client = FileMakerClient("demo.server.beezwax.net", "test")

    def test_requires_server_and_database(self):
        with self.assertRaises(ValueError):
            FileMakerClient("", "test")
        with self.assertRaises(ValueError):
            FileMakerClient("demo.server.beezwax.net", "")

    def test_url(self):
        self.assertEqual(self.client.url("People"), "https://demo.server.beezwax.net/fmi/odata/v4/test/People")
        self.assertEqual(FileMakerClient("host/", "db").server, "host")

    def test_with_basic_auth(self):
        fm = self.client.with_basic_auth("admin", "secret")
        self.assertIsInstance(fm, FileMaker)
        self.assertIsInstance(fm._credentials, BasicCredentials)
        self.assertEqual(fm.connection, ConnectionInfo("demo.server.beezwax.net", "test"))

    def test_with_oauth(self):
        fm = self.client.with_oauth("req-1", "ident-1")
        self.assertIsInstance(fm._credentials, OAuthCredentials)
        self.assertEqual(fm._credentials.authorization_headers["X-FM-Data-OAuth-Request-Id"], "req-1")

    def test_get_oauth_url(self):
        transport = MagicMock()
        transport.get.return_value = Response(
            data="https://accounts.example.com/auth?x=1", headers={"x-fms-request-id": "REQ-42"}
        )
        with patch.object(FileMakerClient, "_anonymous_transport", return_value=transport):
            redirect, request_id = self.client.get_oauth_url("track-1", "Google")

        self.assertEqual(redirect, "https://accounts.example.com/auth?x=1")
        self.assertEqual(request_id, "REQ-42")
        url = transport.get.call_args.args[0]
        self.assertEqual(
            url,
            "https://demo.server.beezwax.net/oauth/getoauthurl?trackingID=track-1&provider=Google"
            "&address=demo.server.beezwax.net&X-FMS-OAuth-AuthType=2",
        )
        headers = transport.get.call_args.kwargs["headers"]
        self.assertEqual(headers["X-FMS-Application-Type"], "9")
        self.assertEqual(headers["X-FMS-Application-Version"], "15")
        self.assertEqual(headers["X-FMS-Return-URL"], "https://demo.server.beezwax.net/oauth-handler")

    def test_get_oauth_url_custom_return_url(self):
        transport = MagicMock()
        transport.get.return_value = Response(data="", headers={"X-FMS-Request-ID": "R"})
        with patch.object(FileMakerClient, "_anonymous_transport", return_value=transport):
            self.client.get_oauth_url("t", "Microsoft", return_url="https://app.example.com/cb")
        self.assertEqual(transport.get.call_args.kwargs["headers"]["X-FMS-Return-URL"], "https://app.example.com/cb")

    def test_get_oauth_url_without_request_id_raises(self):
        transport = MagicMock()
        transport.get.return_value = Response(data="", headers={})
        with patch.object(FileMakerClient, "_anonymous_transport", return_value=transport):
            with self.assertRaises(FileMakerError) as ctx:
                self.client.get_oauth_url("t", "Google")
        self.assertEqual(ctx.exception.subcode, "client_oauth_request_id_missing")

    def test_get_auth_types_lists_providers(self):
        transport = MagicMock()
        transport.get.return_value = Response(data={"data": {"Provider": [{"Name": "Google"}, {"Name": "Microsoft"}]}})
        with patch.object(FileMakerClient, "_anonymous_transport", return_value=transport):
            self.assertEqual(self.client.get_auth_types(), ["Google", "Microsoft"])
        self.assertEqual(transport.get.call_args.args[0], "https://demo.server.beezwax.net/fmws/oauthproviderinfo")

    def test_get_auth_types_defaults_to_basic(self):
        transport = MagicMock()
        transport.get.return_value = Response(data={"result": 0})
        with patch.object(FileMakerClient, "_anonymous_transport", return_value=transport):
            self.assertEqual(self.client.get_auth_types(), ["basic"])


class TestFileMaker(unittest.TestCase):
    """Unit tests for the FileMaker facade, backed by a mocked transport."""

    def setUp(self):
        self.transport = MagicMock()
        self.connection = ConnectionInfo("demo.server.beezwax.net", "test")
        self.fm = FileMaker(self.connection, transport=self.transport)

    def test_requires_credentials_or_transport(self):
        with self.assertRaises(ValueError):
            FileMaker(self.connection)

    def test_query_get(self):
        self.transport.get.return_value = Response(data={"value": [{"ID": "1"}]})
        self.assertEqual(self.fm.query.get("People", QueryOptions(top=1)), [{"ID": "1"}])
        self.assertTrue(self.transport.get.call_args.args[0].endswith("/People?$top=1"))

    def test_query_get_with_count(self):
        self.transport.get.return_value = Response(data={"value": [], "@odata.count": 7})
        self.assertEqual(self.fm.query.get_with_count("People"), RecordsWithCount(data=[], count=7))

    def test_query_builder_execute(self):
        self.transport.get.return_value = Response(data={"value": [{"ID": "2"}]})
        records = self.fm.query.builder("People").select("ID").filter_eq("name", "Ada").execute()
        self.assertEqual(records, [{"ID": "2"}])
        self.assertTrue(self.transport.get.call_args.args[0].endswith("""/People?$select="ID"&$filter=name eq 'Ada'"""))

    def test_records_namespace(self):
        self.transport.get.return_value = Response(data={"ID": "1"})
        self.assertEqual(self.fm.records.get("People", "1"), {"ID": "1"})
        self.transport.get.return_value = Response(data=b"raw")
        self.assertEqual(self.fm.records.get_value("People", "1", "Photo"), b"raw")
        self.transport.get.return_value = Response(data={"value": []})
        self.assertEqual(self.fm.records.related("People", "1", "Notes"), [])

    def test_script(self):
        self.transport.post.return_value = Response(data={"scriptResult": {"code": 0, "resultParameter": "ok"}})
        self.assertEqual(self.fm.script("Hello"), ScriptResult(success=True, data="ok"))

    def test_batch_builder_collects_operations_in_order(self):
        batch = (
            self.fm.batch()
            .update("Findings", {"ID": "FINDING-1", "FINDING": "Example 1 2 3"})
            .create("Findings", {"FINDING": "Example body"})
            .delete("Findings", "FINDING-2")
        )
        kinds = [type(op) for op in batch.operations]
        self.assertEqual(kinds, [UpdateOperation, CreateOperation, DeleteOperation])

    def test_batch_update_without_id_raises(self):
        with self.assertRaises(ValidationError):
            self.fm.batch().update("Findings", {"FINDING": "x"})

    def test_batch_execute_posts_once(self):
        self.transport.post.return_value = Response(data=_BATCH_RESPONSE)
        results = (
            self.fm.batch()
            .update("Findings", {"ID": "FINDING-1", "FINDING": "Example 1 2 3"})
            .create("Findings", {"FINDING": "Example body"})
            .delete("Findings", "FINDING-2")
            .execute()
        )
        self.assertEqual(
            results,
            [OperationResult(200, {"ID": "FINDING-1"}), OperationResult(201, None), OperationResult(204, None)],
        )
        self.transport.post.assert_called_once()
        self.assertEqual(
            self.transport.post.call_args.args[0], "https://demo.server.beezwax.net/fmi/odata/v4/test/$batch"
        )


if __name__ == "__main__":
    unittest.main()
