# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from unittest.mock import MagicMock

import pytest
from azure.core.credentials import AccessToken, TokenCredential

from filemaker_odata.core.credentials import (
    BasicCredentials,
    Credentials,
    NullCredentials,
    OAuthCredentials,
    RawCredentials,
    TokenCredentials,
)


def test_basic_credentials_header():
    assert BasicCredentials("admin", "secret").authorization_headers == {"Authorization": "Basic YWRtaW46c2VjcmV0"}


def test_oauth_credentials_headers():
    headers = OAuthCredentials("req-1", "ident-2").authorization_headers
    assert headers == {
        "OData-Version": "4.0",
        "OData-MaxVersion": "4.0",
        "X-FM-Data-OAuth-Request-Id": "req-1",
        "X-FM-Data-OAuth-Identifier": "ident-2",
    }


def test_raw_and_null_credentials():
    assert RawCredentials("Basic abc").authorization_headers == {"Authorization": "Basic abc"}
    assert NullCredentials().authorization_headers == {}


def test_strategies_satisfy_protocol():
    for creds in (NullCredentials(), BasicCredentials("u", "p"), RawCredentials("x")):
        assert isinstance(creds, Credentials)


def test_token_credentials_request_bearer_token():
    credential = MagicMock(spec=TokenCredential)
    credential.get_token.return_value = AccessToken("tok", 0)
    creds = TokenCredentials(credential, "https://fms.example.com/.default")
    assert creds.authorization_headers == {"Authorization": "Bearer tok"}
    credential.get_token.assert_called_once_with("https://fms.example.com/.default")


def test_token_credentials_reject_other_objects():
    with pytest.raises(TypeError):
        TokenCredentials("not-a-credential", "scope")
