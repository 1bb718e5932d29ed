# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Constants for the FileMaker OData API.

These constants define URL layout, reserved field names and header values
used when talking to a FileMaker Server OData endpoint.
"""

LOGGER_NAME = "filemaker_odata"
"""Name of the package logger. Module loggers are children of this one."""

ODATA_PATH = "fmi/odata/v4"
"""Path prefix of the OData v4 API on a FileMaker Server."""

IDENTITY_FIELD = "ID"
"""Field holding the primary key of a record. Reserved in ``$select``."""

RESERVED_SELECT_FIELDS = (IDENTITY_FIELD,)
"""Field names which must be double-quoted in ``$select``."""

# Batch envelope
BATCH_PATH = "$batch"
BATCH_BOUNDARY_PREFIX = "batch_"
CHANGESET_BOUNDARY_PREFIX = "changeset_"
CRLF = "\r\n"

# OData protocol headers
ODATA_VERSION = "4.0"
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_HTTP = "application/http"
ACCEPT_ATOM = "application/atom+xml"

# OAuth handshake (FileMaker Server "getoauthurl" endpoint)
HEADER_FMS_APPLICATION_TYPE = "X-FMS-Application-Type"
HEADER_FMS_APPLICATION_VERSION = "X-FMS-Application-Version"
HEADER_FMS_RETURN_URL = "X-FMS-Return-URL"
HEADER_FMS_REQUEST_ID = "X-FMS-Request-ID"
HEADER_OAUTH_REQUEST_ID = "X-FM-Data-OAuth-Request-Id"
HEADER_OAUTH_IDENTIFIER = "X-FM-Data-OAuth-Identifier"
