# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# Transport subcodes
TRANSPORT_NETWORK = "transport_network"

# Protocol subcodes
PROTOCOL_BOUNDARY_MISSING = "protocol_boundary_missing"
PROTOCOL_STATUS_MISSING = "protocol_status_missing"
PROTOCOL_CONTENT_ID_MISMATCH = "protocol_content_id_mismatch"
PROTOCOL_PART_COUNT_MISMATCH = "protocol_part_count_mismatch"

# Validation subcodes
VALIDATION_IDENTITY_MISSING = "validation_identity_missing"
VALIDATION_NEGATIVE_VALUE = "validation_negative_value"
VALIDATION_SORT_DIRECTION = "validation_sort_direction"
VALIDATION_SORT_SHAPE = "validation_sort_shape"

# Client subcodes
CLIENT_OAUTH_REQUEST_ID_MISSING = "client_oauth_request_id_missing"


def http_subcode(status_code: int) -> str:
    """Return the ``http_<status>`` subcode for a status code."""
    return f"http_{status_code}"
