# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data access layer for the FileMaker OData client.

This module contains OData protocol handling: URL building, record reads,
and the multipart ``$batch`` codec used for transactional writes.
"""

__all__ = []
