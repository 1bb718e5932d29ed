# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Operation namespace classes for the FileMaker OData client.

This module contains the operation namespace classes that organize
related operations under intuitive namespaces:
- RecordOperations: single-record reads
- QueryOperations: multi-record queries
- BatchBuilder: transactional writes via ``$batch``
"""

__all__ = []
