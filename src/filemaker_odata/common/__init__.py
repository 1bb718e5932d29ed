# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Common utilities and constants for the FileMaker OData client.

This module contains shared constants and utilities used across the package.
"""

__all__ = []
