# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Python client for the FileMaker Server OData API.

Example::

    from filemaker_odata import FileMakerClient
    from filemaker_odata.models.query import QueryOptions

    with FileMakerClient("fms.example.com", "Contacts").with_basic_auth("user", "pass") as fm:
        people = fm.query.get("People", QueryOptions(select=["ID", "name"], top=10))
        fm.batch().update("People", {"ID": people[0]["ID"], "name": "Ada"}).execute()
"""

import logging

from .client import FileMaker, FileMakerClient
from .common.constants import LOGGER_NAME

__version__ = "0.1.0"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

__all__ = ["FileMaker", "FileMakerClient", "__version__"]
