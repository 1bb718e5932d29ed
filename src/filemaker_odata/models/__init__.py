# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data models and type definitions for the FileMaker OData client.

- :class:`~filemaker_odata.models.query.QueryOptions`: Immutable query options.
- :class:`~filemaker_odata.models.query.QueryBuilder`: Fluent query builder.
- :func:`~filemaker_odata.models.query.serialize_query`: Query string serializer.

Note:
    This ``__init__.py`` does NOT import/export models. Import directly from the
    specific module files.
"""

__all__ = []
