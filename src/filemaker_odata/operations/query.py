# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Query operations namespace."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING

from ..core.results import RecordsWithCount
from ..models.query import QueryBuilder, QueryOptions

if TYPE_CHECKING:
    from ..client import FileMaker


class QueryOperations:
    """
    Query operations for retrieving records.

    Accessed via ``fm.query``.

    Example:
        Fluent query builder::

            records = (fm.query.builder("People")
                       .select("ID", "name")
                       .filter_eq("company", "Beezwax")
                       .order_by("name")
                       .top(10)
                       .execute())

        Query options::

            page = fm.query.get_with_count("People", QueryOptions(top=20, skip=40))
            print(page.count, len(page.data))
    """

    def __init__(self, client: "FileMaker") -> None:
        self._client = client

    def get(self, table: str, options: Optional[QueryOptions] = None) -> List[Dict[str, Any]]:
        """
        Query records of a table.

        :param table: Table name.
        :type table: str
        :param options: Query options; see :func:`~filemaker_odata.models.query.serialize_query`.
        :type options: ~filemaker_odata.models.query.QueryOptions or None
        :return: The matching records.
        :rtype: list[dict]
        :raises ~filemaker_odata.core.errors.RequestError: If the request fails.
        """
        return self._client._get_odata()._get_records(table, options)

    def get_with_count(self, table: str, options: Optional[QueryOptions] = None) -> RecordsWithCount:
        """
        Query records together with the total number of matches.

        ``count`` is always requested, whatever ``options`` says.

        :param table: Table name.
        :type table: str
        :param options: Query options.
        :type options: ~filemaker_odata.models.query.QueryOptions or None
        :return: Records and the server-side count (``0`` when the server omits it).
        :rtype: ~filemaker_odata.core.results.RecordsWithCount
        """
        return self._client._get_odata()._get_records_with_count(table, options)

    def crossjoin(self, tables: Sequence[str], filter: str, expand: str) -> str:
        """
        Run a ``$crossjoin`` across several tables.

        FileMaker answers cross joins in Atom XML, which is returned unparsed.

        :param tables: Tables to join.
        :type tables: Sequence[str]
        :param filter: Raw ``$filter`` expression.
        :type filter: str
        :param expand: Raw ``$expand`` value.
        :type expand: str
        :return: The Atom XML document.
        :rtype: str
        """
        return self._client._get_odata()._crossjoin(tables, filter, expand)

    def builder(self, table: str) -> QueryBuilder:
        """
        Create a fluent query builder bound to this namespace.

        :param table: Table name.
        :type table: str
        :return: Builder whose ``execute()`` runs :meth:`get`.
        :rtype: ~filemaker_odata.models.query.QueryBuilder
        """
        return QueryBuilder(table, _query_ops=self)


__all__ = ["QueryOperations"]
