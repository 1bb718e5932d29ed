# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Single-record read operations namespace."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..models.query import QueryOptions

if TYPE_CHECKING:
    from ..client import FileMaker


class RecordOperations:
    """
    Reads addressing one record by its primary key.

    Accessed via ``fm.records``. Writes go through :meth:`FileMaker.batch`.

    Example::

        person = fm.records.get("People", "1234")
        photo = fm.records.get_value("People", "1234", "Photo")
        notes = fm.records.related("People", "1234", "Notes", QueryOptions(top=5))
    """

    def __init__(self, client: "FileMaker") -> None:
        self._client = client

    def get(self, table: str, record_id: str) -> Dict[str, Any]:
        """
        Fetch a single record.

        :param table: Table name.
        :type table: str
        :param record_id: Primary key of the record; percent-encoded in the URL.
        :type record_id: str
        :return: The record as returned by the server.
        :rtype: dict
        :raises ~filemaker_odata.core.errors.RequestError: If the request fails.
        """
        return self._client._get_odata()._get_record(table, record_id)

    def get_value(self, table: str, record_id: str, field_name: str) -> bytes:
        """
        Fetch the raw value of one field, e.g. the contents of a container field.

        :param table: Table name.
        :type table: str
        :param record_id: Primary key of the record.
        :type record_id: str
        :param field_name: Field to read.
        :type field_name: str
        :return: The raw bytes of the value.
        :rtype: bytes
        """
        return self._client._get_odata()._get_value(table, record_id, field_name)

    def related(
        self,
        table: str,
        record_id: str,
        path: str,
        options: Optional[QueryOptions] = None,
    ) -> List[Dict[str, Any]]:
        """
        Query records reachable from one record through a relationship.

        :param table: Table of the source record.
        :type table: str
        :param record_id: Primary key of the source record.
        :type record_id: str
        :param path: Navigation path relative to the record, e.g. ``"Notes"``.
        :type path: str
        :param options: Query options for the related records.
        :type options: ~filemaker_odata.models.query.QueryOptions or None
        :return: The related records.
        :rtype: list[dict]
        """
        return self._client._get_odata()._get_related(table, record_id, path, options)


__all__ = ["RecordOperations"]
