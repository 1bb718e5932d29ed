# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Transactional ``$batch`` write operations."""

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Sequence, Tuple

from ..core.config import ConnectionInfo
from ..core.results import OperationResult
from ..data._operations import BatchOperation, CreateOperation, DeleteOperation, UpdateOperation

BatchCallback = Callable[[Sequence[BatchOperation]], List[OperationResult]]


class BatchBuilder:
    """
    Collects write operations and sends them as one transaction.

    Returned by :meth:`FileMaker.batch`. Operations run in the order they were
    added; either all succeed or none does.

    Example::

        results = (fm.batch()
                   .update("Findings", {"ID": "FINDING-280DC895", "FINDING": "Example 1 2 3"})
                   .create("Findings", {"FINDING": "Example body"})
                   .delete("Findings", "SOME-FINDING-ID")
                   .execute())

        updated = results[0].body  # the server echoes updated records
    """

    def __init__(self, connection: ConnectionInfo, callback: BatchCallback) -> None:
        self._connection = connection
        self._callback = callback
        self._operations: List[BatchOperation] = []

    @property
    def operations(self) -> Tuple[BatchOperation, ...]:
        return tuple(self._operations)

    def create(self, table: str, record: Mapping[str, Any]) -> "BatchBuilder":
        """
        Add a record creation.

        :param table: Table name.
        :type table: str
        :param record: Field values of the new record.
        :type record: dict
        :return: Self for method chaining.
        :rtype: BatchBuilder
        """
        self._operations.append(CreateOperation(self._connection, table, record))
        return self

    def update(self, table: str, record: Mapping[str, Any]) -> "BatchBuilder":
        """
        Add a record update.

        :param table: Table name.
        :type table: str
        :param record: Changed fields plus the ``ID`` of the record to update.
        :type record: dict
        :return: Self for method chaining.
        :rtype: BatchBuilder
        :raises ~filemaker_odata.core.errors.ValidationError: If ``record`` has no ``ID``.
        """
        self._operations.append(UpdateOperation(self._connection, table, record))
        return self

    def delete(self, table: str, id: str) -> "BatchBuilder":
        """
        Add a record deletion.

        :param table: Table name.
        :type table: str
        :param id: Primary key of the record to delete.
        :type id: str
        :return: Self for method chaining.
        :rtype: BatchBuilder
        """
        self._operations.append(DeleteOperation(self._connection, table, id))
        return self

    def execute(self) -> List[OperationResult]:
        """
        Send the batch.

        :return: One result per operation, in the order they were added.
        :rtype: list[~filemaker_odata.core.results.OperationResult]
        :raises ~filemaker_odata.core.errors.OperationError: If the server rejected an
            operation. No partial results are returned.
        :raises ~filemaker_odata.core.errors.ProtocolError: If the response is malformed.
        :raises ~filemaker_odata.core.errors.RequestError: If the request failed.
        """
        return self._callback(self.operations)


__all__ = ["BatchBuilder"]
