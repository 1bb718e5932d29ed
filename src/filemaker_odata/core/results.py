# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Result types for FileMaker OData operations.

- :class:`OperationResult`: Outcome of one operation inside a ``$batch`` changeset
- :class:`RecordsWithCount`: A page of records together with the server-side ``@odata.count``
- :class:`ScriptResult`: Outcome of running a FileMaker script
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a single batch operation.

    Results are returned in the same order as the operations were added to the batch.

    :param status_code: HTTP status code of the operation's response part.
    :type status_code: :class:`int`
    :param body: Parsed JSON echoed by the server (updates only), otherwise ``None``.

    Example::

        results = fm.batch().update("Contacts", {"ID": "42", "name": "Ada"}).execute()
        print(results[0].status_code, results[0].body["name"])
    """

    status_code: int
    body: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return self.status_code < 300


@dataclass(frozen=True)
class RecordsWithCount:
    """
    Records returned by a ``$count=true`` query.

    :param data: Records of the current page.
    :type data: :class:`list` of :class:`dict`
    :param count: Total number of matching records reported by the server.
    :type count: :class:`int`
    """

    data: List[Dict[str, Any]] = field(default_factory=list)
    count: int = 0


@dataclass(frozen=True)
class ScriptResult:
    """
    Outcome of a script invocation.

    :param success: ``True`` when the script returned code ``0``.
    :type success: :class:`bool`
    :param data: The script's result parameter when successful, otherwise ``None``.
    """

    success: bool
    data: Optional[Any] = None


__all__ = ["OperationResult", "RecordsWithCount", "ScriptResult"]
