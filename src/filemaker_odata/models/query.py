# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
OData query options and their query-string serialization.

:class:`QueryOptions` is an immutable description of the ``$select``, ``$top``,
``$skip``, ``$filter``, ``$expand``, ``$orderby`` and ``$count`` options of a
request. :func:`serialize_query` renders it the way FileMaker Server expects, and
:class:`QueryBuilder` offers a fluent way to assemble one.

For the options FileMaker supports, see
https://help.claris.com/en/odata-guide/content/query-option-filter.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Sequence, Tuple, Union
from urllib.parse import quote

from ..common.constants import RESERVED_SELECT_FIELDS
from ..core._error_codes import VALIDATION_NEGATIVE_VALUE, VALIDATION_SORT_DIRECTION, VALIDATION_SORT_SHAPE
from ..core.errors import ValidationError

if TYPE_CHECKING:
    from ..operations.query import QueryOperations

SortPair = Tuple[str, str]
OrderBy = Union[SortPair, Sequence[SortPair]]

_SORT_DIRECTIONS = ("asc", "desc")

# Characters left alone by JavaScript's encodeURIComponent besides [A-Za-z0-9_.~-]
_URI_COMPONENT_SAFE = "!*'()"


def _normalize_orderby(orderby: OrderBy) -> Tuple[SortPair, ...]:
    items = list(orderby)
    if items and isinstance(items[0], str):
        # A single (field, direction) pair
        items = [tuple(items)]
    pairs: List[SortPair] = []
    for item in items:
        if not isinstance(item, (tuple, list)) or len(item) != 2:
            raise ValidationError(
                f"Invalid orderby entry {item!r}; expected a (field, direction) pair.",
                subcode=VALIDATION_SORT_SHAPE,
            )
        column, direction = item
        direction = str(direction).lower()
        if direction not in _SORT_DIRECTIONS:
            raise ValidationError(
                f"Invalid sort direction {direction!r} for {column!r}; expected 'asc' or 'desc'.",
                subcode=VALIDATION_SORT_DIRECTION,
            )
        pairs.append((column, direction))
    return tuple(pairs)


@dataclass(frozen=True)
class QueryOptions:
    """
    Immutable description of the query options of a request.

    Every field is optional; absent fields are omitted from the query string.

    :param select: Field names to return.
    :type select: list[str] or None
    :param top: Maximum number of records to return.
    :type top: int or None
    :param skip: Number of records to skip.
    :type skip: int or None
    :param filter: Raw OData filter expression, passed through verbatim.
    :type filter: str or None
    :param expand: Raw ``$expand`` value, passed through verbatim.
    :type expand: str or None
    :param orderby: A ``(field, direction)`` pair or a sequence of them; direction is
        ``"asc"`` or ``"desc"``.
    :param count: Whether the server should include ``@odata.count``.
    :type count: bool or None

    :raises ValidationError: If ``top`` or ``skip`` is negative or a sort direction is invalid.

    Example::

        options = QueryOptions(select=["ID", "name"], top=10, orderby=("name", "asc"))
        serialize_query(options)
        # '$select="ID",name&$top=10&$orderby=name%20asc'
    """

    select: Optional[Sequence[str]] = None
    top: Optional[int] = None
    skip: Optional[int] = None
    filter: Optional[str] = None
    expand: Optional[str] = None
    orderby: Optional[OrderBy] = None
    count: Optional[bool] = None

    def __post_init__(self) -> None:
        for name in ("top", "skip"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValidationError(f"{name} must be non-negative, got {value}", subcode=VALIDATION_NEGATIVE_VALUE)
        if self.select is not None:
            object.__setattr__(self, "select", tuple(self.select))
        if self.orderby is not None:
            object.__setattr__(self, "orderby", _normalize_orderby(self.orderby))

    def with_count(self) -> "QueryOptions":
        """Return a copy of these options with ``count`` forced to ``True``."""
        return QueryOptions(
            select=self.select,
            top=self.top,
            skip=self.skip,
            filter=self.filter,
            expand=self.expand,
            orderby=self.orderby,
            count=True,
        )


def _select_field(name: str, reserved: Iterable[str]) -> str:
    return f'"{name}"' if name in reserved else name


def serialize_query(options: Optional[QueryOptions], reserved_fields: Iterable[str] = RESERVED_SELECT_FIELDS) -> str:
    """
    Render query options as an OData query string (without the leading ``?``).

    Keys are emitted in a fixed order: select, top, skip, filter, expand, orderby, count.

    - ``$select``: names joined with commas; names listed in ``reserved_fields``
      (by default only ``ID``) are wrapped in double quotes.
    - ``$top`` / ``$skip``: emitted as-is.
    - ``$filter`` / ``$expand``: emitted verbatim.
    - ``$orderby``: ``field direction`` pairs joined with commas, then percent-encoded
      as a whole.
    - ``$count``: ``true`` or ``false``.

    :param options: Query options, or ``None``.
    :type options: ~filemaker_odata.models.query.QueryOptions or None
    :param reserved_fields: Field names that must be quoted in ``$select``.
    :type reserved_fields: Iterable[str]
    :return: The query string; empty when no option is set.
    :rtype: str
    """
    if options is None:
        return ""

    reserved = frozenset(reserved_fields)
    params: List[Tuple[str, Any]] = []

    if options.select is not None:
        params.append(("$select", ",".join(_select_field(name, reserved) for name in options.select)))
    if options.top is not None:
        params.append(("$top", options.top))
    if options.skip is not None:
        params.append(("$skip", options.skip))
    if options.filter is not None:
        params.append(("$filter", options.filter))
    if options.expand is not None:
        params.append(("$expand", options.expand))
    if options.orderby is not None:
        rendered = ",".join(f"{column} {direction}" for column, direction in options.orderby)
        params.append(("$orderby", quote(rendered, safe=_URI_COMPONENT_SAFE)))
    if options.count is not None:
        params.append(("$count", "true" if options.count else "false"))

    return "&".join(f"{key}={value}" for key, value in params)


@dataclass
class QueryBuilder:
    """
    Fluent interface for building :class:`QueryOptions`.

    Example:
        Build and execute a query (via a FileMaker instance)::

            records = (fm.query.builder("Contacts")
                       .select("ID", "name")
                       .filter_eq("company", "Beezwax")
                       .order_by("name")
                       .top(10)
                       .execute())

        Build standalone options::

            options = QueryBuilder("Contacts").select("name").skip(20).build()
    """

    table: str
    _select: List[str] = field(default_factory=list)
    _filter: List[str] = field(default_factory=list)
    _orderby: List[SortPair] = field(default_factory=list)
    _expand: List[str] = field(default_factory=list)
    _top: Optional[int] = None
    _skip: Optional[int] = None
    _count: Optional[bool] = None
    _query_ops: Optional["QueryOperations"] = field(default=None, compare=False, repr=False)

    def select(self, *fields: str) -> "QueryBuilder":
        """
        Select specific fields to retrieve.

        :param fields: Field names to select.
        :type fields: str
        :return: Self for method chaining.
        :rtype: QueryBuilder
        """
        self._select.extend(fields)
        return self

    def filter_eq(self, field_name: str, value: Any) -> "QueryBuilder":
        """Add equality filter (field eq value)."""
        self._filter.append(f"{field_name} eq {self._format_value(value)}")
        return self

    def filter_ne(self, field_name: str, value: Any) -> "QueryBuilder":
        """Add not-equal filter (field ne value)."""
        self._filter.append(f"{field_name} ne {self._format_value(value)}")
        return self

    def filter_gt(self, field_name: str, value: Any) -> "QueryBuilder":
        self._filter.append(f"{field_name} gt {self._format_value(value)}")
        return self

    def filter_lt(self, field_name: str, value: Any) -> "QueryBuilder":
        self._filter.append(f"{field_name} lt {self._format_value(value)}")
        return self

    def filter_contains(self, field_name: str, value: str) -> "QueryBuilder":
        """Add contains filter (contains(field, value))."""
        self._filter.append(f"contains({field_name}, {self._format_value(value)})")
        return self

    def filter_raw(self, filter_string: str) -> "QueryBuilder":
        """
        Add a raw OData filter string.

        Use this for complex filters not covered by other methods.

        :param filter_string: Raw OData filter expression.
        :type filter_string: str
        :return: Self for method chaining.
        :rtype: QueryBuilder
        """
        self._filter.append(filter_string)
        return self

    def order_by(self, field_name: str, descending: bool = False) -> "QueryBuilder":
        """
        Add sorting order. Can be called multiple times for multi-field sorting.

        :param field_name: Field to sort by.
        :type field_name: str
        :param descending: Sort in descending order.
        :type descending: bool
        :return: Self for method chaining.
        :rtype: QueryBuilder
        """
        self._orderby.append((field_name, "desc" if descending else "asc"))
        return self

    def expand(self, *relations: str) -> "QueryBuilder":
        """Expand related tables."""
        self._expand.extend(relations)
        return self

    def top(self, count: int) -> "QueryBuilder":
        if count < 0:
            raise ValidationError("top must be non-negative", subcode=VALIDATION_NEGATIVE_VALUE)
        self._top = count
        return self

    def skip(self, count: int) -> "QueryBuilder":
        if count < 0:
            raise ValidationError("skip must be non-negative", subcode=VALIDATION_NEGATIVE_VALUE)
        self._skip = count
        return self

    def count(self, enabled: bool = True) -> "QueryBuilder":
        """Ask the server to include the total number of matching records."""
        self._count = enabled
        return self

    @staticmethod
    def _format_value(value: Any) -> str:
        """
        Format a value as an OData literal.

        :param value: Value to format.
        :return: OData-formatted value string.
        :rtype: str
        """
        if value is None:
            return "null"
        if isinstance(value, str):
            # Escape single quotes by doubling them
            escaped = value.replace("'", "''")
            return f"'{escaped}'"
        if isinstance(value, bool):
            return str(value).lower()
        return str(value)

    def build(self) -> QueryOptions:
        """
        Build the immutable query options.

        :return: Options reflecting every call made on this builder.
        :rtype: QueryOptions

        Example::

            QueryBuilder("Contacts").filter_eq("name", "Fede").top(1).build()
            # QueryOptions(filter="name eq 'Fede'", top=1)
        """
        return QueryOptions(
            select=list(self._select) if self._select else None,
            top=self._top,
            skip=self._skip,
            filter=" and ".join(self._filter) if self._filter else None,
            expand=",".join(self._expand) if self._expand else None,
            orderby=list(self._orderby) if self._orderby else None,
            count=self._count,
        )

    def execute(self) -> List[Any]:
        """
        Execute the query and return the matching records.

        Only available when the builder was created via ``fm.query.builder(table)``.

        :raises RuntimeError: If the builder is not bound to a FileMaker instance.
        """
        if self._query_ops is None:
            raise RuntimeError(
                "Cannot execute: query was not created via fm.query.builder(). "
                "Use fm.query.get(table, builder.build()) instead."
            )
        return self._query_ops.get(self.table, self.build())


__all__ = ["QueryOptions", "QueryBuilder", "serialize_query"]
