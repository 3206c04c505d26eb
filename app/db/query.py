"""
Apply a QuerySpec to a SQLAlchemy select.

apply_filters is the only place filter predicates are built, so the count
and list queries of a repository always agree on which rows qualify.
Nothing here executes SQL.
"""

import uuid
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import Select
from sqlalchemy.orm import InstrumentedAttribute

from app.core.exceptions import WrongInputError
from app.core.query import ERR_CODE_INVALID_PARAMETER, PARAM_SORT_BY, QuerySpec

Columns = Mapping[str, InstrumentedAttribute]


def _coerce(column: InstrumentedAttribute, raw: str) -> Any:
    """Convert a raw filter value to the column's python type."""
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return raw
    if python_type is uuid.UUID:
        return uuid.UUID(raw)
    if python_type is datetime:
        return datetime.fromisoformat(raw)
    return raw


def apply_filters(stmt: Select, columns: Columns, filters: Mapping[str, list[str]]) -> Select:
    """Add `column IN (values)` for every filter with at least one value."""
    err = WrongInputError(ERR_CODE_INVALID_PARAMETER)
    for field, values in filters.items():
        if not values:
            continue
        column = columns.get(field)
        if column is None:
            err.add_detail(field, f"parameter {field} is not supported")
            continue
        try:
            coerced = [_coerce(column, v) for v in values]
        except ValueError:
            err.add_detail(field, f"invalid value for {field}")
            continue
        stmt = stmt.where(column.in_(coerced))
    if err.details:
        raise err
    return stmt


def resolve_sort_column(columns: Columns, sort_by: str) -> InstrumentedAttribute:
    column = columns.get(sort_by)
    if column is None:
        err = WrongInputError(ERR_CODE_INVALID_PARAMETER)
        err.add_detail(PARAM_SORT_BY, f"sort_by {sort_by} is not supported")
        raise err
    return column


def apply_query(spec: QuerySpec, stmt: Select, columns: Columns) -> Select:
    """Order, filter and paginate stmt according to spec."""
    column = resolve_sort_column(columns, spec.sort_by)
    stmt = stmt.order_by(column.asc() if spec.sort_order == "asc" else column.desc())
    stmt = apply_filters(stmt, columns, spec.filters)
    return stmt.offset(spec.offset).limit(spec.page_size)
