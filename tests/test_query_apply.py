"""
Query applier tests - the generated SQL, without executing it.
"""

import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.dialects import sqlite

from app.core.exceptions import WrongInputError
from app.core.query import QuerySpec
from app.db.models import User
from app.db.query import apply_filters, apply_query

COLUMNS = User.QUERYABLE_COLUMNS


def _sql(stmt) -> str:
    return str(stmt.compile(dialect=sqlite.dialect(), compile_kwargs={"literal_binds": True}))


def test_apply_query_orders_filters_and_paginates():
    spec = QuerySpec(
        page=3,
        page_size=10,
        sort_by="first_name",
        sort_order="asc",
        filters={"country": ["ES", "GB"]},
    )

    sql = _sql(apply_query(spec, select(User), COLUMNS))

    assert "ORDER BY users.first_name ASC" in sql
    assert "users.country IN ('ES', 'GB')" in sql
    assert "LIMIT 10 OFFSET 20" in sql


def test_apply_query_descending_default():
    sql = _sql(apply_query(QuerySpec(), select(User), COLUMNS))
    assert "ORDER BY users.created_at DESC" in sql
    assert "LIMIT 100 OFFSET 0" in sql


def test_filters_are_anded_across_fields():
    stmt = apply_filters(select(User), COLUMNS, {"country": ["ES"], "nick_name": ["zen"]})
    sql = _sql(stmt)
    assert "users.country IN ('ES') AND users.nick_name IN ('zen')" in sql


def test_empty_filter_values_are_skipped():
    sql = _sql(apply_filters(select(User), COLUMNS, {"country": []}))
    assert "WHERE" not in sql


def test_count_and_list_share_predicates():
    filters = {"country": ["ES"], "last_name": ["jin1", "jin2"]}
    list_sql = _sql(apply_query(QuerySpec(filters=filters), select(User), COLUMNS))
    count_sql = _sql(apply_filters(select(func.count()).select_from(User), COLUMNS, filters))

    where = count_sql.split("WHERE", 1)[1].strip()
    assert where in list_sql
    assert "ORDER BY" not in count_sql
    assert "LIMIT" not in count_sql


def test_id_filter_values_are_parsed_as_uuid():
    ids = [uuid.uuid4(), uuid.uuid4()]
    stmt = apply_filters(select(User), COLUMNS, {"id": [str(i) for i in ids]})
    assert stmt.whereclause is not None


def test_invalid_filter_value_is_rejected():
    with pytest.raises(WrongInputError) as exc_info:
        apply_filters(select(User), COLUMNS, {"id": ["not-a-uuid"], "created_at": ["yesterday"]})

    assert [d.field for d in exc_info.value.details] == ["id", "created_at"]


def test_unknown_sort_field_is_rejected():
    with pytest.raises(WrongInputError) as exc_info:
        apply_query(QuerySpec(sort_by="name"), select(User), COLUMNS)

    detail = exc_info.value.details[0]
    assert (detail.field, detail.description) == ("sort_by", "sort_by name is not supported")
