"""
Query parameters for list endpoints: pagination, sorting and filtering.

parse_query turns untrusted URL parameters into a validated QuerySpec.
Every problem found is collected into a single WrongInputError; parsing
never stops at the first bad parameter.

Note that page_size is not capped here. For example
/users?country=UK&country=ES&first_name=John is parsed as
filters={"country": ["UK", "ES"], "first_name": ["John"]}.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any, Literal
from urllib.parse import parse_qsl

from pydantic import BaseModel, ConfigDict, Field

from app.core.exceptions import WrongInputError

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 100
DEFAULT_SORT_BY = "created_at"
DEFAULT_SORT_ORDER = "desc"

PARAM_PAGE = "page"
PARAM_PAGE_SIZE = "page_size"
PARAM_SORT_BY = "sort_by"
PARAM_SORT_ORDER = "sort_order"

ERR_CODE_INVALID_PARAMETER = "INVALID_QUERY_PARAMETERS"

# Fields clients may filter on. Any other key outside the four
# pagination/sort keys is rejected.
FILTERABLE_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "nick_name",
        "password",
        "email",
        "country",
        "created_at",
        "updated_at",
        "id",
    }
)
PAGINATION_PARAMS = frozenset({PARAM_PAGE, PARAM_PAGE_SIZE, PARAM_SORT_BY, PARAM_SORT_ORDER})

_INT_RE = re.compile(r"[+-]?[0-9]+")
# Values must fit a signed 64-bit column
MAX_INT = 2**63 - 1

SortOrder = Literal["asc", "desc"]


class QuerySpec(BaseModel):
    """Validated description of a list request."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(DEFAULT_PAGE, ge=1)
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1)
    sort_by: str = DEFAULT_SORT_BY
    sort_order: SortOrder = DEFAULT_SORT_ORDER
    # Multiple values per field are OR'ed, fields are AND'ed
    filters: dict[str, list[str]] = Field(default_factory=dict)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def _to_multimap(params: Any) -> dict[str, list[str]]:
    """Normalize QueryParams, mappings or (key, value) pairs to key -> values."""
    if hasattr(params, "multi_items"):
        pairs: Iterable[tuple[str, str]] = params.multi_items()
    elif isinstance(params, Mapping):
        pairs = []
        for key, value in params.items():
            if isinstance(value, (list, tuple)):
                pairs.extend((key, v) for v in value)
            else:
                pairs.append((key, value))
    else:
        pairs = params

    result: dict[str, list[str]] = {}
    for key, value in pairs:
        result.setdefault(key, []).append(value)
    return result


def _parse_positive_int(
    raw: str, field: str, not_number: str, not_positive: str, err: WrongInputError
) -> int | None:
    significant = raw.lstrip("+-").lstrip("0")
    if (
        not _INT_RE.fullmatch(raw)
        or len(significant) > len(str(MAX_INT))
        or int(raw) > MAX_INT
    ):
        err.add_detail(field, not_number)
        return None
    value = int(raw)
    if value < 1:
        err.add_detail(field, not_positive)
        return None
    return value


def parse_query(params: Any) -> QuerySpec:
    """
    Parse raw query parameters into a QuerySpec.

    Args:
        params: Starlette QueryParams, a mapping of key to value(s), or an
            iterable of (key, value) pairs.

    Returns:
        QuerySpec with defaults applied for missing parameters.

    Raises:
        WrongInputError: with one detail per invalid or unsupported parameter.
    """
    values = _to_multimap(params)
    err = WrongInputError(ERR_CODE_INVALID_PARAMETER)

    def first(key: str) -> str:
        return values.get(key, [""])[0]

    page = DEFAULT_PAGE
    if raw := first(PARAM_PAGE):
        page = _parse_positive_int(
            raw,
            PARAM_PAGE,
            "page must be a number",
            "page number must be greater than 0",
            err,
        ) or DEFAULT_PAGE

    page_size = DEFAULT_PAGE_SIZE
    if raw := first(PARAM_PAGE_SIZE):
        page_size = _parse_positive_int(
            raw,
            PARAM_PAGE_SIZE,
            "page_size must be a number",
            "page_size must be greater than 0",
            err,
        ) or DEFAULT_PAGE_SIZE

    sort_by = first(PARAM_SORT_BY) or DEFAULT_SORT_BY

    sort_order = DEFAULT_SORT_ORDER
    if raw := first(PARAM_SORT_ORDER):
        if raw.lower() in ("asc", "desc"):
            sort_order = raw.lower()
        else:
            err.add_detail(PARAM_SORT_ORDER, "sort_order must be desc or asc")

    filters: dict[str, list[str]] = {}
    for key, vals in values.items():
        if key in PAGINATION_PARAMS:
            continue
        if key in FILTERABLE_FIELDS:
            filters[key] = vals
        else:
            err.add_detail(key, f"parameter {key} is not supported")

    if err.details:
        raise err

    return QuerySpec(
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_order=sort_order,
        filters=filters,
    )


def parse_query_string(query_string: str) -> QuerySpec:
    """Parse a raw URL query string such as "page=2&country=ES"."""
    return parse_query(parse_qsl(query_string, keep_blank_values=True))
