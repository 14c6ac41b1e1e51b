"""
SQL rendering for generated statements and diff queries.
"""

from .quoting import quote_value
from .renderer import (
    RenderOp,
    diff_list,
    field_list,
    null_check_list,
    render_list,
    render_term,
    set_list,
    value_list,
    where_list,
)
from .statements import (
    Statement,
    StatementType,
    changed_rows_query,
    new_rows_query,
    old_rows_query,
    render_delete,
    render_insert,
    render_update,
    select_all_query,
)

__all__ = [
    "quote_value",
    "RenderOp",
    "render_list",
    "render_term",
    "field_list",
    "value_list",
    "set_list",
    "where_list",
    "null_check_list",
    "diff_list",
    "Statement",
    "StatementType",
    "render_insert",
    "render_update",
    "render_delete",
    "changed_rows_query",
    "new_rows_query",
    "old_rows_query",
    "select_all_query",
]
