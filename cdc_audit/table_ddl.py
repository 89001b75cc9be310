import typing as t

from .config import AuditConfig
from .errors import UnsupportedColumnKind
from .naming import audit_table_name, qualified, quote_identifier, quote_string
from .schema import AUDIT_COLUMNS, AUDIT_PK, DYNAMIC_COLUMN, SourceColumn, SourceTable

HEADER = """/**
 * Audit table for table {source}.
 *
 * !!! DO NOT MODIFY THIS FILE MANUALLY !!!
 *
 * This file is auto-generated and is NOT intended
 * for manual modifications/extensions.
 *
 */
"""


class RenderedColumn(t.NamedTuple):
    name: str
    sql_type: str
    nullable: bool
    comment: str
    primary_key: bool = False
    auto_increment: bool = False


def _validate(column: SourceColumn) -> None:
    if not column.name or not column.sql_type:
        raise UnsupportedColumnKind(
            f"column metadata needs a name and a type, got {tuple(column)!r}"
        )


def _render_column(column: SourceColumn, comment: t.Optional[str] = None) -> RenderedColumn:
    _validate(column)
    is_audit_pk = column.name == AUDIT_PK and column in AUDIT_COLUMNS
    return RenderedColumn(
        name=column.name,
        sql_type=column.sql_type.upper(),
        nullable=column.nullable,
        comment=column.comment if comment is None else comment,
        primary_key=is_audit_pk,
        auto_increment=is_audit_pk,
    )


def map_columns(
    table: str, columns: t.Sequence[SourceColumn], dynamic: bool
) -> t.Tuple[t.List[RenderedColumn], t.List[str]]:
    """
    Projects the source columns onto the audit table layout.

    Returns the rendered columns, always led by the four audit metadata
    columns, and the names of the source primary key columns that should be
    indexed. Dynamic mode replaces every source column with the single
    audit_columns blob, so it never has primary key columns to index.
    """
    rendered = [_render_column(column) for column in AUDIT_COLUMNS]
    pk_columns: t.List[str] = []

    if dynamic:
        for column in columns:
            _validate(column)
        rendered.append(_render_column(DYNAMIC_COLUMN))
        return rendered, pk_columns

    for column in columns:
        if column.is_primary_key:
            pk_columns.append(column.name)
            rendered.append(
                _render_column(column, comment=f"Primary key in source table {table}")
            )
        else:
            rendered.append(_render_column(column))

    return rendered, pk_columns


def _column_sql(column: RenderedColumn) -> str:
    parts = [
        quote_identifier(column.name),
        column.sql_type,
        "NULL" if column.nullable else "NOT NULL",
    ]
    if column.primary_key:
        parts.append("PRIMARY KEY")
    if column.auto_increment:
        parts.append("AUTO_INCREMENT")
    parts.append(f"COMMENT {quote_string(column.comment)}")
    return " ".join(parts)


def _index_sql(names: t.Iterable[str]) -> str:
    return "INDEX (" + ", ".join(quote_identifier(name) for name in names) + ")"


def render_table_ddl(
    table: str,
    audit_table: str,
    db: str,
    audit_db: str,
    columns: t.Sequence[RenderedColumn],
    pk_columns: t.Sequence[str],
) -> str:
    lines = [_column_sql(column) for column in columns]
    if pk_columns:
        lines.append(_index_sql(pk_columns))
    lines.append(_index_sql(["audit_timestamp"]))

    body = ",\n".join(f"    {line}" for line in lines)
    return (
        HEADER.format(source=qualified(db, table))
        + f"CREATE TABLE IF NOT EXISTS {qualified(audit_db, audit_table)} (\n"
        + body
        + "\n);\n\n\n"
    )


def render_audit_table(table: SourceTable, config: AuditConfig) -> str:
    """Builds the CREATE TABLE block of a table's artifact."""
    columns, pk_columns = map_columns(table.name, table.columns, config.dynamic_columns)
    return render_table_ddl(
        table.name,
        audit_table_name(table.name, config),
        config.db,
        config.audit_db,
        columns,
        pk_columns,
    )
