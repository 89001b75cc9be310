import typing as t

from .errors import CatalogQueryError, UnsupportedColumnKind

EVENTS = ("insert", "update", "delete")


class SourceColumn(t.NamedTuple):
    name: str
    sql_type: str
    nullable: bool = True
    is_primary_key: bool = False
    comment: str = ""

    @classmethod
    def from_row(cls, row: t.Mapping[str, t.Any]) -> "SourceColumn":
        """
        Builds a column from an information_schema.COLUMNS row, using the
        catalog's own spelling of nullability ('YES'/'NO') and keys ('PRI').
        """
        name = row.get("COLUMN_NAME")
        sql_type = row.get("COLUMN_TYPE")
        if not name or not sql_type:
            raise UnsupportedColumnKind(
                f"column metadata needs a name and a type, got {dict(row)!r}"
            )
        return cls(
            name=name,
            sql_type=sql_type,
            nullable=row.get("IS_NULLABLE") == "YES",
            is_primary_key=row.get("COLUMN_KEY") == "PRI",
            comment=row.get("COLUMN_COMMENT") or "",
        )


class ExistingTrigger(t.NamedTuple):
    name: str
    event: str
    action_body: str

    @classmethod
    def from_row(cls, row: t.Mapping[str, t.Any]) -> "ExistingTrigger":
        event = (row.get("EVENT_MANIPULATION") or "").lower()
        if event not in EVENTS:
            raise CatalogQueryError(
                f"trigger {row.get('TRIGGER_NAME')!r} has unknown event {event!r}"
            )
        return cls(
            name=row["TRIGGER_NAME"],
            event=event,
            action_body=row.get("ACTION_STATEMENT") or "",
        )


class SourceTable(t.NamedTuple):
    name: str
    columns: t.Sequence[SourceColumn]
    triggers: t.Sequence[ExistingTrigger] = ()


# Metadata columns present in every audit table, in this order. audit_pk is
# the table's primary key: TIMESTAMP only resolves whole seconds, so events in
# the same second are ordered by the auto-incremented surrogate instead.
AUDIT_COLUMNS: t.Tuple[SourceColumn, ...] = (
    SourceColumn(
        "audit_user",
        "VARCHAR(255)",
        nullable=False,
        comment="User triggering source table event",
    ),
    SourceColumn(
        "audit_event",
        "ENUM('insert','update','delete')",
        nullable=False,
        comment="Type of source table event",
    ),
    SourceColumn(
        "audit_timestamp",
        "TIMESTAMP",
        nullable=False,
        comment="Timestamp of source table event",
    ),
    SourceColumn(
        "audit_pk",
        "INT(11) UNSIGNED",
        nullable=False,
        comment=(
            "Audit table primary key, useful for sorting since MySQL time "
            "data types are only granular to second level."
        ),
    ),
)

AUDIT_PK = "audit_pk"

# Holds every source value packed with COLUMN_CREATE() in dynamic mode.
DYNAMIC_COLUMN = SourceColumn(
    "audit_columns",
    "BLOB",
    nullable=False,
    comment="Dynamic columns for source table",
)
