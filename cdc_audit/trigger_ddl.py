import logging
import typing as t

from .config import AuditConfig
from .merge import collect_custom_actions
from .naming import (
    audit_table_name,
    qualified,
    quote_identifier,
    quote_string,
    trigger_name,
)
from .schema import EVENTS, ExistingTrigger, SourceColumn, SourceTable

logger = logging.getLogger(__name__)

HEADER = """/**
 * Audit triggers for table {source}.
 *
 */
"""


def _row_ref(event: str) -> str:
    return "OLD" if event == "delete" else "NEW"


def _insert_columns(columns: t.Sequence[SourceColumn], dynamic: bool) -> t.List[str]:
    fields = ["audit_timestamp", "audit_event", "audit_user"]
    if dynamic:
        fields.append("audit_columns")
    else:
        fields.extend(column.name for column in columns)
    return fields


def _insert_values(
    columns: t.Sequence[SourceColumn], event: str, dynamic: bool
) -> t.List[str]:
    """
    Values matching _insert_columns(). Deletes read the vanished row through
    OLD, inserts and updates record the row as it is now through NEW.
    """
    ref = _row_ref(event)
    values = ["CURRENT_TIMESTAMP", f"'{event}'", "USER()"]
    if dynamic:
        pairs: t.List[str] = []
        for column in columns:
            pairs.append(quote_string(column.name))
            pairs.append(f"{ref}.{quote_identifier(column.name)}")
        values.append("COLUMN_CREATE(" + ", ".join(pairs) + ")")
    else:
        values.extend(f"{ref}.{quote_identifier(column.name)}" for column in columns)
    return values


def _owned_triggers(
    table: SourceTable, config: AuditConfig
) -> t.List[ExistingTrigger]:
    """
    The existing triggers this run replaces. Combined mode rebuilds every
    AFTER trigger of the table; separate mode only touches the ones carrying
    its own <table>_audit_<event> names and leaves the rest alone.
    """
    if not config.separate:
        return list(table.triggers)

    own_names = {trigger_name(table.name, event, config).lower() for event in EVENTS}
    owned = []
    for trigger in table.triggers:
        if trigger.name.lower() in own_names:
            owned.append(trigger)
        else:
            logger.info("Non-audit trigger encountered: %s. skipping", trigger.name)
    return owned


def _create_trigger_sql(
    table: SourceTable,
    event: str,
    config: AuditConfig,
    audit_table: str,
    custom_action: t.Optional[str],
) -> str:
    dynamic = config.dynamic_columns
    fields = ", ".join(
        quote_identifier(name) for name in _insert_columns(table.columns, dynamic)
    )
    values = ", ".join(_insert_values(table.columns, event, dynamic))
    name = trigger_name(table.name, event, config)
    action = f"{custom_action}\n" if custom_action else ""
    return (
        f"-- {table.name} AFTER {event.upper()} trigger.\n"
        "DELIMITER @@\n"
        f"CREATE TRIGGER {qualified(config.db, name)} "
        f"AFTER {event.upper()} ON {qualified(config.db, table.name)}\n"
        " FOR EACH ROW BEGIN\n"
        f"  INSERT INTO {qualified(config.audit_db, audit_table)} ({fields}) "
        f"VALUES({values});\n"
        f"{action}"
        " END;\n"
        "@@\n"
    )


def render_triggers(table: SourceTable, config: AuditConfig) -> str:
    """
    Builds the trigger block of a table's artifact: drops for the triggers
    being replaced, then one AFTER trigger per event writing to the audit
    table. In combined mode any custom statements found in the dropped
    triggers are replayed after the audit insert.
    """
    audit_table = audit_table_name(table.name, config)
    owned = _owned_triggers(table, config)

    custom_actions: t.Dict[str, str] = {}
    if not config.separate:
        custom_actions = collect_custom_actions(owned, audit_table)

    output = HEADER.format(source=qualified(config.db, table.name))
    for trigger in owned:
        output += f"DROP TRIGGER IF EXISTS {qualified(config.db, trigger.name)};\n"

    for event in EVENTS:
        output += _create_trigger_sql(
            table, event, config, audit_table, custom_actions.get(event)
        )

    return output + "DELIMITER ;\n"
