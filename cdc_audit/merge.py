"""
Recovers hand-written statements from previously generated triggers.

Combined-lifecycle triggers are rebuilt from metadata on every run, so any
statement a table owner appended to one of them would be lost. Before the old
trigger is dropped its action body is unwrapped and every line that does not
write to the audit table is kept, to be replayed in the new trigger.

This is line-based string surgery, not SQL parsing: a custom statement that
names the audit table as an identifier, or spans a line that does, is dropped.
"""

import logging
import re
import typing as t

from .errors import MalformedTriggerBody
from .naming import quote_identifier
from .schema import EVENTS, ExistingTrigger

logger = logging.getLogger(__name__)

_WRAPPED = re.compile(r"\Abegin\b(?P<body>.*)\bend\Z", re.IGNORECASE | re.DOTALL)


def _unwrap(trigger: ExistingTrigger) -> str:
    match = _WRAPPED.match(trigger.action_body.strip())
    if match is None:
        raise MalformedTriggerBody(
            f"action statement of {trigger.name} does not begin with BEGIN "
            "and end with END"
        )
    return match.group("body")


def _audit_table_reference(audit_table: str) -> t.Pattern[str]:
    """
    Matches the audit table as a whole identifier, bare or backtick-quoted,
    so that a table like data_orders is not mistaken for a_orders.
    """
    bare = rf"(?<![\w$]){re.escape(audit_table)}(?![\w$])"
    return re.compile(f"{re.escape(quote_identifier(audit_table))}|{bare}")


def extract_custom_action(trigger: ExistingTrigger, audit_table: str) -> t.Optional[str]:
    """
    Returns the custom lines of an existing trigger body, verbatim, or None
    if there are none or the body cannot be unwrapped.
    """
    try:
        body = _unwrap(trigger)
    except MalformedTriggerBody as exc:
        logger.warning("%s, not reusing its action", exc)
        return None

    reference = _audit_table_reference(audit_table)
    lines = [
        line
        for line in body.split("\n")
        if line.strip() and not reference.search(line)
    ]
    if not lines:
        return None

    logger.info("Extracted action from %s", trigger.name)
    return "\n".join(lines)


def collect_custom_actions(
    triggers: t.Iterable[ExistingTrigger], audit_table: str
) -> t.Dict[str, str]:
    """
    Maps each event to the custom action to replay for it. Several triggers
    on the same event all get dropped, so their actions are concatenated in
    catalog order.
    """
    collected: t.Dict[str, t.List[str]] = {event: [] for event in EVENTS}
    for trigger in triggers:
        action = extract_custom_action(trigger, audit_table)
        if action is not None:
            collected[trigger.event].append(action)
    return {event: "\n".join(actions) for event, actions in collected.items() if actions}
