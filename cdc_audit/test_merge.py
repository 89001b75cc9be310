import logging

import pytest

from .merge import collect_custom_actions, extract_custom_action
from .schema import ExistingTrigger

GENERATED_BODY = """BEGIN
  INSERT INTO `shop`.`orders_audit` (`audit_timestamp`) VALUES(CURRENT_TIMESTAMP);
  UPDATE stats SET orders = orders + 1;
 END"""


def test_keeps_custom_lines_and_drops_audit_inserts() -> None:
    trigger = ExistingTrigger("orders_after_insert", "insert", GENERATED_BODY)
    action = extract_custom_action(trigger, "orders_audit")
    assert action == "  UPDATE stats SET orders = orders + 1;"


def test_markers_are_case_insensitive_and_blank_lines_dropped() -> None:
    body = "\n begin\n\n   SET @a = 1;\n   \n   SET @b = 2;\nEnd \n"
    trigger = ExistingTrigger("t_after_update", "update", body)
    assert extract_custom_action(trigger, "t_audit") == "   SET @a = 1;\n   SET @b = 2;"


def test_only_audit_statements_yield_nothing() -> None:
    body = "BEGIN\n  INSERT INTO orders_audit VALUES (1);\nEND"
    trigger = ExistingTrigger("orders_after_delete", "delete", body)
    assert extract_custom_action(trigger, "orders_audit") is None


@pytest.mark.parametrize(
    "body",
    [
        "BEGIN\n  SET @a = 1;\n",
        "  SET @a = 1;\nEND",
        "INSERT INTO log VALUES (NEW.id)",
        "BEGIN SET @a = 1; ENDING",
    ],
)
def test_malformed_bodies_warn_and_are_not_reused(
    body: str, caplog: pytest.LogCaptureFixture
) -> None:
    trigger = ExistingTrigger("broken", "insert", body)
    with caplog.at_level(logging.WARNING, logger="cdc_audit"):
        assert extract_custom_action(trigger, "orders_audit") is None
    assert "broken" in caplog.text


def test_actions_are_grouped_per_event_in_catalog_order() -> None:
    triggers = [
        ExistingTrigger("a", "insert", "BEGIN\nSET @first = 1;\nEND"),
        ExistingTrigger("b", "delete", "BEGIN\nSET @gone = 1;\nEND"),
        ExistingTrigger("c", "insert", "BEGIN\nSET @second = 1;\nEND"),
        ExistingTrigger("d", "update", "oops"),
    ]
    actions = collect_custom_actions(triggers, "orders_audit")
    assert actions == {
        "insert": "SET @first = 1;\nSET @second = 1;",
        "delete": "SET @gone = 1;",
    }


def test_audit_table_is_matched_as_a_whole_identifier() -> None:
    body = (
        "BEGIN\n"
        "  INSERT INTO `shop`.`a_orders` (`audit_event`) VALUES('update');\n"
        "  UPDATE data_orders SET touched = NOW();\n"
        "  DELETE FROM a_orders WHERE audit_pk < 0;\n"
        "END"
    )
    trigger = ExistingTrigger("orders_after_update", "update", body)
    action = extract_custom_action(trigger, "a_orders")
    assert action == "  UPDATE data_orders SET touched = NOW();"
