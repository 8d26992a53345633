import pytest

from delivery_reconciler.errors import InputEmptyError, NoRecordsParsedError, PlanNotFoundError
from delivery_reconciler.model import (
    ComparisonReport,
    DeliveredRecord,
    PlannedRecord,
    QuantitySet,
    ReconciliationRow,
)


# --------------------------------------------------------------------
# QUANTITY SET
# --------------------------------------------------------------------
def test_quantity_set_defaults_to_zero():
    quantities = QuantitySet()
    assert quantities.as_dict() == {"SMALL": 0, "LARGE": 0, "VARIANT": 0, "CUP": 0}
    assert quantities.total == 0
    assert quantities.is_empty()


def test_quantity_set_arithmetic():
    planned = QuantitySet(10, 5)
    delivered = QuantitySet(8, 6, 0, 1)
    assert delivered - planned == QuantitySet(-2, 1, 0, 1)
    assert planned + delivered == QuantitySet(18, 11, 0, 1)
    assert planned.negated() == QuantitySet(-10, -5)


def test_quantity_set_from_mapping_and_values():
    assert QuantitySet.from_mapping({"CUP": 2}).cup == 2
    assert QuantitySet.from_values([1, 2, 3, 4, 5]) == QuantitySet(1, 2, 3, 4)
    with pytest.raises(ValueError):
        QuantitySet.from_mapping({"BOX": 1})


def test_quantity_set_get_and_str():
    quantities = QuantitySet(3, 0, 1)
    assert quantities.get("VARIANT") == 1
    assert str(quantities) == "3KG:3, 5KG:0, V00:1, Cup:0"
    with pytest.raises(KeyError):
        quantities.get("BOX")


# --------------------------------------------------------------------
# RECORDS
# --------------------------------------------------------------------
def test_record_totals():
    assert PlannedRecord("Acme", QuantitySet(1, 2)).total_quantity == 3
    assert DeliveredRecord("Acme", QuantitySet(0, 0, 0, 4)).total_delivered == 4


def test_records_are_immutable():
    record = PlannedRecord("Acme", QuantitySet(1))
    with pytest.raises(AttributeError):
        record.client_name = "Beta"


def test_urgent_follow_ups():
    urgent = ReconciliationRow(
        "Xeno", "Missed", QuantitySet(1), QuantitySet(), QuantitySet(-1),
        has_freezer=True, follow_up_action="urgent_followup",
    )
    regular = ReconciliationRow(
        "Beta", "Missed", QuantitySet(1), QuantitySet(), QuantitySet(-1),
        follow_up_action="followup",
    )
    report = ComparisonReport(rows=[urgent, regular])
    assert report.urgent_follow_ups == [urgent]


# --------------------------------------------------------------------
# ERRORS
# --------------------------------------------------------------------
def test_error_messages():
    assert str(InputEmptyError("plan")) == "No plan provided"
    assert str(InputEmptyError("delivery")) == "No deliveries provided"
    assert str(NoRecordsParsedError("delivery")) == "No valid deliveries found in the report"
    assert isinstance(PlanNotFoundError(), ValueError)
