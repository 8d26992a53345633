"""Tests for the comparison runner.

This module covers input validation, the JSON report written by
``run_delivery_comparison`` and the stored-plan fallback.
"""

import json
from datetime import date
from unittest.mock import patch

import pytest

from delivery_reconciler.errors import InputEmptyError, NoRecordsParsedError
from delivery_reconciler.plan_store import InMemoryPlanStore
from delivery_reconciler.runner import (
    NOTHING_MATCHED,
    compare_texts,
    run_delivery_comparison,
)

PLAN_TEXT = "\n".join(
    [
        "خطة التوزيع 4/3/2025",
        "Client Name\t3 KG\t5 KG\tV00\tCup",
        "Acme\t10\t5\t0\t0",
        "Xeno Market\t4\t0\t0\t2",
        "Total\t14\t5\t0\t2",
    ]
)
DELIVERY_TEXT = "\n".join(
    [
        "تقرير التسليم 5/3/2025",
        "Acme - 10small + 5large",
        "Zeta - 2cup",
    ]
)


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestCompareTexts:
    """Validation and orchestration of a single comparison."""

    def test_success(self):
        report = compare_texts(PLAN_TEXT, DELIVERY_TEXT)
        assert [r.status for r in report.rows] == ["Delivered", "Missed", "Unplanned"]
        assert report.metrics.fulfillment_rate == 50
        assert report.plan_date == "Tue Mar 04 2025"
        assert report.delivery_date == "Wed Mar 05 2025"
        assert "DELIVERED CLIENTS (1)" in report.text
        assert report.warning is None

    @pytest.mark.parametrize(
        "plan, delivery, kind",
        [("", DELIVERY_TEXT, "plan"), ("   ", DELIVERY_TEXT, "plan"), (PLAN_TEXT, None, "delivery")],
    )
    def test_empty_input(self, plan, delivery, kind):
        with pytest.raises(InputEmptyError) as excinfo:
            compare_texts(plan, delivery)
        assert excinfo.value.kind == kind

    def test_no_plan_records(self):
        with pytest.raises(NoRecordsParsedError, match="No valid clients found in the plan"):
            compare_texts("Client Name\t3 KG\nTotal\t0", DELIVERY_TEXT)

    def test_no_delivery_records(self):
        with pytest.raises(NoRecordsParsedError, match="No valid deliveries"):
            compare_texts(PLAN_TEXT, "Driver: Sam\n10:30")

    def test_nothing_matched_warning(self):
        report = compare_texts("Acme\t1\t0", "Zeta - 1small")
        assert report.warning == NOTHING_MATCHED

    def test_explicit_dates(self):
        report = compare_texts(
            PLAN_TEXT, DELIVERY_TEXT, plan_date=date(2025, 1, 2), delivery_date=date(2025, 1, 3)
        )
        assert report.plan_date == "Thu Jan 02 2025"


class TestRunDeliveryComparison:
    """JSON report generation."""

    def test_writes_success_report(self, tmp_path):
        directory = tmp_path / "clients.json"
        directory.write_text(
            json.dumps([{"name": "Xeno Market", "location": "Zone X", "isFreezr": True}]),
            encoding="utf-8",
        )
        path = run_delivery_comparison(
            PLAN_TEXT,
            DELIVERY_TEXT,
            directory_path=str(directory),
            output_path=str(tmp_path / "reports" / "out.json"),
        )

        payload = _read(path)
        assert payload["status"] == "success"
        assert payload["summary"] == {
            "totalPlanned": 2,
            "totalDelivered": 1,
            "missed": 1,
            "unplanned": 1,
            "extras": 1,
            "fulfillmentRate": 50,
        }
        assert payload["urgentFollowUps"][0]["clientName"] == "Xeno Market"
        assert payload["error"] is None

    def test_writes_error_report_for_missing_plan(self, tmp_path):
        path = run_delivery_comparison("", DELIVERY_TEXT, output_path=str(tmp_path / "out.json"))
        payload = _read(path)
        assert payload["status"] == "error"
        assert payload["error"] == "No plan provided"
        assert payload["missedClients"] == []

    def test_writes_error_report_for_missing_directory(self, tmp_path):
        path = run_delivery_comparison(
            PLAN_TEXT,
            DELIVERY_TEXT,
            directory_path=str(tmp_path / "missing.json"),
            output_path=str(tmp_path / "out.json"),
        )
        payload = _read(path)
        assert payload["status"] == "error"
        assert "Client directory not found" in payload["error"]

    def test_default_report_name(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        path = run_delivery_comparison(PLAN_TEXT, DELIVERY_TEXT)
        assert path.name == "delivery_report.json"
        assert (tmp_path / "delivery_report.json").exists()

    def test_plan_saved_then_reused_from_store(self, tmp_path):
        store = InMemoryPlanStore()
        run_delivery_comparison(PLAN_TEXT, DELIVERY_TEXT, output_path=str(tmp_path / "a.json"), plan_store=store)
        assert store.get_latest_plan().plan_date == "2025-03-04"

        # No plan text: the plan from the night before is used
        path = run_delivery_comparison(None, DELIVERY_TEXT, output_path=str(tmp_path / "b.json"), plan_store=store)
        assert _read(path)["summary"]["totalPlanned"] == 2

    def test_empty_store_reports_missing_plan(self, tmp_path):
        path = run_delivery_comparison(
            None, DELIVERY_TEXT, output_path=str(tmp_path / "out.json"), plan_store=InMemoryPlanStore()
        )
        assert _read(path)["error"].startswith("No distribution plan found")

    @patch("delivery_reconciler.runner.excel_reader.extract_directory")
    def test_excel_directory_dispatch(self, mock_extract, tmp_path):
        mock_extract.return_value = []
        run_delivery_comparison(
            PLAN_TEXT,
            DELIVERY_TEXT,
            directory_path=str(tmp_path / "clients.xlsx"),
            output_path=str(tmp_path / "out.json"),
        )
        mock_extract.assert_called_once()
