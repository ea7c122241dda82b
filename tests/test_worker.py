"""Tests for the start/complete/error message boundary."""

from concurrent.futures import ThreadPoolExecutor

from flowplan.workflows import PlanWorker, handle_message
from tests.fixtures.solver_fakes import FirstCandidateSolver


class TestHandleMessage:
    """Tests for handle_message."""

    def test_complete_message(self, start_payload):
        reply = handle_message({"type": "start", "payload": start_payload}, solver=FirstCandidateSolver())

        assert reply["type"] == "complete"
        assert len(reply["results"]) == 365
        assert reply["results"][0]["date"] == "2025-01-01"
        assert reply["results"][0]["actual_shipment_qty"] == 60

    def test_other_message_types_ignored(self):
        assert handle_message({"type": "ping"}) is None
        assert handle_message({}) is None

    def test_missing_caps(self, start_payload):
        del start_payload["maxStandardProduction"]

        reply = handle_message({"type": "start", "payload": start_payload})

        assert reply == {
            "type": "error",
            "message": "Missing critical parameters: targetDailyProduction or maxStandardProduction.",
        }

    def test_missing_payload(self):
        reply = handle_message({"type": "start"})

        assert reply["type"] == "error"
        assert "results" not in reply

    def test_conflict_reports_partial_results(self, start_payload):
        start_payload["cities"] = [{"name": "Denver", "qty": 50_000, "freq": 365, "chosenStartDay": 30}]

        reply = handle_message({"type": "start", "payload": start_payload}, solver=FirstCandidateSolver())

        assert reply["type"] == "error"
        assert reply["message"].startswith("Demand Conflict Day 30: Short by ")
        assert len(reply["results"]) == 365

    def test_build_ratios_not_a_mapping(self, start_payload):
        start_payload["buildRatios"] = 5

        reply = handle_message({"type": "start", "payload": start_payload}, solver=FirstCandidateSolver())

        assert reply["type"] == "error"
        assert "buildRatios" in reply["message"]

    def test_numeric_string_quantity_accepted(self, start_payload):
        start_payload["cities"][0]["qty"] = "60"

        reply = handle_message({"type": "start", "payload": start_payload}, solver=FirstCandidateSolver())

        assert reply["type"] == "complete"
        assert reply["results"][0]["actual_shipment_qty"] == 60

    def test_non_numeric_quantity(self, start_payload):
        start_payload["cities"][0]["qty"] = "lots"

        reply = handle_message({"type": "start", "payload": start_payload}, solver=FirstCandidateSolver())

        assert reply == {"type": "error", "message": "Invalid city entry 0: quantity 'lots'"}

    def test_payload_not_a_mapping(self):
        reply = handle_message({"type": "start", "payload": ["not", "a", "payload"]})

        assert reply["type"] == "error"
        assert reply["message"].startswith("Worker crash: ")


class TestPlanWorker:
    """Tests for PlanWorker."""

    def test_submit(self, start_payload):
        with PlanWorker(solver=FirstCandidateSolver()) as worker:
            reply = worker.submit({"type": "start", "payload": start_payload}).result(timeout=60)

        assert reply["type"] == "complete"

    def test_runs_in_order(self, start_payload):
        with PlanWorker(solver=FirstCandidateSolver()) as worker:
            futures = [
                worker.submit({"type": "start", "payload": start_payload}),
                worker.submit({"type": "start", "payload": {}}),
            ]
            replies = [f.result(timeout=60) for f in futures]

        assert [r["type"] for r in replies] == ["complete", "error"]

    def test_external_executor_not_shut_down(self):
        executor = ThreadPoolExecutor(max_workers=1)
        PlanWorker(executor=executor).shutdown()

        assert executor.submit(lambda: 1).result(timeout=5) == 1
        executor.shutdown()
