"""
End-to-end closing scenarios through the gateway.

December 2024 for category UNI / data type U: cutoff 2024-12-20, today
2024-12-22.  P1 has five grace days (deadline 12-25), P2 none (deadline
12-20).
"""

from datetime import date

import pytest

from closing_batch.gateway import ClosingGateway
from tests.fakes import RecordingInvoker

PAYLOAD = {
    "category": "UNI",
    "dataType": "U",
    "month": 12,
    "year": 2024,
    "processCodes": ["P1", "P2"],
}


@pytest.fixture(autouse=True)
def december(make_period, make_process):
    make_period(12, 2024, date(2024, 12, 20))
    make_process("P1", category="UNI", data_type="U", grace_period_days=5)
    make_process("P2", category="UNI", data_type="U", grace_period_days=0)


def _gateway(db_session, clock, invoker) -> ClosingGateway:
    return ClosingGateway.build(db_session, clock=clock, invoker=invoker)


class TestDecemberClose:
    def test_late_process_blocks_batch(self, db_session, clock):
        invoker = RecordingInvoker()

        response = _gateway(db_session, clock, invoker).execute(PAYLOAD)

        assert response.status == 400
        assert response.body["code"] == "DEADLINE_VIOLATION"
        assert [v["code"] for v in response.body["details"]["invalid"]] == ["P2"]
        assert "20/12/2024" in response.body["message"]
        assert invoker.calls == []

    def test_override_runs_both_and_reports_failure(self, db_session, clock):
        invoker = RecordingInvoker(failures={"P2": "ORA-20010: carrier table locked"})

        response = _gateway(db_session, clock, invoker).execute(
            PAYLOAD, actor="supervisor", override_privilege=True,
        )

        assert response.status == 200
        assert response.body == {
            "succeeded": ["P1"],
            "failed": [{"code": "P2", "error": "ORA-20010: carrier table locked"}],
            "summaryMessage": "Execution completed: 1 success(es), 1 error(s)",
        }
        assert invoker.invoked_codes == ["P1", "P2"]
        assert {call.actor for call in invoker.calls} == {"supervisor"}
