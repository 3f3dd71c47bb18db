import unittest
from unittest.mock import MagicMock, call

from core.executor import PlanExecutor
from core.types import PlanEntry, PlanDecision, LogEntry, LogOutcome, OperationCancelled
from providers.interface import IDriveClient, TransportError


class TestPlanExecutor(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock(spec=IDriveClient)
        self.executor = PlanExecutor(self.client)
        self.plan = [
            PlanEntry(PlanDecision.INFORMATIONAL, "root", "r"),
            PlanEntry(PlanDecision.TO_DELETE, "root/a.txt", "a"),
            PlanEntry(PlanDecision.INFORMATIONAL, "root/sub", "s"),
            PlanEntry(PlanDecision.TO_DELETE, "root/sub/b.txt", "b"),
            PlanEntry(PlanDecision.TO_DELETE, "root/sub/c.txt", "c"),
        ]

    def test_simulate_does_not_delete(self):
        messages = []
        log = self.executor.execute(self.plan, simulate=True, progress=messages.append)
        self.assertEqual(log, [
            LogEntry(LogOutcome.DELETED, "root/a.txt", "a"),
            LogEntry(LogOutcome.DELETED, "root/sub/b.txt", "b"),
            LogEntry(LogOutcome.DELETED, "root/sub/c.txt", "c"),
        ])
        self.client.delete_by_id.assert_not_called()
        self.assertEqual(messages, [])

    def test_deletes_in_plan_order(self):
        messages = []
        log = self.executor.execute(self.plan, progress=messages.append)
        self.assertEqual(self.client.delete_by_id.call_args_list, [call("a"), call("b"), call("c")])
        self.assertTrue(all(e.outcome is LogOutcome.DELETED for e in log))
        self.assertEqual(messages, ["Removing root/a.txt", "Removing root/sub/b.txt", "Removing root/sub/c.txt"])

    def test_informational_entries_skipped(self):
        log = self.executor.execute(self.plan)
        self.assertNotIn("r", [e.id for e in log])
        self.assertNotIn("s", [e.id for e in log])

    def test_single_failure_is_recorded(self):
        """One failed delete out of three is logged, the run carries on."""
        def delete(item_id):
            if item_id == "b":
                raise TransportError("The user does not have sufficient permissions", status=403)

        self.client.delete_by_id.side_effect = delete
        log = self.executor.execute(self.plan)

        self.assertEqual([e.id for e in log], ["a", "b", "c"])
        self.assertEqual([e.outcome for e in log],
                         [LogOutcome.DELETED, LogOutcome.FAILED, LogOutcome.DELETED])
        self.assertEqual(log[1].reason, "The user does not have sufficient permissions")
        self.assertEqual(log[1].action_text, "Error: The user does not have sufficient permissions")
        self.assertEqual(self.client.delete_by_id.call_count, 3)

    def test_unexpected_delete_error_is_recorded(self):
        self.client.delete_by_id.side_effect = [None, ConnectionResetError("reset"), None]
        log = self.executor.execute(self.plan)
        self.assertEqual(log[1].outcome, LogOutcome.FAILED)
        self.assertEqual(log[1].reason, "reset")

    def test_all_fail(self):
        self.client.delete_by_id.side_effect = TransportError("offline")
        log = self.executor.execute(self.plan)
        self.assertEqual(len(log), 3)
        self.assertTrue(all(e.outcome is LogOutcome.FAILED for e in log))

    def test_empty_plan(self):
        self.assertEqual(self.executor.execute([]), [])

    def test_cancel(self):
        checks = iter([False, True])
        with self.assertRaises(OperationCancelled) as ctx:
            self.executor.execute(self.plan, should_cancel=lambda: next(checks))
        self.client.delete_by_id.assert_called_once_with("a")
        self.assertEqual([e.id for e in ctx.exception.completed], ["a"])


if __name__ == '__main__':
    unittest.main()
