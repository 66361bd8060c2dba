"""Unit tests for EditHistory."""

import unittest

from src.referral_writer.edit_history import EditHistory, HistoryMode


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class TestEditHistory(unittest.TestCase):
    """Test EditHistory."""

    def setUp(self):
        self.clock = FakeClock()
        self.history = EditHistory("A", clock=self.clock)

    def type_and_commit(self, text):
        self.history.record_edit(text)
        self.clock.advance(EditHistory.DEBOUNCE_SECONDS)
        self.assertTrue(self.history.poll())

    def test_reset(self):
        self.type_and_commit("AB")
        self.history.reset("X")
        self.assertEqual(self.history.snapshots, ["X"])
        self.assertEqual(self.history.cursor, 0)
        self.assertEqual(self.history.mode, HistoryMode.IDLE)
        self.assertFalse(self.history.can_undo)

    def test_atomic_edit_undo_redo(self):
        self.history.record_atomic_edit("AB")
        self.assertEqual(self.history.undo(), "A")
        self.assertEqual(self.history.redo(), "AB")

    def test_undo_redo_at_ends(self):
        self.assertIsNone(self.history.undo())
        self.assertIsNone(self.history.redo())

    def test_debounce_waits_for_quiet_period(self):
        self.history.record_edit("AB")
        self.clock.advance(0.3)
        self.history.record_edit("ABC")
        self.clock.advance(0.3)
        self.assertFalse(self.history.poll())
        self.assertEqual(self.history.mode, HistoryMode.RECORDING)
        self.clock.advance(0.25)
        self.assertTrue(self.history.poll())
        self.assertEqual(self.history.snapshots, ["A", "ABC"])
        self.assertEqual(self.history.mode, HistoryMode.IDLE)

    def test_edit_back_to_current_cancels_pending(self):
        self.history.record_edit("AB")
        self.history.record_edit("A")
        self.assertFalse(self.history.has_pending)
        self.clock.advance(1)
        self.assertFalse(self.history.poll())
        self.assertEqual(self.history.snapshots, ["A"])

    def test_undo_flushes_pending_edit(self):
        self.history.record_edit("AB")
        self.assertEqual(self.history.undo(), "A")
        self.assertEqual(self.history.snapshots, ["A", "AB"])
        self.assertEqual(self.history.redo(), "AB")

    def test_write_after_undo_is_suppressed_once(self):
        self.history.record_atomic_edit("AB")
        text = self.history.undo()
        self.assertEqual(self.history.mode, HistoryMode.APPLYING_HISTORY_ENTRY)
        self.history.record_edit(text)
        self.assertFalse(self.history.has_pending)
        self.assertEqual(self.history.mode, HistoryMode.IDLE)
        # A real edit afterwards is recorded again
        self.history.record_edit("AX")
        self.assertTrue(self.history.has_pending)

    def test_different_write_while_applying_is_recorded(self):
        self.history.record_atomic_edit("AB")
        self.history.record_edit("ABC")
        self.assertTrue(self.history.has_pending)
        self.assertEqual(self.history.mode, HistoryMode.RECORDING)

    def test_atomic_edit_discards_pending(self):
        self.history.record_edit("AB")
        self.history.record_atomic_edit("𝐀B")
        self.assertFalse(self.history.has_pending)
        self.clock.advance(1)
        self.assertFalse(self.history.poll())
        self.assertEqual(self.history.snapshots, ["A", "𝐀B"])

    def test_atomic_edit_skips_unchanged_check(self):
        self.history.record_atomic_edit("A")
        self.assertEqual(self.history.snapshots, ["A", "A"])

    def test_cap_evicts_oldest(self):
        for i in range(60):
            self.history.record_atomic_edit(f"A{i}")
        snapshots = self.history.snapshots
        self.assertEqual(len(snapshots), 50)
        self.assertEqual(snapshots[0], "A10")
        self.assertEqual(snapshots[-1], "A59")

        for _ in range(50):
            self.history.undo()
        self.assertEqual(self.history.current, "A10")
        self.assertEqual(self.history.cursor, 0)
        self.assertNotIn("A", self.history.snapshots)

    def test_branching_drops_redo_entries(self):
        self.type_and_commit("B")
        self.type_and_commit("C")
        self.history.undo()
        self.assertEqual(self.history.undo(), "A")
        self.history.record_edit("A")  # the buffer write of the undo
        self.type_and_commit("D")
        self.assertEqual(self.history.snapshots, ["A", "D"])
        self.assertFalse(self.history.can_redo)
        self.assertEqual(self.history.undo(), "A")
        self.assertIsNone(self.history.undo())

    def test_flush_without_pending(self):
        self.assertFalse(self.history.flush())

    def test_invalid_cap(self):
        with self.assertRaises(ValueError):
            EditHistory(max_entries=0)


if __name__ == "__main__":
    unittest.main()
