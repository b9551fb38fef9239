"""Tests for explorer key dispatch."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from repopick.errors import ActionResult
from repopick.file_tree_model import TokenTable
from repopick.runtime.keys import handle_key
from repopick.runtime.state import AppState
from repopick.session import ExplorerSession


class HandleKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "src").mkdir()
        (self.root / "src" / "main.py").write_text("print()\n", encoding="utf-8")
        (self.root / "README.md").write_text("hi\n", encoding="utf-8")
        table = TokenTable(counts={"src/main.py": 12, "README.md": 3}, base=self.root)
        self.state = AppState(root=self.root, session=ExplorerSession(self.root, table), dirty=False)
        self.execute_calls = 0

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _press(self, key: str) -> bool:
        def start_execute() -> None:
            self.execute_calls += 1

        return handle_key(key, self.state, start_execute)

    def _names(self) -> list[str]:
        assert self.state.session is not None
        return [row.node.name for row in self.state.session.rows()]

    def test_right_expands_then_moves_down(self) -> None:
        self.assertTrue(self._press("RIGHT"))
        self.assertEqual(self._names(), ["src", "main.py", "README.md"])
        self.assertTrue(self.state.dirty)

        self.assertTrue(self._press("l"))
        assert self.state.session is not None
        self.assertEqual(self.state.session.cursor_index, 1)

    def test_left_on_child_jumps_to_parent_then_collapses(self) -> None:
        self._press("RIGHT")
        self._press("DOWN")

        self.assertTrue(self._press("LEFT"))
        assert self.state.session is not None
        self.assertEqual(self.state.session.cursor_index, 0)
        self.assertTrue(self._press("h"))
        self.assertEqual(self._names(), ["src", "README.md"])

    def test_left_on_top_level_file_does_nothing(self) -> None:
        self._press("END")
        self.state.dirty = False

        self.assertFalse(self._press("LEFT"))
        self.assertFalse(self.state.dirty)

    def test_space_and_a_update_selection(self) -> None:
        session = self.state.session
        assert session is not None

        self._press("SPACE")
        self.assertEqual(session.selected_count, 1)
        self.assertEqual(session.total_selected_tokens, 12)

        self._press("a")
        self.assertEqual(session.total_selected_tokens, 15)
        self._press("a")
        self.assertEqual(session.selected_count, 0)

    def test_enter_starts_execute(self) -> None:
        self.assertTrue(self._press("ENTER_CR"))
        self.assertTrue(self._press("ENTER_LF"))
        self.assertEqual(self.execute_calls, 2)

    def test_keys_are_ignored_while_executing_except_ctrl_c(self) -> None:
        self.state.executing = True

        self.assertFalse(self._press("DOWN"))
        self.assertFalse(self._press("q"))
        self.assertFalse(self.state.quit)
        self.assertTrue(self._press("CTRL_C"))
        self.assertTrue(self.state.quit)

    def test_any_key_dismisses_result(self) -> None:
        self.state.result = ActionResult.failure("No files selected")

        self.assertTrue(self._press("x"))
        self.assertIsNone(self.state.result)
        self.assertFalse(self.state.quit)

    def test_quit_keys(self) -> None:
        self.assertTrue(self._press("q"))
        self.assertTrue(self.state.quit)

    def test_unknown_key_is_ignored(self) -> None:
        self.assertFalse(self._press("z"))
        self.assertFalse(self._press(""))
        self.assertFalse(self.state.dirty)


if __name__ == "__main__":
    unittest.main()
