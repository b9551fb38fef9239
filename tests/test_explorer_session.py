"""Tests for ``repopick.session.ExplorerSession`` cursor and mutation flow."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from repopick.errors import PackerError
from repopick.file_tree_model import TokenTable
from repopick.path_filter import build_path_filter
from repopick.session import ExplorerSession


class ExplorerSessionTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "lib").mkdir()
        (self.root / "lib" / "x.ts").write_text("x\n", encoding="utf-8")
        (self.root / "lib" / "y.ts").write_text("y\n", encoding="utf-8")
        (self.root / "a.txt").write_text("a\n", encoding="utf-8")
        (self.root / "b.txt").write_text("b\n", encoding="utf-8")
        self.table = TokenTable(
            counts={"a.txt": 100, "b.txt": 50, "lib/x.ts": 30, "lib/y.ts": 70},
            base=self.root,
        )
        self.session = ExplorerSession(self.root, self.table)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _names(self) -> list[str]:
        return [row.node.name for row in self.session.rows()]

    def test_session_starts_with_top_level_rows_and_totals(self) -> None:
        self.assertEqual(self._names(), ["lib", "a.txt", "b.txt"])
        self.assertEqual(self.session.cursor_index, 0)
        self.assertEqual(self.session.selected_count, 0)
        self.assertEqual(self.session.total_selected_tokens, 0)
        self.assertEqual(self.session.total_available_tokens, 250)
        self.assertEqual(self.session.roots[0].token_count, 100)

    def test_cursor_movement_stops_at_both_ends(self) -> None:
        self.assertFalse(self.session.move_cursor(-1))
        self.assertEqual(self.session.cursor_index, 0)
        self.assertTrue(self.session.move_cursor(2))
        self.assertFalse(self.session.move_cursor(1))
        self.assertEqual(self.session.cursor_index, 2)
        self.session.move_to(99)
        self.assertEqual(self.session.cursor_index, 2)
        self.session.move_to(-4)
        self.assertEqual(self.session.cursor_index, 0)

    def test_toggle_current_row_updates_counters(self) -> None:
        self.session.move_cursor(1)
        self.session.toggle_selection()

        self.assertEqual(self.session.selected_count, 1)
        self.assertEqual(self.session.total_selected_tokens, 100)

    def test_expand_recomputes_counters_for_inherited_selection(self) -> None:
        self.session.toggle_selection()
        self.assertEqual((self.session.selected_count, self.session.total_selected_tokens), (1, 100))

        self.session.expand()

        self.assertEqual(self._names(), ["lib", "x.ts", "y.ts", "a.txt", "b.txt"])
        self.assertEqual((self.session.selected_count, self.session.total_selected_tokens), (2, 100))

    def test_collapse_clamps_cursor_to_visible_rows(self) -> None:
        self.session.expand()
        self.session.move_to(4)
        lib = self.session.roots[0]

        self.session.collapse(lib)

        self.assertEqual(self._names(), ["lib", "a.txt", "b.txt"])
        self.assertEqual(self.session.cursor_index, 2)

    def test_move_to_parent_finds_enclosing_directory_row(self) -> None:
        self.session.expand()
        self.session.move_to(2)
        self.assertEqual(self.session.current_node.name, "y.ts")

        self.assertTrue(self.session.move_to_parent())
        self.assertEqual(self.session.cursor_index, 0)
        self.assertFalse(self.session.move_to_parent())

    def test_toggles_take_counters_from_the_selection_update(self) -> None:
        with mock.patch("repopick.session.selected_count") as recount, mock.patch(
            "repopick.session.total_selected_tokens"
        ) as retotal:
            self.session.move_cursor(1)
            self.session.toggle_selection()
            self.session.toggle_all()

        recount.assert_not_called()
        retotal.assert_not_called()
        self.assertEqual((self.session.selected_count, self.session.total_selected_tokens), (3, 250))

    def test_toggle_all_through_session(self) -> None:
        self.session.toggle_all()
        self.assertEqual(self.session.total_selected_tokens, 250)
        self.assertEqual(self.session.selected_count, 3)

        self.session.toggle_all()
        self.assertEqual(self.session.total_selected_tokens, 0)
        self.assertEqual(self.session.selected_count, 0)

    def test_execute_with_empty_selection_never_calls_pack(self) -> None:
        pack = mock.Mock()

        result = self.session.execute(pack)

        self.assertFalse(result.ok)
        self.assertEqual(result.message, "No files selected")
        pack.assert_not_called()

    def test_execute_passes_selected_paths_and_root(self) -> None:
        self.session.move_to(2)
        self.session.toggle_selection()
        pack = mock.Mock()

        result = self.session.execute(pack)

        self.assertTrue(result.ok)
        pack.assert_called_once_with([self.root / "b.txt"], self.root)

    def test_execute_packs_visible_files_of_selected_folder(self) -> None:
        (self.root / "lib" / "notes.log").write_text("log\n", encoding="utf-8")
        path_filter = build_path_filter(self.root, ["*.log"], use_gitignore=False)
        session = ExplorerSession(self.root, self.table, path_filter)
        session.toggle_selection()
        pack = mock.Mock()

        result = session.execute(pack)

        self.assertTrue(result.ok)
        pack.assert_called_once_with([self.root / "lib" / "x.ts", self.root / "lib" / "y.ts"], self.root)

    def test_execute_with_only_empty_folders_selected_never_calls_pack(self) -> None:
        (self.root / "empty").mkdir()
        session = ExplorerSession(self.root, self.table)
        session.toggle_selection(session.rows()[0].node)
        pack = mock.Mock()

        result = session.execute(pack)

        self.assertEqual(session.rows()[0].node.name, "empty")
        self.assertFalse(result.ok)
        self.assertEqual(result.message, "No files selected")
        pack.assert_not_called()

    def test_execute_failure_is_a_result_and_keeps_tree(self) -> None:
        self.session.toggle_selection()
        roots_before = self.session.roots
        pack = mock.Mock(side_effect=PackerError("repomix exited with status 2"))

        result = self.session.execute(pack)

        self.assertFalse(result.ok)
        self.assertEqual(result.message, "repomix exited with status 2")
        self.assertIs(self.session.roots, roots_before)
        self.assertEqual(self.session.total_selected_tokens, 100)

    def test_empty_root_has_no_rows(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            session = ExplorerSession(Path(tmp), TokenTable(base=Path(tmp)))

            self.assertEqual(session.rows(), [])
            self.assertIsNone(session.current_node)
            self.assertFalse(session.move_cursor(1))
            session.toggle_selection()
            session.expand()
            self.assertEqual(session.selected_count, 0)


if __name__ == "__main__":
    unittest.main()
