"""Tests for the gitignore matcher and its cache."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from repopick.gitignore import GitIgnoreMatcher, clear_gitignore_cache, get_gitignore_matcher


class GitIgnoreMatcherTests(unittest.TestCase):
    def test_is_ignored_checks_files_and_parent_directories(self) -> None:
        matcher = GitIgnoreMatcher(
            root=Path("/project"),
            ignored_files=frozenset({"notes.tmp"}),
            ignored_dirs=frozenset({"build", "web/cache"}),
        )

        self.assertTrue(matcher.is_ignored("notes.tmp"))
        self.assertTrue(matcher.is_ignored("build"))
        self.assertTrue(matcher.is_ignored("build/out/app.js"))
        self.assertTrue(matcher.is_ignored("web/cache/x"))
        self.assertFalse(matcher.is_ignored("web/app.js"))
        self.assertFalse(matcher.is_ignored("../build"))
        self.assertFalse(matcher.is_ignored(""))

    @unittest.skipIf(shutil.which("git") is None, "git not installed")
    def test_loads_ignored_paths_from_git(self) -> None:
        clear_gitignore_cache()
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            subprocess.run(["git", "init", "-q", str(root)], check=True)
            (root / ".gitignore").write_text("*.log\nbuild/\n", encoding="utf-8")
            (root / "build").mkdir()
            (root / "build" / "out.js").write_text("x\n", encoding="utf-8")
            (root / "run.log").write_text("log\n", encoding="utf-8")
            (root / "main.py").write_text("x = 1\n", encoding="utf-8")

            matcher = get_gitignore_matcher(root)

            self.assertIsNotNone(matcher)
            self.assertTrue(matcher.is_ignored("run.log"))
            self.assertTrue(matcher.is_ignored("build/out.js"))
            self.assertFalse(matcher.is_ignored("main.py"))
        clear_gitignore_cache()


class GitignoreMatcherCacheTests(unittest.TestCase):
    def setUp(self) -> None:
        clear_gitignore_cache()

    def tearDown(self) -> None:
        clear_gitignore_cache()

    def test_get_gitignore_matcher_reuses_cached_result_within_ttl(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            sentinel = mock.sentinel.matcher
            with mock.patch("repopick.gitignore._load_matcher", return_value=sentinel) as load_matcher:
                first = get_gitignore_matcher(root)
                second = get_gitignore_matcher(root)

            self.assertIs(first, sentinel)
            self.assertIs(second, sentinel)
            self.assertEqual(load_matcher.call_count, 1)

    def test_get_gitignore_matcher_reloads_after_ttl_expiry(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            with mock.patch(
                "repopick.gitignore._load_matcher",
                side_effect=[mock.sentinel.first, mock.sentinel.second],
            ) as load_matcher, mock.patch(
                "repopick.gitignore.time.monotonic",
                side_effect=[100.0, 103.0],
            ):
                first = get_gitignore_matcher(root)
                second = get_gitignore_matcher(root)

            self.assertIs(first, mock.sentinel.first)
            self.assertIs(second, mock.sentinel.second)
            self.assertEqual(load_matcher.call_count, 2)

    def test_missing_git_yields_no_matcher(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("repopick.gitignore.shutil.which", return_value=None):
                self.assertIsNone(get_gitignore_matcher(Path(tmp)))


if __name__ == "__main__":
    unittest.main()
