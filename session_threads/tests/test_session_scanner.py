import tempfile
import unittest
from pathlib import Path

from session_threads.parsers.scanner import collect_session_files


class CollectSessionFilesTests(unittest.TestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.root = Path(tmpdir.name)

    def _touch(self, relative_path: str) -> Path:
        path = self.root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("", encoding="utf-8")
        return path

    def test_finds_logs_at_any_depth(self) -> None:
        expected = {
            self._touch("top.jsonl"),
            self._touch("2024/01/01/rollout-a.jsonl"),
            self._touch("2024/01/02/deep/er/rollout-b.jsonl"),
        }
        self._touch("notes.txt")
        self._touch("2024/01/01/rollout-a.jsonl.bak")
        self._touch("2024/01/01/UPPER.JSONL")
        self._touch("2024/.jsonl")

        self.assertEqual(set(collect_session_files(self.root)), expected)

    def test_directory_named_like_a_log_is_descended(self) -> None:
        inner = self._touch("odd.jsonl/inner.jsonl")
        self.assertEqual(collect_session_files(self.root), [inner])

    def test_missing_root_returns_empty(self) -> None:
        self.assertEqual(collect_session_files(self.root / "missing"), [])

    def test_empty_root_returns_empty(self) -> None:
        self.assertEqual(collect_session_files(self.root), [])


if __name__ == "__main__":
    unittest.main()
