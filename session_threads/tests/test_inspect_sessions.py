import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from session_threads.scripts.inspect_sessions import main


class InspectSessionsCliTests(unittest.TestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.root = Path(tmpdir.name)
        lines = [
            {"type": "session_meta", "timestamp": "2024-01-01T00:00:00Z", "payload": {"id": "abc", "cwd": "/ws", "timestamp": "2024-01-01T00:00:00Z"}},
            {
                "type": "response_item",
                "timestamp": "2024-01-01T00:05:00Z",
                "payload": {"type": "message", "role": "user", "content": [{"type": "input_text", "text": "hi"}]},
            },
        ]
        (self.root / "rollout-abc.jsonl").write_text("\n".join(json.dumps(line) for line in lines), encoding="utf-8")

    def _run(self, *argv: str) -> tuple[int, str, str]:
        stdout = io.StringIO()
        stderr = io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(["--sessions-dir", str(self.root), *argv])
        return code, stdout.getvalue(), stderr.getvalue()

    def test_list_prints_json_summaries(self) -> None:
        code, out, _ = self._run("list", "--workspace", "/ws", "--json")

        self.assertEqual(code, 0)
        payload = json.loads(out)
        self.assertEqual(payload[0]["id"], "abc")
        self.assertEqual(payload[0]["updatedAt"], 1704067500000)

    def test_list_prints_table(self) -> None:
        code, out, _ = self._run("list", "--workspace", "/ws")

        self.assertEqual(code, 0)
        self.assertIn("abc  2024-01-01T00:05:00.000Z  hi", out)

    def test_list_reports_no_sessions(self) -> None:
        code, out, _ = self._run("list", "--workspace", "/other")

        self.assertEqual(code, 0)
        self.assertIn("No sessions found", out)

    def test_show_prints_thread(self) -> None:
        code, out, _ = self._run("show", "abc")

        self.assertEqual(code, 0)
        thread = json.loads(out)
        self.assertEqual(thread["turns"][0]["id"], "turn-abc-0")
        self.assertEqual(thread["turns"][0]["items"][0]["content"], [{"type": "text", "text": "hi"}])

    def test_show_missing_session_exits_nonzero(self) -> None:
        code, _, err = self._run("show", "missing")

        self.assertEqual(code, 1)
        self.assertIn("Session not found", err)

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_read_failure_exits_nonzero(self) -> None:
        try:
            os.symlink(self.root / "nowhere.jsonl", self.root / "rollout-broken.jsonl")
        except OSError:
            self.skipTest("cannot create symlinks")

        code, out, err = self._run("list", "--workspace", "/ws")

        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("Failed to read session log", err)
        self.assertIn("rollout-broken.jsonl", err)


if __name__ == "__main__":
    unittest.main()
