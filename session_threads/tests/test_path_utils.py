import unittest

from session_threads.path_utils import normalize_workspace_path, same_workspace


class NormalizeWorkspacePathTests(unittest.TestCase):
    def test_trims_rewrites_separators_and_lowercases(self) -> None:
        self.assertEqual(normalize_workspace_path("  C:/Users/Dev/Repo \n"), "c:\\users\\dev\\repo")
        self.assertEqual(normalize_workspace_path("/ws"), "\\ws")

    def test_strips_long_path_prefix(self) -> None:
        self.assertEqual(normalize_workspace_path("\\\\?\\C:\\Repo"), "c:\\repo")

    def test_prefix_only_stripped_at_start(self) -> None:
        self.assertEqual(normalize_workspace_path("C:\\a\\\\?\\b"), "c:\\a\\\\?\\b")

    def test_empty_input(self) -> None:
        self.assertEqual(normalize_workspace_path(""), "")
        self.assertEqual(normalize_workspace_path("   "), "")

    def test_is_idempotent(self) -> None:
        for raw in ("C:/Repo", "\\\\?\\D:\\Work\\Proj", "/home/dev/Proj", "", "MiXeD/Case\\path"):
            with self.subTest(raw=raw):
                once = normalize_workspace_path(raw)
                self.assertEqual(normalize_workspace_path(once), once)

    def test_slash_case_and_prefix_variants_are_equal(self) -> None:
        variants = ["C:/Repo/App", "c:\\repo\\app", "\\\\?\\C:\\REPO\\App", "  C:/repo\\APP  "]
        normalized = {normalize_workspace_path(value) for value in variants}
        self.assertEqual(normalized, {"c:\\repo\\app"})
        self.assertTrue(same_workspace("C:/Repo/App", "\\\\?\\c:\\repo\\app"))
        self.assertFalse(same_workspace("C:/Repo/App", "C:/Repo/Other"))

    def test_custom_separator(self) -> None:
        self.assertEqual(normalize_workspace_path("C:/Repo", separator="/"), "c:/repo")


if __name__ == "__main__":
    unittest.main()
