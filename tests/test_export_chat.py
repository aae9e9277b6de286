from pathlib import Path
import tempfile
import unittest

from ccatlas.discover import LogLocator
from ccatlas.errors import NotFoundError
from ccatlas.export_md import ExportOptions, export_chat

from tests.helpers import SCENARIO_A, make_project, user_line, write_log


class ExportChatTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.project_dir, store_root, self.log_dir = make_project(self.root)
        self.locator = LogLocator(store_root)
        self.exports_dir = self.root / "Desktop" / "cc-atlas-exports"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _export(self, session_id: str, **kwargs):
        return export_chat(
            session_id,
            self.project_dir,
            kwargs.pop("options", ExportOptions()),
            kwargs.pop("custom_name", None),
            locator=self.locator,
            exports_dir=self.exports_dir,
        )

    def test_exports_scenario_a(self) -> None:
        write_log(self.log_dir / "s1.jsonl", SCENARIO_A)

        outcome = self._export("s1")

        self.assertEqual(outcome.output_path, self.exports_dir / "s1.md")
        self.assertEqual(outcome.message_count, 2)
        self.assertEqual(outcome.title, "s1")
        content = outcome.output_path.read_text(encoding="utf-8")
        self.assertEqual(outcome.export_size, len(content.encode("utf-8")))
        self.assertIn("**Messages:** 2\n", content)
        self.assertIn("**Models:** m1\n", content)
        self.assertIn("## Assistant (m1)\n*00:00:05Z*\n\n### Hello\n", content)
        self.assertEqual(
            outcome.to_dict(),
            {
                "output_path": str(self.exports_dir / "s1.md"),
                "message_count": 2,
                "export_size": outcome.export_size,
                "title": "s1",
            },
        )

    def test_meta_lines_never_reach_the_document(self) -> None:
        write_log(
            self.log_dir / "s1.jsonl",
            SCENARIO_A + [user_line("Caveat: local command output", isMeta=True, sessionId="s1")],
        )

        outcome = self._export("s1")

        content = outcome.output_path.read_text(encoding="utf-8")
        self.assertEqual(outcome.message_count, 2)
        self.assertIn("**Messages:** 2\n", content)
        self.assertNotIn("Caveat", content)

    def test_unknown_session_fails_without_writing(self) -> None:
        write_log(self.log_dir / "s1.jsonl", SCENARIO_A)

        with self.assertRaises(NotFoundError):
            self._export("does-not-exist")
        self.assertFalse(self.exports_dir.exists())

    def test_second_export_gets_counter_suffix(self) -> None:
        write_log(self.log_dir / "s1.jsonl", SCENARIO_A)

        first = self._export("s1")
        second = self._export("s1")

        self.assertEqual(first.output_path, self.exports_dir / "s1.md")
        self.assertEqual(second.output_path, self.exports_dir / "s1_1.md")
        self.assertEqual(
            first.output_path.read_text(encoding="utf-8"),
            second.output_path.read_text(encoding="utf-8"),
        )

    def test_custom_name(self) -> None:
        write_log(self.log_dir / "s1.jsonl", SCENARIO_A)
        outcome = self._export("s1", custom_name="greeting")
        self.assertEqual(outcome.output_path, self.exports_dir / "greeting.md")

    def test_title_falls_back_to_requested_session_id(self) -> None:
        # No record names the session, so listing and export both use the file stem.
        write_log(self.log_dir / "stem-only.jsonl", [user_line("hello")])
        outcome = self._export("stem-only")
        self.assertEqual(outcome.title, "stem-only")
        self.assertEqual(outcome.message_count, 1)


if __name__ == "__main__":
    unittest.main()
