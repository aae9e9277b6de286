import os
from pathlib import Path
import tempfile
import unittest
from unittest.mock import patch

from ccatlas.paths import export_filename, resolve_export_path


class ExportFilenameTests(unittest.TestCase):
    def test_appends_markdown_suffix_once(self) -> None:
        self.assertEqual(export_filename("abc"), "abc.md")
        self.assertEqual(export_filename("abc", "notes.md"), "notes.md")
        self.assertEqual(export_filename("abc", "notes"), "notes.md")
        self.assertEqual(export_filename("abc", ""), "abc.md")


class ResolveExportPathTests(unittest.TestCase):
    def test_uses_base_name_when_free(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            base = Path(tmp_dir)
            self.assertEqual(resolve_export_path("s1", base_dir=base), base / "s1.md")

    def test_directory_need_not_exist(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            base = Path(tmp_dir) / "not" / "yet"
            path = resolve_export_path("s1", base_dir=base)
            self.assertEqual(path, base / "s1.md")
            self.assertFalse(base.exists())

    def test_collisions_take_the_next_free_counter(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            base = Path(tmp_dir)
            existing = [base / "s1.md", base / "s1_1.md", base / "s1_2.md"]
            for path in existing:
                path.write_text("taken", encoding="utf-8")

            resolved = resolve_export_path("s1", base_dir=base)

            self.assertEqual(resolved, base / "s1_3.md")
            self.assertNotIn(resolved, existing)
            self.assertFalse(resolved.exists())

    def test_custom_name_with_suffix_collides_before_extension(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            base = Path(tmp_dir)
            (base / "report.md").write_text("taken", encoding="utf-8")
            self.assertEqual(resolve_export_path("s1", "report.md", base), base / "report_1.md")

    def test_result_is_absolute(self) -> None:
        self.assertTrue(resolve_export_path("s1", base_dir=Path("relative-exports")).is_absolute())

    def test_default_base_dir_is_desktop_exports(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            with patch.dict(os.environ, {"HOME": tmp_dir}):
                os.environ.pop("CC_ATLAS_EXPORTS_DIR", None)
                path = resolve_export_path("s1")
            self.assertEqual(path, Path(tmp_dir) / "Desktop" / "cc-atlas-exports" / "s1.md")


if __name__ == "__main__":
    unittest.main()
