import json
import pathlib
import sys
import tempfile
import unittest


ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.app_context import AppContext
from core.errors import StorageError
from core.settings import DEFAULT_SETTINGS, AppSettings


class AppSettingsTests(unittest.TestCase):
    def test_defaults_and_persistence(self):
        with tempfile.TemporaryDirectory() as td:
            path = pathlib.Path(td) / "config.json"
            settings = AppSettings(path)
            self.assertEqual(settings.max_backups, 25)
            self.assertTrue(settings.get("flush_dns_after_switch"))
            settings.set("last_profile", "work")
            self.assertEqual(json.loads(path.read_text(encoding="utf-8"))["last_profile"], "work")
            self.assertEqual(AppSettings(path).get("last_profile"), "work")

    def test_corrupt_file_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            path = pathlib.Path(td) / "config.json"
            path.write_text("{oops", encoding="utf-8")
            with self.assertLogs("core.settings", level="WARNING"):
                settings = AppSettings(path)
            self.assertEqual(settings.get("log_level"), DEFAULT_SETTINGS["log_level"])

    def test_save_failure_is_storage_error(self):
        with tempfile.TemporaryDirectory() as td:
            blocker = pathlib.Path(td) / "not-a-dir"
            blocker.write_text("", encoding="utf-8")
            settings = AppSettings(blocker / "config.json")
            with self.assertRaises(StorageError):
                settings.set("last_profile", "work")

    def test_invalid_max_backups(self):
        with tempfile.TemporaryDirectory() as td:
            path = pathlib.Path(td) / "config.json"
            path.write_text('{"max_backups": "lots"}', encoding="utf-8")
            self.assertEqual(AppSettings(path).max_backups, 25)
            path.write_text('{"max_backups": 0}', encoding="utf-8")
            self.assertEqual(AppSettings(path).max_backups, 1)

    def test_context_uses_settings(self):
        with tempfile.TemporaryDirectory() as td:
            root = pathlib.Path(td)
            (root / "config.json").write_text(
                '{"max_backups": 3, "flush_dns_after_switch": false}', encoding="utf-8"
            )
            hosts = root / "hosts"
            hosts.write_text("# live\n", encoding="utf-8")
            ctx = AppContext.create(root=root, hosts_path=hosts, flush=lambda: None)
            self.assertEqual(ctx.backups.max_backups, 3)
            self.assertFalse(ctx.switcher.flush_after_switch)
            self.assertEqual(ctx.backups.backups_dir, root / "backups")


if __name__ == "__main__":
    unittest.main()
