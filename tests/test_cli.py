import contextlib
import io
import json
import pathlib
import sys
import tempfile
import unittest


ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import cli
from core.app_context import AppContext


class CliTests(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.addCleanup(self._td.cleanup)
        self.root = pathlib.Path(self._td.name)
        self.live = self.root / "hosts"
        self.live.write_text("# live\n", encoding="utf-8")
        self.flushes = []
        self.ctx = AppContext.create(
            root=self.root / "data",
            hosts_path=self.live,
            flush=lambda: self.flushes.append(1),
        )

    def run_cli(self, *argv, stdin=""):
        args = cli.build_parser().parse_args(list(argv))
        out, err = io.StringIO(), io.StringIO()
        old_stdin = sys.stdin
        sys.stdin = io.StringIO(stdin)
        try:
            with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
                code = cli.run(args, self.ctx)
        finally:
            sys.stdin = old_stdin
        return code, out.getvalue(), err.getvalue()

    def test_profile_lifecycle(self):
        self.assertEqual(self.run_cli("create", "work")[0], 0)
        self.assertEqual(self.run_cli("edit", "work", stdin="10.0.0.1 intranet\n")[0], 0)
        code, out, _ = self.run_cli("show", "work")
        self.assertEqual((code, out), (0, "10.0.0.1 intranet\n"))

        code, out, _ = self.run_cli("activate", "work")
        self.assertEqual(code, 0)
        self.assertIn("'work' is live", out)
        self.assertEqual(self.live.read_text(encoding="utf-8"), "10.0.0.1 intranet\n")
        self.assertEqual(self.flushes, [1])

        code, out, _ = self.run_cli("list")
        self.assertEqual(out.splitlines(), ["* work"])
        self.assertEqual(self.run_cli("active")[1], "work\n")

    def test_errors_exit_1_with_message(self):
        code, _, err = self.run_cli("activate", "ghost")
        self.assertEqual(code, 1)
        self.assertIn("does not exist", err)

        self.run_cli("create", "home")
        self.run_cli("activate", "home")
        code, _, err = self.run_cli("delete", "home")
        self.assertEqual(code, 1)
        self.assertIn("Cannot delete active profile", err)

    def test_create_from_live(self):
        self.run_cli("create", "snapshot", "--from-live")
        self.assertEqual(self.ctx.profiles.read_profile("snapshot"), "# live\n")

    def test_backup_commands(self):
        code, out, _ = self.run_cli("backup")
        self.assertEqual(code, 0)
        backup_id = pathlib.Path(out.strip()).name

        code, out, _ = self.run_cli("backups")
        self.assertEqual(out.splitlines(), [backup_id])
        self.assertEqual(self.run_cli("backup-show", backup_id)[1], "# live\n")

        self.live.write_text("# broken\n", encoding="utf-8")
        code, _, _ = self.run_cli("restore", backup_id)
        self.assertEqual(code, 0)
        self.assertEqual(self.live.read_text(encoding="utf-8"), "# live\n")
        self.assertEqual(len(self.ctx.backups.list_backups()), 2)

        code, out, _ = self.run_cli("backup-delete-all")
        self.assertEqual(code, 0)
        self.assertEqual(self.ctx.backups.list_backups(), [])
        self.assertEqual(self.run_cli("backup-delete", backup_id)[0], 1)

    def test_paths_json(self):
        code, out, _ = self.run_cli("paths", "--json")
        self.assertEqual(code, 0)
        info = json.loads(out)
        self.assertEqual(info["live_hosts"], str(self.live))
        self.assertEqual(info["backups"], str(self.root / "data" / "backups"))

    def test_doctor_reports_missing_profile_file(self):
        self.run_cli("create", "work")
        self.assertEqual(self.run_cli("doctor")[0], 0)
        self.ctx.profiles.profile_path("work").unlink()
        code, out, _ = self.run_cli("doctor")
        self.assertEqual(code, 1)
        self.assertIn("missing files: work", out)

    def test_no_command_prints_help(self):
        code, out, _ = self.run_cli()
        self.assertEqual(code, 2)
        self.assertIn("usage", out)


if __name__ == "__main__":
    unittest.main()
