import os
import pathlib
import sys
import tempfile
import unittest


ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.fileio import read_text_exact, write_text_atomic, write_text_exact


class FileIoTests(unittest.TestCase):
    def test_atomic_write_creates_parents_and_leaves_no_temp_files(self):
        with tempfile.TemporaryDirectory() as td:
            path = pathlib.Path(td) / "nested" / "metadata.json"
            write_text_atomic(path, "one\r\n")
            write_text_atomic(path, "two\r\n")
            self.assertEqual(path.read_bytes(), b"two\r\n")
            self.assertEqual(os.listdir(path.parent), ["metadata.json"])

    def test_exact_round_trip_keeps_line_endings(self):
        with tempfile.TemporaryDirectory() as td:
            path = pathlib.Path(td) / "hosts"
            write_text_exact(path, "a\r\nb\nc\r")
            self.assertEqual(read_text_exact(path), "a\r\nb\nc\r")


if __name__ == "__main__":
    unittest.main()
