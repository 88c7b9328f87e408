import json
import pathlib
import sys
import tempfile
import unittest


ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.errors import MetadataParseError
from core.metadata import Metadata, MetadataStore


class MetadataStoreTests(unittest.TestCase):
    def test_load_missing_file_persists_default(self):
        with tempfile.TemporaryDirectory() as td:
            path = pathlib.Path(td) / "profiles" / "metadata.json"
            store = MetadataStore(path)
            metadata = store.load()
            self.assertEqual(metadata, Metadata(active="", profiles=[]))
            self.assertTrue(path.exists())
            self.assertEqual(json.loads(path.read_text(encoding="utf-8")), {"active": "", "profiles": []})

    def test_save_then_load_round_trip(self):
        with tempfile.TemporaryDirectory() as td:
            store = MetadataStore(pathlib.Path(td) / "metadata.json")
            store.save(Metadata(active="work", profiles=["work", "home"]))
            loaded = store.load()
            self.assertEqual(loaded.active, "work")
            self.assertEqual(loaded.profiles, ["work", "home"])

    def test_malformed_json_raises_parse_error(self):
        with tempfile.TemporaryDirectory() as td:
            path = pathlib.Path(td) / "metadata.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(MetadataParseError):
                MetadataStore(path).load()

    def test_wrong_shape_raises_parse_error(self):
        with tempfile.TemporaryDirectory() as td:
            path = pathlib.Path(td) / "metadata.json"
            path.write_text('{"active": 3, "profiles": []}', encoding="utf-8")
            with self.assertRaises(MetadataParseError):
                MetadataStore(path).load()
            path.write_text('{"active": "", "profiles": ["a", 1]}', encoding="utf-8")
            with self.assertRaises(MetadataParseError):
                MetadataStore(path).load()
            path.write_text("[]", encoding="utf-8")
            with self.assertRaises(MetadataParseError):
                MetadataStore(path).load()

    def test_dangling_active_raises_parse_error(self):
        with tempfile.TemporaryDirectory() as td:
            path = pathlib.Path(td) / "metadata.json"
            path.write_text('{"active": "ghost", "profiles": ["a"]}', encoding="utf-8")
            with self.assertRaises(MetadataParseError):
                MetadataStore(path).load()

    def test_duplicate_profiles_raise_parse_error(self):
        with tempfile.TemporaryDirectory() as td:
            path = pathlib.Path(td) / "metadata.json"
            path.write_text('{"active": "", "profiles": ["a", "a"]}', encoding="utf-8")
            with self.assertRaises(MetadataParseError):
                MetadataStore(path).load()

    def test_invalid_utf8_raises_parse_error(self):
        with tempfile.TemporaryDirectory() as td:
            path = pathlib.Path(td) / "metadata.json"
            path.write_bytes(b'\xff\xfe{"active": "", "profiles": []}')
            with self.assertRaises(MetadataParseError):
                MetadataStore(path).load()

    def test_parse_error_is_a_value_error(self):
        self.assertTrue(issubclass(MetadataParseError, ValueError))

    def test_update_saves_on_success_only(self):
        with tempfile.TemporaryDirectory() as td:
            store = MetadataStore(pathlib.Path(td) / "metadata.json")
            with store.update() as metadata:
                metadata.profiles.append("work")
            self.assertEqual(store.load().profiles, ["work"])

            with self.assertRaises(RuntimeError):
                with store.update() as metadata:
                    metadata.profiles.append("home")
                    raise RuntimeError("boom")
            self.assertEqual(store.load().profiles, ["work"])


if __name__ == "__main__":
    unittest.main()
