import pathlib
import sys
import tempfile
import unittest


ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.errors import ConflictError, NotFoundError, ValidationError
from core.metadata import MetadataStore
from core.profile_manager import NEW_PROFILE_CONTENT, ProfileManager, validate_name


class ProfileManagerTests(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.addCleanup(self._td.cleanup)
        self.profiles_dir = pathlib.Path(self._td.name) / "profiles"
        self.store = MetadataStore(self.profiles_dir / "metadata.json")
        self.pm = ProfileManager(self.profiles_dir, self.store)

    def _files_on_disk(self):
        return {p.stem for p in self.profiles_dir.glob("*.hosts")}

    def test_create_then_read_returns_placeholder(self):
        self.pm.create_profile("work")
        self.assertEqual(self.pm.list_profiles(), ["work"])
        self.assertEqual(self.pm.read_profile("work"), NEW_PROFILE_CONTENT)

    def test_create_with_content(self):
        self.pm.create_profile("live", "127.0.0.1 localhost\n")
        self.assertEqual(self.pm.read_profile("live"), "127.0.0.1 localhost\n")

    def test_create_rejects_empty_and_duplicate(self):
        with self.assertRaises(ValidationError):
            self.pm.create_profile("")
        with self.assertRaises(ValidationError):
            self.pm.create_profile("   ")
        self.pm.create_profile("work")
        with self.assertRaises(ConflictError):
            self.pm.create_profile("work")
        self.assertEqual(self.pm.list_profiles(), ["work"])

    def test_names_are_case_sensitive_in_metadata(self):
        self.pm.create_profile("work")
        with self.assertRaises(ConflictError):
            self.pm.create_profile("work")
        # Only exact matches conflict
        self.assertFalse(self.pm.exists("Work"))

    def test_write_then_read_round_trip(self):
        self.pm.create_profile("work")
        content = "10.0.0.1 intranet\r\n10.0.0.2 wiki\r\n"
        self.pm.write_profile("work", content)
        self.assertEqual(self.pm.read_profile("work"), content)

    def test_write_unknown_profile_fails(self):
        with self.assertRaises(NotFoundError):
            self.pm.write_profile("ghost", "x")
        self.assertEqual(self._files_on_disk(), set())

    def test_read_missing_file_is_not_found(self):
        with self.assertRaises(NotFoundError):
            self.pm.read_profile("ghost")

    def test_delete_removes_file_and_membership(self):
        self.pm.create_profile("work")
        self.pm.create_profile("home")
        self.pm.delete_profile("work")
        self.assertEqual(self.pm.list_profiles(), ["home"])
        self.assertEqual(self._files_on_disk(), {"home"})

    def test_delete_unknown_is_not_found(self):
        with self.assertRaises(NotFoundError):
            self.pm.delete_profile("ghost")

    def test_delete_active_is_conflict_and_leaves_profile(self):
        self.pm.create_profile("home")
        self.pm.write_profile("home", "1.2.3.4 example\n")
        self.pm.set_active("home")
        with self.assertRaises(ConflictError):
            self.pm.delete_profile("home")
        self.assertEqual(self.pm.list_profiles(), ["home"])
        self.assertEqual(self.pm.get_active(), "home")
        self.assertEqual(self.pm.read_profile("home"), "1.2.3.4 example\n")

    def test_rename_preserves_content_and_position(self):
        self.pm.create_profile("a")
        self.pm.create_profile("b")
        self.pm.create_profile("c")
        self.pm.write_profile("b", "0.0.0.0 ads\n")
        self.pm.rename_profile("b", "blocked")
        self.assertEqual(self.pm.list_profiles(), ["a", "blocked", "c"])
        self.assertEqual(self.pm.read_profile("blocked"), "0.0.0.0 ads\n")
        self.assertFalse(self.pm.exists("b"))
        self.assertEqual(self._files_on_disk(), {"a", "blocked", "c"})

    def test_rename_active_moves_active_pointer(self):
        self.pm.create_profile("work")
        self.pm.set_active("work")
        self.pm.rename_profile("work", "office")
        self.assertEqual(self.pm.get_active(), "office")
        self.assertEqual(self.pm.list_profiles(), ["office"])

    def test_rename_errors(self):
        self.pm.create_profile("work")
        self.pm.create_profile("home")
        with self.assertRaises(ValidationError):
            self.pm.rename_profile("work", "")
        with self.assertRaises(NotFoundError):
            self.pm.rename_profile("ghost", "spirit")
        with self.assertRaises(ConflictError):
            self.pm.rename_profile("work", "home")
        self.assertEqual(self.pm.list_profiles(), ["work", "home"])

    def test_duplicate_copies_content(self):
        self.pm.create_profile("work")
        self.pm.write_profile("work", "10.1.1.1 build\n")
        self.pm.duplicate_profile("work", "work (copy)")
        self.assertEqual(self.pm.read_profile("work (copy)"), "10.1.1.1 build\n")
        self.assertEqual(self.pm.list_profiles(), ["work", "work (copy)"])

    def test_set_active_unknown_fails(self):
        with self.assertRaises(NotFoundError):
            self.pm.set_active("ghost")
        self.assertEqual(self.pm.get_active(), "")

    def test_metadata_matches_files_after_mixed_operations(self):
        self.pm.create_profile("a")
        self.pm.create_profile("b")
        self.pm.rename_profile("a", "x")
        self.pm.create_profile("c")
        self.pm.delete_profile("b")
        self.pm.duplicate_profile("c", "d")
        self.pm.rename_profile("d", "e")
        self.assertEqual(set(self.pm.list_profiles()), self._files_on_disk())
        self.assertEqual(set(self.pm.list_profiles()), {"x", "c", "e"})

    def test_orphan_files_are_not_listed(self):
        (self.profiles_dir / "stray.hosts").write_text("# orphan\n", encoding="utf-8")
        self.assertEqual(self.pm.list_profiles(), [])


class ValidateNameTests(unittest.TestCase):
    def test_strips_whitespace(self):
        self.assertEqual(validate_name("  work  "), "work")

    def test_rejects_path_characters(self):
        for bad in ("../etc", "a/b", "a\\b", "c:d", "what?", "x|y", ".", ".."):
            with self.subTest(name=bad):
                with self.assertRaises(ValidationError):
                    validate_name(bad)

    def test_accepts_spaces_and_unicode(self):
        self.assertEqual(validate_name("home (copy 2)"), "home (copy 2)")
        self.assertEqual(validate_name("büro"), "büro")


if __name__ == "__main__":
    unittest.main()
