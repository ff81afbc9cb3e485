# tests/test_models.py
import unittest
import sys
import os
from datetime import datetime

# Add parent directory to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from global_bridge.errors import ValidationError, RoleConstraintError
from global_bridge.models import Activity, Language, Pair, Participant, pair_key


def kim():
    return Participant.create("Kim", "1001", "CS", "Korean", 2)


def lee():
    return Participant.create("Lee", "2002", "Econ", "English", 3)


class TestLanguage(unittest.TestCase):

    def test_parse_is_case_insensitive(self):
        for text in ("Korean", "korean", "KOREAN", "  kOrEaN "):
            self.assertIs(Language.parse(text), Language.KOREAN)
        self.assertIs(Language.parse("english"), Language.ENGLISH)

    def test_parse_rejects_other_languages(self):
        for text in ("Japanese", "", None, 3):
            with self.assertRaises(ValidationError):
                Language.parse(text)

    def test_parse_error_names_the_allowed_languages(self):
        with self.assertRaises(ValidationError) as ctx:
            Language.parse("Japanese")
        for lang in Language:
            self.assertIn(lang.value, str(ctx.exception))


class TestParticipant(unittest.TestCase):

    def test_role_is_derived_from_language(self):
        self.assertTrue(kim().is_mentor())
        self.assertFalse(lee().is_mentor())
        self.assertTrue(Participant.create("Park", "1002", "Math", "kOREAN", 1).is_mentor())

    def test_create_strips_fields(self):
        p = Participant.create("  Kim ", " 1001 ", " CS ", "Korean", 2)
        self.assertEqual((p.name, p.student_id, p.major), ("Kim", "1001", "CS"))

    def test_missing_fields_rejected(self):
        with self.assertRaises(ValidationError):
            Participant.create("", "1001", "CS", "Korean", 2)
        with self.assertRaises(ValidationError):
            Participant.create("Kim", "  ", "CS", "Korean", 2)
        with self.assertRaises(ValidationError):
            Participant.create("Kim", "1001", "", "Korean", 2)

    def test_student_id_must_be_digits(self):
        with self.assertRaises(ValidationError):
            Participant.create("Kim", "10a1", "CS", "Korean", 2)

    def test_grade_bounds(self):
        for grade in (1, 4):
            Participant.create("Kim", "1001", "CS", "Korean", grade)
        for grade in (0, 5, True, "2", 2.0):
            with self.assertRaises(ValidationError):
                Participant.create("Kim", "1001", "CS", "Korean", grade)

    def test_str(self):
        self.assertEqual(str(kim()), "Kim (1001) - Korean - CS")


class TestPair(unittest.TestCase):

    def test_key(self):
        pair = Pair(kim(), lee())
        self.assertEqual(pair.key, "1001-2002")
        self.assertEqual(pair_key("1001", "2002"), pair.key)

    def test_role_violations(self):
        with self.assertRaises(RoleConstraintError):
            Pair(lee(), lee())
        with self.assertRaises(RoleConstraintError):
            Pair(kim(), kim())
        with self.assertRaises(RoleConstraintError):
            Pair(lee(), kim())

    def test_str(self):
        self.assertEqual(str(Pair(kim(), lee())), "Mentor: Kim (Korean) - Mentee: Lee (English)")


class TestActivity(unittest.TestCase):

    def test_defaults_to_in_progress(self):
        act = Activity.create("Coffee chat", "Library", datetime(2024, 12, 9, 14, 30))
        self.assertFalse(act.completed)
        self.assertEqual(str(act), "2024-12-09 14:30 | Coffee chat @ Library [in-progress]")

        act.completed = True
        self.assertEqual(str(act), "2024-12-09 14:30 | Coffee chat @ Library [completed]")

    def test_timestamp_defaults_to_now(self):
        before = datetime.now().replace(second=0, microsecond=0)
        act = Activity.create("Coffee chat", "Library")
        self.assertGreaterEqual(act.timestamp, before)
        self.assertEqual(act.timestamp.second, 0)

    def test_content_and_location_required(self):
        with self.assertRaises(ValidationError):
            Activity.create("  ", "Library")
        with self.assertRaises(ValidationError):
            Activity.create("Coffee chat", "")


if __name__ == '__main__':
    unittest.main()
