# tests/test_text_export.py
import unittest
import sys
import os
import shutil
import tempfile
from datetime import datetime

# Add parent directory to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from global_bridge.errors import PersistenceError, ValidationError
from global_bridge.models import Activity, Pair, Participant
from global_bridge.persistence.text_export import (
    format_activities_text,
    format_matches_text,
    format_participants_text,
    parse_activities_text,
    parse_matches_text,
    parse_participants_text,
    read_text,
    write_text,
)


class TestParticipantsText(unittest.TestCase):

    def test_line_format(self):
        kim = Participant.create("Kim", "1001", "CS", "Korean", 2)
        self.assertEqual(format_participants_text([kim]), "Kim,1001,CS,Korean,2\n")

    def test_embedded_comma_survives(self):
        p = Participant.create("Lee", "2002", "Law, Politics", "English", 3)
        text = format_participants_text([p])
        self.assertEqual(parse_participants_text(text), [p])

    def test_parse_skips_blank_lines(self):
        text = "Kim,1001,CS,korean,2\n\nLee,2002,Econ,English,3\n"
        parsed = parse_participants_text(text)
        self.assertEqual([p.student_id for p in parsed], ["1001", "2002"])
        self.assertTrue(parsed[0].is_mentor())

    def test_bad_lines_report_line_number(self):
        with self.assertRaisesRegex(ValidationError, "Line 2"):
            parse_participants_text("Kim,1001,CS,Korean,2\nLee,2002,Econ,English\n")
        with self.assertRaisesRegex(ValidationError, "Line 1"):
            parse_participants_text("Kim,1001,CS,Korean,second\n")
        with self.assertRaisesRegex(ValidationError, "Line 1"):
            parse_participants_text("Kim,1001,CS,French,2\n")


class TestMatchesText(unittest.TestCase):

    def test_format_and_parse(self):
        kim = Participant.create("Kim", "1001", "CS", "Korean", 2)
        lee = Participant.create("Lee", "2002", "Econ", "English", 3)
        text = format_matches_text([Pair(kim, lee)])
        self.assertEqual(text, "Kim,1001,Lee,2002\n")
        self.assertEqual(parse_matches_text(text), [("Kim", "1001", "Lee", "2002")])

    def test_wrong_field_count(self):
        with self.assertRaises(ValidationError):
            parse_matches_text("Kim,1001,Lee\n")


class TestActivitiesText(unittest.TestCase):

    def setUp(self):
        kim = Participant.create("Kim", "1001", "CS", "Korean", 2)
        lee = Participant.create("Lee", "2002", "Econ", "English", 3)
        self.pair = Pair(kim, lee)

    def test_listing_parses_back(self):
        acts = [
            Activity(datetime(2024, 12, 9, 14, 30), "Coffee chat", "Library", completed=True),
            Activity(datetime(2024, 12, 10, 9, 0), "Meet @ noon", "Cafe"),
        ]
        text = format_activities_text({self.pair.key: self.pair}, {self.pair.key: acts})
        groups = parse_activities_text(text)

        self.assertEqual(len(groups), 1)
        self.assertEqual((groups[0].mentor_name, groups[0].mentee_name), ("Kim", "Lee"))
        self.assertEqual(groups[0].activities, acts)

    def test_mentor_name_with_separator_rejected_on_export(self):
        kim = Participant.create("Kim - Jr", "1001", "CS", "Korean", 2)
        lee = Participant.create("Lee", "2002", "Econ", "English", 3)
        pair = Pair(kim, lee)
        acts = [Activity(datetime(2024, 12, 9, 14, 30), "Coffee chat", "Library")]
        with self.assertRaisesRegex(ValidationError, "mentor name"):
            format_activities_text({pair.key: pair}, {pair.key: acts})

    def test_mentee_name_with_separator_still_round_trips(self):
        kim = Participant.create("Kim", "1001", "CS", "Korean", 2)
        lee = Participant.create("Lee - Ann", "2002", "Econ", "English", 3)
        pair = Pair(kim, lee)
        acts = [Activity(datetime(2024, 12, 9, 14, 30), "Coffee chat", "Library")]
        groups = parse_activities_text(format_activities_text({pair.key: pair}, {pair.key: acts}))
        self.assertEqual((groups[0].mentor_name, groups[0].mentee_name), ("Kim", "Lee - Ann"))

    def test_location_with_separator_rejected_on_export(self):
        acts = [Activity(datetime(2024, 12, 9, 14, 30), "Coffee chat", "Cafe @ Library")]
        with self.assertRaisesRegex(ValidationError, "location"):
            format_activities_text({self.pair.key: self.pair}, {self.pair.key: acts})

    def test_multiline_content_rejected_on_export(self):
        acts = [Activity(datetime(2024, 12, 9, 14, 30), "Coffee\nchat", "Library")]
        with self.assertRaises(ValidationError):
            format_activities_text({self.pair.key: self.pair}, {self.pair.key: acts})

    def test_activity_before_header_rejected(self):
        with self.assertRaises(ValidationError):
            parse_activities_text("- 2024-12-09 14:30 | Coffee chat @ Library [in-progress]\n")

    def test_garbage_line_rejected(self):
        with self.assertRaisesRegex(ValidationError, "Line 2"):
            parse_activities_text("[ Kim - Lee ]\nsomething else\n")


class TestFiles(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_write_then_read(self):
        path = os.path.join(self.tmpdir, "participants.txt")
        write_text(path, "Kim,1001,CS,Korean,2\n")
        self.assertEqual(read_text(path), "Kim,1001,CS,Korean,2\n")

    def test_missing_file(self):
        with self.assertRaises(PersistenceError):
            read_text(os.path.join(self.tmpdir, "nope.txt"))


if __name__ == '__main__':
    unittest.main()
