# tests/test_reports.py
import unittest
import sys
import os
from datetime import datetime

# Add parent directory to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from global_bridge.models import Activity, Pair, Participant
from global_bridge.reports import (
    activities_frame,
    compatibility_matrix,
    pairs_frame,
    participants_frame,
)


class TestReports(unittest.TestCase):

    def setUp(self):
        self.kim = Participant.create("Kim", "1001", "CS", "Korean", 2)
        self.lee = Participant.create("Lee", "2002", "Econ", "English", 3)
        self.smith = Participant.create("Smith", "2003", "CS", "English", 2)
        self.pair = Pair(self.kim, self.lee)

    def test_participants_frame(self):
        df = participants_frame([self.kim, self.lee])
        self.assertEqual(list(df["student_id"]), ["1001", "2002"])
        self.assertEqual(list(df["role"]), ["mentor", "mentee"])

    def test_empty_frames_keep_columns(self):
        self.assertEqual(len(participants_frame([])), 0)
        self.assertIn("pair_key", pairs_frame({}).columns)
        self.assertIn("status", activities_frame({}).columns)

    def test_pairs_and_activities(self):
        df = pairs_frame({self.pair.key: self.pair})
        self.assertEqual(df.iloc[0]["mentee"], "Lee")

        act = Activity(datetime(2024, 12, 9, 14, 30), "Coffee chat", "Library")
        df = activities_frame({self.pair.key: [act]})
        self.assertEqual(df.iloc[0]["when"], "2024-12-09 14:30")
        self.assertEqual(df.iloc[0]["status"], "in-progress")

    def test_compatibility_matrix(self):
        df = compatibility_matrix([self.kim], [self.lee, self.smith])
        self.assertEqual(df.shape, (1, 2))
        self.assertAlmostEqual(df.loc["1001", "2003"], 1.75)
        self.assertAlmostEqual(df.loc["1001", "2002"], 0.5)


if __name__ == '__main__':
    unittest.main()
