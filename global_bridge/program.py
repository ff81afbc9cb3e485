# global_bridge/program.py
from __future__ import annotations

from contextlib import contextmanager
from copy import deepcopy
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from .config import (
    PARTICIPANTS_EXPORT_DEFAULT,
    MATCHES_EXPORT_DEFAULT,
    ACTIVITIES_EXPORT_DEFAULT,
    TIMESTAMP_FORMAT,
)
from .errors import MatchingError, SelectionError, UnknownPairError, ValidationError
from .ledger import ActivityLedger
from .matching.diagnostics import analyze_matching_coverage
from .matching.engine import auto_match, manual_match
from .matching.solve import solve_optimal_matching
from .models import Activity, Pair, Participant
from .persistence.store import Snapshot, Store
from .persistence import text_export
from .roster import Roster


class ProgramState:
    """
    Single owner of the roster, the pair mapping and the activity ledger.

    Every mutating method:
      1) validates before touching anything,
      2) applies the change in memory,
      3) saves the whole state through the store,
      4) rolls the in-memory change back if that save fails.

    Policies:
      - a student id can only be registered once
      - a participant belongs to at most one pair; manually re-pairing
        someone removes their previous pair together with its activities
      - auto matching only considers participants who are not yet paired
    """

    def __init__(self, store: Store, snapshot: Optional[Snapshot] = None):
        self.store = store
        snapshot = snapshot or Snapshot()
        self._roster = Roster(snapshot.participants)
        self._pairs: Dict[str, Pair] = dict(snapshot.pairs)
        for key in snapshot.activities:
            if key not in self._pairs:
                raise UnknownPairError(f"Activities recorded for unknown pair {key!r}.")
        self._ledger = ActivityLedger(snapshot.activities)

    @classmethod
    def open(cls, store: Store) -> "ProgramState":
        """Load saved state, or start empty when nothing was saved yet."""
        return cls(store, store.load())

    # -----------------------------------------------------------
    # Save-on-write with rollback
    # -----------------------------------------------------------

    def snapshot(self) -> Snapshot:
        return Snapshot(
            participants=self._roster.participants(),
            pairs=dict(self._pairs),
            activities=self._ledger.as_dict(),
        )

    @contextmanager
    def _commit(self):
        # Activities are deep-copied because `completed` mutates in place.
        before = deepcopy(self.snapshot())
        try:
            yield
            self.store.save(self.snapshot())
        except Exception:
            # PersistenceError from the save, or a failure halfway through a batch
            self._restore(before)
            raise

    def _restore(self, snapshot: Snapshot) -> None:
        self._roster = Roster(snapshot.participants)
        self._pairs = dict(snapshot.pairs)
        self._ledger = ActivityLedger(snapshot.activities)

    # -----------------------------------------------------------
    # Read side
    # -----------------------------------------------------------

    @property
    def participants(self) -> List[Participant]:
        return self._roster.participants()

    def mentors(self) -> List[Participant]:
        return self._roster.mentors()

    def mentees(self) -> List[Participant]:
        return self._roster.mentees()

    def participant(self, student_id: str) -> Optional[Participant]:
        return self._roster.get(student_id)

    @property
    def pairs(self) -> Dict[str, Pair]:
        return dict(self._pairs)

    def pair_for(self, student_id: str) -> Optional[Pair]:
        for pair in self._pairs.values():
            if pair.involves(student_id):
                return pair
        return None

    def activities_for(self, pair_key: str) -> List[Activity]:
        return self._ledger.activities_for(pair_key)

    @property
    def activities(self) -> Dict[str, List[Activity]]:
        return self._ledger.as_dict()

    def unmatched_mentors(self) -> List[Participant]:
        return [m for m in self._roster.mentors() if self.pair_for(m.student_id) is None]

    def unmatched_mentees(self) -> List[Participant]:
        return [m for m in self._roster.mentees() if self.pair_for(m.student_id) is None]

    def matching_diagnostics(self) -> Dict[str, Any]:
        return analyze_matching_coverage(
            self._roster.mentors(),
            self._roster.mentees(),
            self._pairs.values(),
        )

    # -----------------------------------------------------------
    # Registration
    # -----------------------------------------------------------

    def register(self, name, student_id, major, language, grade) -> Participant:
        participant = Participant.create(name, student_id, major, language, grade)
        return self.register_participant(participant)

    def register_participant(self, participant: Participant) -> Participant:
        with self._commit():
            self._roster.register(participant)
        return participant

    # -----------------------------------------------------------
    # Matching
    # -----------------------------------------------------------

    def _store_pair(self, pair: Pair) -> None:
        # Supersede any other pair either participant is already part of
        stale = [
            key for key, other in self._pairs.items()
            if key != pair.key
            and (other.involves(pair.mentor.student_id) or other.involves(pair.mentee.student_id))
        ]
        for key in stale:
            del self._pairs[key]
            self._ledger.drop(key)
        self._pairs[pair.key] = pair

    def auto_match(self, strategy: str = "greedy") -> List[Pair]:
        """
        Pair every not-yet-matched mentor with a not-yet-matched mentee.

        strategy="greedy"  -> registration order (first registered, first matched)
        strategy="optimal" -> MILP maximizing compatibility_score
        """
        mentors = self.unmatched_mentors()
        mentees = self.unmatched_mentees()

        if strategy == "greedy":
            new_pairs = auto_match(mentors, mentees)
        elif strategy == "optimal":
            status, new_pairs = solve_optimal_matching(mentors, mentees)
            if status not in ("Optimal", "Feasible"):
                raise MatchingError(f"Optimal matching failed: solver status {status}.")
        else:
            raise SelectionError(
                f"Unknown matching strategy {strategy!r}; use 'greedy' or 'optimal'."
            )

        with self._commit():
            for pair in new_pairs:
                self._store_pair(pair)
        return new_pairs

    def manual_match(self, mentor_id: Optional[str], mentee_id: Optional[str]) -> Pair:
        mentor = self._resolve(mentor_id, "mentor")
        mentee = self._resolve(mentee_id, "mentee")
        pair = manual_match(mentor, mentee)
        with self._commit():
            self._store_pair(pair)
        return pair

    def _resolve(self, student_id: Optional[str], role: str) -> Optional[Participant]:
        if student_id is None:
            return None
        p = self._roster.get(student_id)
        if p is None:
            raise SelectionError(f"No participant with student id {student_id} to use as {role}.")
        return p

    def clear_matches(self) -> None:
        """Drop every pair and its activity history."""
        with self._commit():
            for key in list(self._pairs):
                self._ledger.drop(key)
            self._pairs.clear()

    # -----------------------------------------------------------
    # Activities
    # -----------------------------------------------------------

    def add_activity(
        self,
        pair_key: str,
        content: str,
        location: str,
        timestamp: Optional[datetime] = None,
    ) -> Activity:
        if pair_key not in self._pairs:
            raise UnknownPairError(f"No matched pair with key {pair_key!r}.")
        activity = Activity.create(content, location, timestamp)
        return self.record_activity(pair_key, activity)

    def record_activity(self, pair_key: str, activity: Activity) -> Activity:
        with self._commit():
            stored = self._ledger.add(pair_key, activity, self._pairs)
        return stored

    def set_activity_completed(self, pair_key: str, index: int, completed: bool = True) -> Activity:
        with self._commit():
            activity = self._ledger.set_completed(pair_key, index, completed)
        return activity

    # -----------------------------------------------------------
    # Plain-text export / import
    # -----------------------------------------------------------

    def export_participants(self, path: str = PARTICIPANTS_EXPORT_DEFAULT) -> None:
        text_export.write_text(path, text_export.format_participants_text(self.participants))

    def export_matches(self, path: str = MATCHES_EXPORT_DEFAULT) -> None:
        text_export.write_text(path, text_export.format_matches_text(self._pairs.values()))

    def export_activities(self, path: str = ACTIVITIES_EXPORT_DEFAULT) -> None:
        text_export.write_text(
            path,
            text_export.format_activities_text(self._pairs, self._ledger.as_dict()),
        )

    # Each _apply_* helper mutates without saving; callers wrap them in
    # a single _commit() so a batch is saved (or rolled back) as a unit.

    def _apply_participants(self, parsed: List[Participant]) -> List[Participant]:
        added: List[Participant] = []
        for p in parsed:
            if p.student_id in self._roster:
                continue
            self._roster.register(p)
            added.append(p)
        return added

    def _apply_matches(self, rows: List[text_export.MatchRow]) -> List[Pair]:
        pairs: List[Pair] = []
        for _mentor_name, mentor_id, _mentee_name, mentee_id in rows:
            mentor = self._roster.get(mentor_id)
            mentee = self._roster.get(mentee_id)
            if mentor is None or mentee is None:
                missing = mentor_id if mentor is None else mentee_id
                raise ValidationError(f"Match {mentor_id}-{mentee_id} refers to unknown student id {missing}.")
            pair = manual_match(mentor, mentee)
            self._store_pair(pair)
            pairs.append(pair)
        return pairs

    @staticmethod
    def _activity_fingerprint(activity: Activity):
        # The listing only keeps minutes, so compare at that precision
        return (
            activity.timestamp.strftime(TIMESTAMP_FORMAT),
            activity.content,
            activity.location,
            activity.completed,
        )

    def _apply_activities(self, groups: List[text_export.ActivityGroup]) -> int:
        added = 0
        for group in groups:
            keys = [
                key for key, pair in self._pairs.items()
                if pair.mentor.name == group.mentor_name and pair.mentee.name == group.mentee_name
            ]
            if len(keys) != 1:
                raise UnknownPairError(
                    f"Cannot resolve pair [ {group.mentor_name} - {group.mentee_name} ]: "
                    f"{len(keys)} matching pairs."
                )
            key = keys[0]
            seen = {self._activity_fingerprint(a) for a in self._ledger.activities_for(key)}
            for act in group.activities:
                fingerprint = self._activity_fingerprint(act)
                if fingerprint in seen:
                    continue
                self._ledger.add(key, act, self._pairs)
                seen.add(fingerprint)
                added += 1
        return added

    def import_participants_text(self, text: str) -> List[Participant]:
        """
        Register every participant in `text` that is not registered yet.

        The file is validated as a whole first; one bad line imports nothing.
        """
        parsed = text_export.parse_participants_text(text)
        with self._commit():
            added = self._apply_participants(parsed)
        return added

    def import_participants(self, path: str = PARTICIPANTS_EXPORT_DEFAULT) -> List[Participant]:
        return self.import_participants_text(text_export.read_text(path))

    def import_matches_text(self, text: str) -> List[Pair]:
        rows = text_export.parse_matches_text(text)
        with self._commit():
            pairs = self._apply_matches(rows)
        return pairs

    def import_matches(self, path: str = MATCHES_EXPORT_DEFAULT) -> List[Pair]:
        return self.import_matches_text(text_export.read_text(path))

    def import_activities_text(self, text: str) -> int:
        """
        Add activities from a grouped listing. Each "[ mentor - mentee ]"
        header must name exactly one current pair. Activities already
        recorded for that pair (same minute, content, location and status)
        are skipped, so importing an export back is a no-op. Returns the
        number of activities added.
        """
        groups = text_export.parse_activities_text(text)
        with self._commit():
            added = self._apply_activities(groups)
        return added

    def import_activities(self, path: str = ACTIVITIES_EXPORT_DEFAULT) -> int:
        return self.import_activities_text(text_export.read_text(path))

    def import_all(
        self,
        participants_path: str = PARTICIPANTS_EXPORT_DEFAULT,
        matches_path: str = MATCHES_EXPORT_DEFAULT,
        activities_path: str = ACTIVITIES_EXPORT_DEFAULT,
    ) -> Tuple[List[Participant], List[Pair], int]:
        """
        Read and parse all three plain-text files, then apply them in one
        commit. A missing or malformed file imports nothing.
        """
        participants = text_export.parse_participants_text(text_export.read_text(participants_path))
        rows = text_export.parse_matches_text(text_export.read_text(matches_path))
        groups = text_export.parse_activities_text(text_export.read_text(activities_path))

        with self._commit():
            added = self._apply_participants(participants)
            pairs = self._apply_matches(rows)
            acts = self._apply_activities(groups)
        return added, pairs, acts
