# global_bridge/persistence/store.py
from __future__ import annotations

import json
import os
import stat
import tempfile
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..config import DATA_FILE_DEFAULT, STORE_FORMAT_VERSION
from ..errors import GlobalBridgeError, PersistenceError
from ..models import Activity, Language, Pair, Participant


@dataclass
class Snapshot:
    """The whole program state, saved and loaded as one unit."""
    participants: List[Participant] = field(default_factory=list)
    pairs: Dict[str, Pair] = field(default_factory=dict)
    activities: Dict[str, List[Activity]] = field(default_factory=dict)


class Store:
    """
    Repository interface used by ProgramState.

    load() returns None when nothing has ever been saved; any other failure
    is a PersistenceError.
    """

    def save(self, snapshot: Snapshot) -> None:
        raise NotImplementedError

    def load(self) -> Optional[Snapshot]:
        raise NotImplementedError


# -----------------------------------------------------------
# JSON encoding
# -----------------------------------------------------------

def _participant_to_dict(p: Participant) -> Dict[str, Any]:
    return {
        "name": p.name,
        "student_id": p.student_id,
        "major": p.major,
        "language": p.language.value,
        "grade": p.grade,
    }


def _activity_to_dict(a: Activity) -> Dict[str, Any]:
    return {
        "timestamp": a.timestamp.isoformat(),
        "content": a.content,
        "location": a.location,
        "completed": a.completed,
    }


def snapshot_to_dict(snapshot: Snapshot) -> Dict[str, Any]:
    # Pairs are written by reference; participants are stored exactly once.
    return {
        "format_version": STORE_FORMAT_VERSION,
        "participants": [_participant_to_dict(p) for p in snapshot.participants],
        "pairs": {
            key: {
                "mentor_id": pair.mentor.student_id,
                "mentee_id": pair.mentee.student_id,
            }
            for key, pair in snapshot.pairs.items()
        },
        "activities": {
            key: [_activity_to_dict(a) for a in acts]
            for key, acts in snapshot.activities.items()
        },
    }


def snapshot_from_dict(data: Dict[str, Any]) -> Snapshot:
    """
    Rebuild a Snapshot, re-checking every invariant on the way in:
      - participants are valid and have unique ids
      - every pair references registered participants with the right roles
        and is stored under its own key
      - every activity key belongs to a pair
    """
    version = data.get("format_version")
    if version != STORE_FORMAT_VERSION:
        raise PersistenceError(
            f"Unsupported data format version {version!r} "
            f"(expected {STORE_FORMAT_VERSION})."
        )

    # ---------- 1) Participants ----------
    participants: List[Participant] = []
    by_id: Dict[str, Participant] = {}
    for raw in data["participants"]:
        p = Participant(
            name=raw["name"],
            student_id=raw["student_id"],
            major=raw["major"],
            language=Language.parse(raw["language"]),
            grade=raw["grade"],
        )
        p.validate()
        if p.student_id in by_id:
            raise PersistenceError(f"Duplicate participant id {p.student_id} in saved data.")
        by_id[p.student_id] = p
        participants.append(p)

    # ---------- 2) Pairs ----------
    pairs: Dict[str, Pair] = {}
    for key, raw in data["pairs"].items():
        mentor = by_id.get(raw["mentor_id"])
        mentee = by_id.get(raw["mentee_id"])
        if mentor is None or mentee is None:
            raise PersistenceError(
                f"Pair {key} references an unknown participant "
                f"({raw['mentor_id']} / {raw['mentee_id']})."
            )
        pair = Pair(mentor, mentee)
        if pair.key != key:
            raise PersistenceError(f"Pair stored under {key!r} but its key is {pair.key!r}.")
        pairs[key] = pair

    # ---------- 3) Activities ----------
    activities: Dict[str, List[Activity]] = {}
    for key, raw_list in data["activities"].items():
        if key not in pairs:
            raise PersistenceError(f"Activities recorded for unknown pair {key!r}.")
        activities[key] = [
            Activity(
                timestamp=datetime.fromisoformat(raw["timestamp"]),
                content=raw["content"],
                location=raw["location"],
                completed=bool(raw["completed"]),
            )
            for raw in raw_list
        ]

    return Snapshot(participants=participants, pairs=pairs, activities=activities)


# -----------------------------------------------------------
# Stores
# -----------------------------------------------------------

def _file_mode(target: str) -> int:
    """Mode of the existing target, or what open() would give a new file."""
    try:
        return stat.S_IMODE(os.stat(target).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _fsync_directory(directory: str) -> None:
    # Makes the rename itself durable; directories cannot be opened on Windows
    if os.name != "posix":
        return
    fd = os.open(directory, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


class JsonFileStore(Store):
    """
    Full state in a single JSON file.

    Saves go to a temporary file in the same directory which is then
    os.replace()d over the target, so a crash mid-write leaves the last
    committed file intact.
    """

    def __init__(self, path: str = DATA_FILE_DEFAULT):
        self.path = path

    def save(self, snapshot: Snapshot) -> None:
        target = os.path.abspath(self.path)
        directory = os.path.dirname(target)
        tmp_path = None
        try:
            payload = snapshot_to_dict(snapshot)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{os.path.basename(target)}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = f.name
                json.dump(payload, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            # NamedTemporaryFile creates 0600; keep the target's mode instead
            os.chmod(tmp_path, _file_mode(target))
            os.replace(tmp_path, target)
            _fsync_directory(directory)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise PersistenceError(f"Could not save program data to {target}: {exc}") from exc

    def load(self) -> Optional[Snapshot]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Could not read program data from {self.path}: {exc}") from exc

        try:
            return snapshot_from_dict(data)
        except PersistenceError:
            raise
        except (GlobalBridgeError, KeyError, TypeError, AttributeError, ValueError) as exc:
            raise PersistenceError(f"Corrupt program data in {self.path}: {exc}") from exc


class InMemoryStore(Store):
    """
    Test double: keeps a private copy of the last saved snapshot and counts
    save calls. Set fail_next_save to make the next save raise.
    """

    def __init__(self, snapshot: Optional[Snapshot] = None):
        self._snapshot = deepcopy(snapshot)
        self.save_calls = 0
        self.fail_next_save = False

    def save(self, snapshot: Snapshot) -> None:
        self.save_calls += 1
        if self.fail_next_save:
            self.fail_next_save = False
            raise PersistenceError("Simulated save failure.")
        self._snapshot = deepcopy(snapshot)

    def load(self) -> Optional[Snapshot]:
        return deepcopy(self._snapshot)
