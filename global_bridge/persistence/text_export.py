# global_bridge/persistence/text_export.py
from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Mapping, Tuple

from ..config import TIMESTAMP_FORMAT, STATUS_COMPLETED, STATUS_IN_PROGRESS
from ..errors import PersistenceError, ValidationError
from ..ledger import format_activity_listing
from ..models import Activity, Pair, Participant

# Plain-text formats, one record per line:
#
#   participants.txt   name,studentId,major,language,grade
#   matches.txt        mentorName,mentorId,menteeName,menteeId
#   activities.txt     grouped listing, see ledger.format_activity_listing
#
# The two flat formats go through the csv module, so a comma inside a
# field is quoted on export and read back intact.

MatchRow = Tuple[str, str, str, str]

_HEADER_RE = re.compile(r"^\[ (?P<mentor>.+?) - (?P<mentee>.+) \]$")
_ACTIVITY_RE = re.compile(
    r"^- (?P<ts>\d{4}-\d{2}-\d{2} \d{2}:\d{2}) \| (?P<content>.*) @ (?P<location>.*) "
    rf"\[(?P<status>{re.escape(STATUS_COMPLETED)}|{re.escape(STATUS_IN_PROGRESS)})\]$"
)


@dataclass
class ActivityGroup:
    mentor_name: str
    mentee_name: str
    activities: List[Activity] = field(default_factory=list)


def write_text(path: str, text: str) -> None:
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as exc:
        raise PersistenceError(f"Could not write {path}: {exc}") from exc


def read_text(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except OSError as exc:
        raise PersistenceError(f"Could not read {path}: {exc}") from exc


def _write_rows(rows: Iterable[Iterable]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    for row in rows:
        writer.writerow(row)
    return buf.getvalue()


def _read_rows(text: str):
    """Yield (line_number, fields) for every non-blank line."""
    for line_no, row in enumerate(csv.reader(io.StringIO(text)), start=1):
        if not row or all(not cell.strip() for cell in row):
            continue
        yield line_no, [cell.strip() for cell in row]


# -----------------------------------------------------------
# Participants
# -----------------------------------------------------------

def format_participants_text(participants: Iterable[Participant]) -> str:
    return _write_rows(
        (p.name, p.student_id, p.major, p.language.value, p.grade)
        for p in participants
    )


def parse_participants_text(text: str) -> List[Participant]:
    participants: List[Participant] = []
    for line_no, fields in _read_rows(text):
        if len(fields) != 5:
            raise ValidationError(
                f"Line {line_no}: expected 5 fields "
                f"(name,studentId,major,language,grade), got {len(fields)}."
            )
        name, student_id, major, language, grade = fields
        try:
            grade_value = int(grade)
        except ValueError:
            raise ValidationError(f"Line {line_no}: grade {grade!r} is not a number.") from None
        try:
            participants.append(
                Participant.create(name, student_id, major, language, grade_value)
            )
        except ValidationError as exc:
            raise ValidationError(f"Line {line_no}: {exc}") from exc
    return participants


# -----------------------------------------------------------
# Matches
# -----------------------------------------------------------

def format_matches_text(pairs: Iterable[Pair]) -> str:
    return _write_rows(
        (p.mentor.name, p.mentor.student_id, p.mentee.name, p.mentee.student_id)
        for p in pairs
    )


def parse_matches_text(text: str) -> List[MatchRow]:
    rows: List[MatchRow] = []
    for line_no, fields in _read_rows(text):
        if len(fields) != 4:
            raise ValidationError(
                f"Line {line_no}: expected 4 fields "
                f"(mentorName,mentorId,menteeName,menteeId), got {len(fields)}."
            )
        rows.append((fields[0], fields[1], fields[2], fields[3]))
    return rows


# -----------------------------------------------------------
# Activities
# -----------------------------------------------------------

def format_activities_text(
    pairs: Mapping[str, Pair],
    activities: Mapping[str, List[Activity]],
) -> str:
    """
    Render the grouped listing for export.

    Values that parse_activities_text could not split back unambiguously
    are rejected: a mentor name containing " - ", a location containing
    " @ ", and line breaks in any field.
    """
    for key in activities:
        pair = pairs[key]
        if " - " in pair.mentor.name:
            raise ValidationError(
                f"Cannot export activities for {key}: mentor name {pair.mentor.name!r} contains ' - '."
            )
        for label, name in (("mentor", pair.mentor.name), ("mentee", pair.mentee.name)):
            if "\n" in name or "\r" in name:
                raise ValidationError(f"Cannot export activities for {key}: {label} name spans lines.")
        for act in activities[key]:
            if " @ " in act.location:
                raise ValidationError(
                    f"Cannot export activity {act.content!r} for {key}: "
                    f"location {act.location!r} contains ' @ '."
                )
            if any(c in field for field in (act.content, act.location) for c in "\r\n"):
                raise ValidationError(
                    f"Cannot export activity {act.content!r} for {key}: text spans lines."
                )
    return format_activity_listing(pairs, activities)


def parse_activities_text(text: str) -> List[ActivityGroup]:
    """
    Parse the grouped listing back into ActivityGroups.

    Content and location are split at the last " @ " on the line. Any
    line that is neither a header, an activity nor blank is rejected.
    """
    groups: List[ActivityGroup] = []
    current = None

    for line_no, line in enumerate(text.splitlines(), start=1):
        line = line.rstrip()
        if not line:
            continue

        header = _HEADER_RE.match(line)
        if header:
            current = ActivityGroup(header.group("mentor"), header.group("mentee"))
            groups.append(current)
            continue

        entry = _ACTIVITY_RE.match(line)
        if entry:
            if current is None:
                raise ValidationError(f"Line {line_no}: activity appears before any pair header.")
            current.activities.append(
                Activity(
                    timestamp=datetime.strptime(entry.group("ts"), TIMESTAMP_FORMAT),
                    content=entry.group("content"),
                    location=entry.group("location"),
                    completed=entry.group("status") == STATUS_COMPLETED,
                )
            )
            continue

        raise ValidationError(f"Line {line_no}: unrecognized activity line {line!r}.")

    return groups
