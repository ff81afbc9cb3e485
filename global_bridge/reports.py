# global_bridge/reports.py
from __future__ import annotations

from typing import Dict, List, Mapping

import pandas as pd

from .config import TIMESTAMP_FORMAT
from .models import Activity, Pair, Participant
from .matching.solve import build_fit_matrix


def participants_frame(participants: List[Participant]) -> pd.DataFrame:
    """One row per participant, in registration order."""
    return pd.DataFrame(
        [
            {
                "student_id": p.student_id,
                "name": p.name,
                "major": p.major,
                "language": p.language.value,
                "grade": p.grade,
                "role": "mentor" if p.is_mentor() else "mentee",
            }
            for p in participants
        ],
        columns=["student_id", "name", "major", "language", "grade", "role"],
    )


def pairs_frame(pairs: Mapping[str, Pair]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "pair_key": key,
                "mentor": pair.mentor.name,
                "mentor_id": pair.mentor.student_id,
                "mentee": pair.mentee.name,
                "mentee_id": pair.mentee.student_id,
            }
            for key, pair in pairs.items()
        ],
        columns=["pair_key", "mentor", "mentor_id", "mentee", "mentee_id"],
    )


def activities_frame(activities: Mapping[str, List[Activity]]) -> pd.DataFrame:
    rows: List[Dict] = []
    for key, acts in activities.items():
        for a in acts:
            rows.append({
                "pair_key": key,
                "when": a.timestamp.strftime(TIMESTAMP_FORMAT),
                "content": a.content,
                "location": a.location,
                "status": a.status,
            })
    return pd.DataFrame(rows, columns=["pair_key", "when", "content", "location", "status"])


def compatibility_matrix(
    mentors: List[Participant],
    mentees: List[Participant],
) -> pd.DataFrame:
    """Mentor x mentee fit used by the optimal matcher (rows: mentors)."""
    fit = build_fit_matrix(mentors, mentees)
    return pd.DataFrame(
        [[fit[(m.student_id, e.student_id)] for e in mentees] for m in mentors],
        index=[m.student_id for m in mentors],
        columns=[e.student_id for e in mentees],
    )
