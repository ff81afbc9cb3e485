# global_bridge/matching/diagnostics.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List

from ..models import Participant, Pair


def analyze_matching_coverage(
    mentors: List[Participant],
    mentees: List[Participant],
    pairs: Iterable[Pair],
) -> Dict[str, Any]:
    """
    Summarize how much of the roster the current pairs cover.

    Returns a dict with:
      - 'ok': bool  (True when nobody who *could* be matched is left over)
      - 'messages': list[str]
      - 'suggestion': str
      - 'num_mentors', 'num_mentees', 'num_pairs': int
      - 'unmatched_mentors', 'unmatched_mentees': list of student ids
      - 'max_pairs': int  (min(#mentors, #mentees))
    """
    messages: List[str] = []
    pairs = list(pairs)

    paired_ids = set()
    for pair in pairs:
        paired_ids.add(pair.mentor.student_id)
        paired_ids.add(pair.mentee.student_id)

    unmatched_mentors = [m.student_id for m in mentors if m.student_id not in paired_ids]
    unmatched_mentees = [m.student_id for m in mentees if m.student_id not in paired_ids]

    max_pairs = min(len(mentors), len(mentees))

    # ---------- 1. Pairs still possible among unmatched participants ----------
    open_pairs = min(len(unmatched_mentors), len(unmatched_mentees))
    if open_pairs > 0:
        messages.append(
            f"{open_pairs} more pair(s) can be formed: {len(unmatched_mentors)} "
            f"mentor(s) and {len(unmatched_mentees)} mentee(s) are unmatched."
        )

    # ---------- 2. Structural surplus (cannot be fixed by matching) ----------
    if len(mentors) > len(mentees):
        messages.append(
            f"{len(mentors) - len(mentees)} mentor(s) will stay unmatched: "
            f"{len(mentors)} mentors but only {len(mentees)} mentees."
        )
    elif len(mentees) > len(mentors):
        messages.append(
            f"{len(mentees) - len(mentors)} mentee(s) will stay unmatched: "
            f"{len(mentees)} mentees but only {len(mentors)} mentors."
        )

    ok = open_pairs == 0

    if not mentors and not mentees:
        suggestion = "No participants registered yet."
    elif open_pairs > 0:
        suggestion = "Run auto matching or pick the remaining pairs manually."
    elif len(mentors) != len(mentees):
        suggestion = "Recruit more " + (
            "mentees." if len(mentors) > len(mentees) else "mentors."
        )
    else:
        suggestion = "Everyone is matched."

    return {
        "ok": ok,
        "messages": messages,
        "suggestion": suggestion,
        "num_mentors": len(mentors),
        "num_mentees": len(mentees),
        "num_pairs": len(pairs),
        "max_pairs": max_pairs,
        "unmatched_mentors": unmatched_mentors,
        "unmatched_mentees": unmatched_mentees,
    }
