# global_bridge/matching/engine.py
from __future__ import annotations

from typing import List, Optional

from ..models import Participant, Pair
from ..errors import SelectionError


def auto_match(
    mentors: List[Participant],
    mentees: List[Participant],
) -> List[Pair]:
    """
    Greedy, order-preserving assignment:
      pair i = (mentors[i], mentees[i]) for i in [0, min(len(mentors), len(mentees)))

    Surplus mentors or mentees are left unmatched. First registered is
    first matched; no attempt is made at an optimal assignment (see
    solve.solve_optimal_matching for that).
    """
    match_count = min(len(mentors), len(mentees))
    return [Pair(mentors[i], mentees[i]) for i in range(match_count)]


def manual_match(
    mentor: Optional[Participant],
    mentee: Optional[Participant],
) -> Pair:
    """
    Build one pair from an explicit selection.

    Raises SelectionError if either side is missing, and RoleConstraintError
    (from Pair) if the roles are wrong.
    """
    if mentor is None or mentee is None:
        raise SelectionError("Both a mentor and a mentee must be selected.")
    return Pair(mentor, mentee)
