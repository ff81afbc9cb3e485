# global_bridge/matching/solve.py
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

import pulp

from ..config import SAME_MAJOR_BONUS, GRADE_PROXIMITY_WEIGHT, MIN_GRADE, MAX_GRADE
from ..models import Participant, Pair
from .milp_model import build_milp_matching_model


def compatibility_score(mentor: Participant, mentee: Participant) -> float:
    """
    Default fit between a mentor and a mentee:
      SAME_MAJOR_BONUS if majors agree (case-insensitive)
      + GRADE_PROXIMITY_WEIGHT * (grade span - |grade difference|)
    """
    score = 0.0
    if mentor.major.strip().lower() == mentee.major.strip().lower():
        score += SAME_MAJOR_BONUS
    span = MAX_GRADE - MIN_GRADE
    score += GRADE_PROXIMITY_WEIGHT * (span - abs(mentor.grade - mentee.grade))
    return score


def build_fit_matrix(
    mentors: List[Participant],
    mentees: List[Participant],
    score: Callable[[Participant, Participant], float] = compatibility_score,
) -> Dict[Tuple[str, str], float]:
    """Key: (mentor_id, mentee_id) -> fit."""
    return {
        (m.student_id, e.student_id): score(m, e)
        for m in mentors
        for e in mentees
    }


def solve_optimal_matching(
    mentors: List[Participant],
    mentees: List[Participant],
    fit: Optional[Dict[Tuple[str, str], float]] = None,
) -> Tuple[str, List[Pair]]:
    """
    Solve the matching MILP and return (status, pairs).

    Pairs come back in mentor registration order. When the solver does not
    report Optimal/Feasible the pair list is empty.
    """
    # Nothing to assign; CBC rejects a model without variables
    if not mentors or not mentees:
        return "Optimal", []

    if fit is None:
        fit = build_fit_matrix(mentors, mentees)

    mentor_ids = [m.student_id for m in mentors]
    mentee_ids = [e.student_id for e in mentees]

    prob, x = build_milp_matching_model(mentor_ids, mentee_ids, fit)

    solver = pulp.PULP_CBC_CMD(msg=False)
    prob.solve(solver)

    status = pulp.LpStatus[prob.status]

    pairs: List[Pair] = []
    if status in ("Optimal", "Feasible"):
        mentee_by_id = {e.student_id: e for e in mentees}
        for m in mentors:
            for e_id in mentee_ids:
                val = x[(m.student_id, e_id)].varValue
                if val is not None and val > 0.5:
                    pairs.append(Pair(m, mentee_by_id[e_id]))
                    break

    return status, pairs
