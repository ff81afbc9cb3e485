# global_bridge/matching/milp_model.py
from __future__ import annotations

from typing import Dict, List, Tuple

import pulp


def build_milp_matching_model(
    mentor_ids: List[str],
    mentee_ids: List[str],
    fit: Dict[Tuple[str, str], float],
) -> Tuple[pulp.LpProblem, Dict[Tuple[str, str], pulp.LpVariable]]:
    """
    MILP for one-to-one mentor/mentee assignment.

    Variables:
        x[m, e] = 1 if mentor m is paired with mentee e.

    Rules encoded:

      1) Each mentor is in at most one pair:
           ∀m: sum_e x[m,e] ≤ 1

      2) Each mentee is in at most one pair:
           ∀e: sum_m x[m,e] ≤ 1

      3) Same coverage as the greedy matcher:
           sum_{m,e} x[m,e] = min(|M|, |E|)

    Objective:
        maximize sum_{m,e} fit[(m, e)] * x[m,e]
    """

    # ---------- Problem ----------
    prob = pulp.LpProblem("GlobalBridge_Matching", pulp.LpMaximize)

    # ---------- Decision variables ----------
    x: Dict[Tuple[str, str], pulp.LpVariable] = {}
    for i, m in enumerate(mentor_ids):
        for j, e in enumerate(mentee_ids):
            x[(m, e)] = pulp.LpVariable(f"x_{i}_{j}", cat="Binary")

    # ---------- Objective ----------
    prob += (
        pulp.lpSum(fit.get(key, 0.0) * var for key, var in x.items()),
        "TotalFit",
    )

    # ---------- Constraints ----------

    # (1) At most one mentee per mentor
    for i, m in enumerate(mentor_ids):
        prob += (
            pulp.lpSum(x[(m, e)] for e in mentee_ids) <= 1,
            f"OneMenteePerMentor_{i}",
        )

    # (2) At most one mentor per mentee
    for j, e in enumerate(mentee_ids):
        prob += (
            pulp.lpSum(x[(m, e)] for m in mentor_ids) <= 1,
            f"OneMentorPerMentee_{j}",
        )

    # (3) Match as many pairs as the greedy matcher would
    prob += (
        pulp.lpSum(x.values()) == min(len(mentor_ids), len(mentee_ids)),
        "PairCount",
    )

    return prob, x
