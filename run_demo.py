# run_demo.py

import os
import tempfile

from global_bridge.persistence.store import JsonFileStore
from global_bridge.program import ProgramState
from global_bridge.reports import (
    participants_frame,
    pairs_frame,
    activities_frame,
    compatibility_matrix,
)


DEMO_PARTICIPANTS = [
    # name, student id, major, language, grade
    ("Kim", "1001", "CS", "Korean", 2),
    ("Park", "1002", "Econ", "korean", 4),
    ("Choi", "1003", "Physics", "KOREAN", 1),
    ("Lee", "2002", "Econ", "English", 3),
    ("Smith", "2003", "CS", "english", 2),
]


def main():
    workdir = tempfile.mkdtemp(prefix="global_bridge_demo_")
    path = os.path.join(workdir, "globalbridge_data.json")

    # ---- Fresh program: nothing saved yet ----
    state = ProgramState.open(JsonFileStore(path))
    print(f"[LOAD] {path}: {len(state.participants)} participants (fresh start)")

    for row in DEMO_PARTICIPANTS:
        state.register(*row)
    print("\n=== PARTICIPANTS ===")
    print(participants_frame(state.participants).to_string(index=False))
    print()

    # ============================
    #  FIT MATRIX (PANDAS)
    # ============================
    print("=== MENTOR–MENTEE FIT MATRIX ===")
    print(compatibility_matrix(state.mentors(), state.mentees()).round(2))
    print()

    # ---- Greedy vs optimal ----
    pairs = state.auto_match(strategy="optimal")
    print(f"[MATCH] optimal: {[p.key for p in pairs]}")

    diag = state.matching_diagnostics()
    for msg in diag["messages"]:
        print("-", msg)
    print("Suggestion:", diag["suggestion"])
    print()

    state.clear_matches()
    pairs = state.auto_match()
    print(f"[MATCH] greedy: {[p.key for p in pairs]}")
    print(pairs_frame(state.pairs).to_string(index=False))
    print()

    # ---- Activities ----
    first = pairs[0].key
    state.add_activity(first, "Coffee chat", "Library")
    state.add_activity(first, "Campus tour", "Main gate")
    state.set_activity_completed(first, 0)

    # ---- Reload from disk and compare ----
    reloaded = ProgramState.open(JsonFileStore(path))
    print("=== ACTIVITIES (reloaded) ===")
    print(activities_frame(reloaded.activities).to_string(index=False))
    print()

    same = (
        reloaded.participants == state.participants
        and reloaded.pairs == state.pairs
        and reloaded.activities == state.activities
    )
    print("Round trip:", "PASS" if same else "FAIL")


if __name__ == "__main__":
    main()
