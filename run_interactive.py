# run_interactive.py

from __future__ import annotations

import sys

from global_bridge.config import DATA_FILE_DEFAULT
from global_bridge.errors import GlobalBridgeError
from global_bridge.ledger import format_activity_listing
from global_bridge.persistence.store import JsonFileStore
from global_bridge.program import ProgramState
from global_bridge.reports import participants_frame, pairs_frame


MENU = (
    "\nChoose an action:\n"
    "  1) Register participant\n"
    "  2) Auto match (registration order)\n"
    "  3) Auto match (best fit)\n"
    "  4) Manual match\n"
    "  5) Add activity\n"
    "  6) Mark activity completed\n"
    "  7) Show participants / pairs / activities\n"
    "  8) Export plain-text files\n"
    "  9) Import plain-text files\n"
    "  0) Quit\n"
)


def _ask(prompt: str) -> str:
    return input(prompt).strip()


def _print_diagnostics(state: ProgramState) -> None:
    diag = state.matching_diagnostics()
    print("=== MATCHING COVERAGE ===")
    if diag["messages"]:
        for msg in diag["messages"]:
            print("-", msg)
    else:
        print("- Every participant who can be matched is matched.")
    print("Suggestion:", diag["suggestion"])


def on_register(state: ProgramState) -> None:
    name = _ask("Name: ")
    student_id = _ask("Student id: ")
    major = _ask("Major: ")
    language = _ask("Language [Korean/English]: ")
    grade_text = _ask("Grade [1-4]: ")
    try:
        grade = int(grade_text)
    except ValueError:
        print(f"Grade must be a number, got {grade_text!r}.")
        return
    p = state.register(name, student_id, major, language, grade)
    role = "mentor" if p.is_mentor() else "mentee"
    print(f"[SAVE] Registered {p} as {role}.")


def on_auto_match(state: ProgramState, strategy: str) -> None:
    pairs = state.auto_match(strategy=strategy)
    print(f"[MATCH] {len(pairs)} new pair(s) created ({strategy}).")
    for pair in pairs:
        print(f"  {pair.key}: {pair}")
    _print_diagnostics(state)


def on_manual_match(state: ProgramState) -> None:
    mentor_id = _ask("Mentor student id: ") or None
    mentee_id = _ask("Mentee student id: ") or None
    pair = state.manual_match(mentor_id, mentee_id)
    print(f"[MATCH] {pair.key}: {pair}")


def on_add_activity(state: ProgramState) -> None:
    for key, pair in state.pairs.items():
        print(f"  {key} ({pair.mentor.name} - {pair.mentee.name})")
    pair_key = _ask("Pair key: ")
    content = _ask("Content: ")
    location = _ask("Location: ")
    activity = state.add_activity(pair_key, content, location)
    print(f"[SAVE] {pair_key}: {activity}")


def on_complete_activity(state: ProgramState) -> None:
    pair_key = _ask("Pair key: ")
    for i, act in enumerate(state.activities_for(pair_key)):
        print(f"  {i}) {act}")
    index_text = _ask("Activity number: ")
    try:
        index = int(index_text)
    except ValueError:
        print(f"Activity number must be a number, got {index_text!r}.")
        return
    activity = state.set_activity_completed(pair_key, index)
    print(f"[SAVE] {activity}")


def on_show(state: ProgramState) -> None:
    print("\n=== PARTICIPANTS ===")
    print(participants_frame(state.participants).to_string(index=False))
    print("\n=== PAIRS ===")
    print(pairs_frame(state.pairs).to_string(index=False))
    print("\n=== ACTIVITIES ===")
    print(format_activity_listing(state.pairs, state.activities) or "(none)")


def on_export(state: ProgramState) -> None:
    state.export_participants()
    state.export_matches()
    state.export_activities()
    print("[EXPORT] participants.txt, matches.txt, activities.txt written.")


def on_import(state: ProgramState) -> None:
    added, pairs, acts = state.import_all()
    print(
        f"[IMPORT] {len(added)} participant(s), {len(pairs)} pair(s), "
        f"{acts} activity record(s)."
    )


def main():
    path = sys.argv[1] if len(sys.argv) > 1 else DATA_FILE_DEFAULT

    try:
        state = ProgramState.open(JsonFileStore(path))
    except GlobalBridgeError as exc:
        print(f"Could not load {path}: {exc}")
        return

    print("========== GLOBAL BRIDGE ==========")
    print(f"- Data file    : {path}")
    print(f"- Participants : {len(state.participants)}")
    print(f"- Pairs        : {len(state.pairs)}")

    actions = {
        "1": on_register,
        "2": lambda s: on_auto_match(s, "greedy"),
        "3": lambda s: on_auto_match(s, "optimal"),
        "4": on_manual_match,
        "5": on_add_activity,
        "6": on_complete_activity,
        "7": on_show,
        "8": on_export,
        "9": on_import,
    }

    while True:
        print(MENU)
        choice = _ask("Your choice [0-9]: ")

        if choice == "0":
            print("Bye.")
            return

        action = actions.get(choice)
        if action is None:
            print("Invalid choice, please select 0–9.")
            continue

        # Nothing is half-applied on error; report and go back to the menu
        try:
            action(state)
        except GlobalBridgeError as exc:
            print(f"Error: {exc}")


if __name__ == "__main__":
    main()
