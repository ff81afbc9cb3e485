# global_bridge/ledger.py
from __future__ import annotations

from dataclasses import replace
from typing import Container, Dict, List, Mapping, Optional

from .models import Activity, Pair
from .errors import UnknownPairError, SelectionError


class ActivityLedger:
    """
    pair key -> activities, in insertion order per pair.

    The ledger never checks pairs on its own; callers hand in the set of
    known pair keys so that the pair mapping stays owned by ProgramState.

    Activities are copied on the way in and on the way out, so the only
    way to change a stored `completed` flag is set_completed().
    """

    def __init__(self, entries: Optional[Mapping[str, List[Activity]]] = None):
        self._entries: Dict[str, List[Activity]] = {
            key: [replace(a) for a in acts] for key, acts in (entries or {}).items()
        }

    def add(self, pair_key: str, activity: Activity, known_pairs: Container[str]) -> Activity:
        if pair_key not in known_pairs:
            raise UnknownPairError(f"No matched pair with key {pair_key!r}.")
        self._entries.setdefault(pair_key, []).append(replace(activity))
        return replace(activity)

    def activities_for(self, pair_key: str) -> List[Activity]:
        return [replace(a) for a in self._entries.get(pair_key, [])]

    def set_completed(self, pair_key: str, index: int, completed: bool = True) -> Activity:
        if pair_key not in self._entries:
            raise UnknownPairError(f"No activities recorded for pair {pair_key!r}.")
        acts = self._entries[pair_key]
        if not (0 <= index < len(acts)):
            raise SelectionError(
                f"Activity #{index} does not exist for pair {pair_key} "
                f"({len(acts)} recorded)."
            )
        acts[index].completed = completed
        return replace(acts[index])

    def drop(self, pair_key: str) -> List[Activity]:
        return [replace(a) for a in self._entries.pop(pair_key, [])]

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def as_dict(self) -> Dict[str, List[Activity]]:
        return {key: [replace(a) for a in acts] for key, acts in self._entries.items()}

    def __len__(self) -> int:
        return sum(len(acts) for acts in self._entries.values())


def format_activity_listing(
    pairs: Mapping[str, Pair],
    activities: Mapping[str, List[Activity]],
) -> str:
    """
    Grouped, human-readable listing:

        [ Kim - Lee ]
        - 2024-12-09 14:30 | Coffee chat @ Library [in-progress]
        <blank line>
    """
    lines: List[str] = []
    for key, acts in activities.items():
        pair = pairs[key]
        lines.append(f"[ {pair.mentor.name} - {pair.mentee.name} ]")
        for act in acts:
            lines.append(f"- {act}")
        lines.append("")
    return "\n".join(lines) + ("\n" if lines else "")
