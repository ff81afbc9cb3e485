# global_bridge/roster.py
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from .models import Participant
from .errors import ValidationError


class Roster:
    """
    Registration-ordered set of participants, keyed by student id.

    Role is never stored: mentors()/mentees() split the roster on
    Participant.is_mentor(), so each participant appears in exactly one view.
    """

    def __init__(self, participants: Optional[Iterable[Participant]] = None):
        self._order: List[Participant] = []
        self._by_id: Dict[str, Participant] = {}
        for p in participants or ():
            self.register(p)

    def register(self, participant: Participant) -> Participant:
        participant.validate()
        if participant.student_id in self._by_id:
            existing = self._by_id[participant.student_id]
            raise ValidationError(
                f"Student id {participant.student_id} is already registered "
                f"to {existing.name}."
            )
        self._order.append(participant)
        self._by_id[participant.student_id] = participant
        return participant

    def get(self, student_id: str) -> Optional[Participant]:
        return self._by_id.get(student_id)

    def mentors(self) -> List[Participant]:
        return [p for p in self._order if p.is_mentor()]

    def mentees(self) -> List[Participant]:
        return [p for p in self._order if not p.is_mentor()]

    def participants(self) -> List[Participant]:
        return list(self._order)

    def __contains__(self, student_id) -> bool:
        return student_id in self._by_id

    def __iter__(self) -> Iterator[Participant]:
        return iter(list(self._order))

    def __len__(self) -> int:
        return len(self._order)
