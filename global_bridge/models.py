# global_bridge/models.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .config import (
    MIN_GRADE,
    MAX_GRADE,
    TIMESTAMP_FORMAT,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
)
from .errors import ValidationError, RoleConstraintError


class Language(Enum):
    KOREAN = "Korean"
    ENGLISH = "English"

    @classmethod
    def parse(cls, text) -> "Language":
        """Case-insensitive lookup; anything but Korean/English is rejected."""
        if isinstance(text, Language):
            return text
        if isinstance(text, str):
            wanted = text.strip().lower()
            for lang in cls:
                if lang.value.lower() == wanted:
                    return lang
        raise ValidationError(
            f"Language must be one of {[l.value for l in cls]}, got {text!r}."
        )


def pair_key(mentor_id: str, mentee_id: str) -> str:
    return f"{mentor_id}-{mentee_id}"


@dataclass(frozen=True)
class Participant:
    name: str
    student_id: str
    major: str
    language: Language
    grade: int

    @classmethod
    def create(
        cls,
        name: str,
        student_id: str,
        major: str,
        language,
        grade,
    ) -> "Participant":
        """
        Build a participant from raw form input.

        Text fields are stripped and the language is parsed once here, so
        that role checks later are a plain enum comparison.
        """
        p = cls(
            name=(name or "").strip(),
            student_id=(student_id or "").strip(),
            major=(major or "").strip(),
            language=Language.parse(language),
            grade=grade,
        )
        p.validate()
        return p

    def validate(self) -> None:
        missing = [
            label
            for label, value in (
                ("name", self.name),
                ("student id", self.student_id),
                ("major", self.major),
            )
            if not isinstance(value, str) or not value.strip()
        ]
        if missing:
            raise ValidationError(f"Missing required field(s): {', '.join(missing)}.")

        if not (self.student_id.isascii() and self.student_id.isdigit()):
            raise ValidationError(
                f"Student id must contain digits only, got {self.student_id!r}."
            )

        if not isinstance(self.language, Language):
            raise ValidationError(
                f"Language must be a Language value, got {self.language!r}."
            )

        # bool is an int subclass; a checkbox value is not a grade
        if (
            isinstance(self.grade, bool)
            or not isinstance(self.grade, int)
            or not (MIN_GRADE <= self.grade <= MAX_GRADE)
        ):
            raise ValidationError(
                f"Grade must be an integer in [{MIN_GRADE}, {MAX_GRADE}], "
                f"got {self.grade!r}."
            )

    def is_mentor(self) -> bool:
        return self.language is Language.KOREAN

    def __str__(self) -> str:
        return f"{self.name} ({self.student_id}) - {self.language.value} - {self.major}"


@dataclass(frozen=True)
class Pair:
    mentor: Participant
    mentee: Participant

    def __post_init__(self):
        if not self.mentor.is_mentor():
            raise RoleConstraintError(
                f"Mentor {self.mentor.name} ({self.mentor.student_id}) must be a "
                f"Korean speaker, got {self.mentor.language.value}."
            )
        if self.mentee.is_mentor():
            raise RoleConstraintError(
                f"Mentee {self.mentee.name} ({self.mentee.student_id}) must be an "
                f"English speaker, got {self.mentee.language.value}."
            )

    @property
    def key(self) -> str:
        return pair_key(self.mentor.student_id, self.mentee.student_id)

    def involves(self, student_id: str) -> bool:
        return student_id in (self.mentor.student_id, self.mentee.student_id)

    def __str__(self) -> str:
        return f"Mentor: {self.mentor.name} (Korean) - Mentee: {self.mentee.name} (English)"


@dataclass
class Activity:
    timestamp: datetime
    content: str
    location: str
    completed: bool = False  # the only field that changes after creation

    @classmethod
    def create(
        cls,
        content: str,
        location: str,
        timestamp: Optional[datetime] = None,
    ) -> "Activity":
        content = (content or "").strip()
        location = (location or "").strip()
        if not content or not location:
            raise ValidationError("Both activity content and location are required.")
        if timestamp is None:
            timestamp = datetime.now().replace(second=0, microsecond=0)
        return cls(timestamp=timestamp, content=content, location=location)

    @property
    def status(self) -> str:
        return STATUS_COMPLETED if self.completed else STATUS_IN_PROGRESS

    def __str__(self) -> str:
        return (
            f"{self.timestamp.strftime(TIMESTAMP_FORMAT)} | "
            f"{self.content} @ {self.location} [{self.status}]"
        )
