"""Datenmodelle für Studierende und Einzelnoten (Pydantic v2)."""

from datetime import date
from typing import Optional

from pydantic import BaseModel


class SubjectMark(BaseModel):
    """Eine einzelne Note: Fach, bewertende Lehrkraft, Notenwert."""

    subject_id: int
    teacher_id: int
    mark: float


class Student(BaseModel):
    """Repräsentiert eine/n Studierende/n.

    Das Alter wird nie gespeichert, sondern immer relativ zu einem
    Stichtag berechnet (`age_on`).
    """

    id: int
    surname: str
    first_name: str = ""
    birthday: date
    subject_marks: list[SubjectMark] = []   # Multimenge, Duplikate erlaubt

    @property
    def mark_count(self) -> int:
        return len(self.subject_marks)

    def age_on(self, today: date) -> int:
        """Anzahl voller Lebensjahre zum Stichtag `today`."""
        years = today.year - self.birthday.year
        if (today.month, today.day) < (self.birthday.month, self.birthday.day):
            years -= 1
        return years

    def average_mark(self) -> Optional[float]:
        """Notendurchschnitt oder None, wenn keine Noten vorliegen."""
        if not self.subject_marks:
            return None
        return sum(m.mark for m in self.subject_marks) / len(self.subject_marks)
