"""Abfragen über Studierende, Lehrkräfte und Fachbereiche.

Jede Abfrage ist eine reine Funktion ihrer Eingabe: die übergebene
Sequenz wird genau einmal durchlaufen und nie verändert. Bei
Gleichstand gewinnt immer das zuerst gesehene Element, damit das
Ergebnis für eine feste Eingabereihenfolge reproduzierbar bleibt.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import date
from typing import Optional, TypeVar

from analysis.errors import PreconditionViolation
from analysis.result import ABSENT, Maybe, Present
from config.schema import HeadSubjectRule
from models.department import Department
from models.student import Student, SubjectMark
from models.subject import Subject
from models.teacher import Teacher

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def _flatten_marks(students: Iterable[Student]) -> Iterable[SubjectMark]:
    for student in students:
        yield from student.subject_marks


def _first_max(items: Iterable[T], key: Callable[[T], float]) -> Optional[T]:
    """Maximum nach `key`; bei Gleichstand das zuerst gesehene Element."""
    best = None
    best_key = None
    for item in items:
        k = key(item)
        if best_key is None or k > best_key:
            best, best_key = item, k
    return best


def _required_average(student: Student, operation: str) -> float:
    avg = student.average_mark()
    if avg is None:
        raise PreconditionViolation(
            operation, f"Studierende/r {student.id} ({student.surname}) hat keine Noten"
        )
    return avg


# ─── Analyzer ─────────────────────────────────────────────────────────────────

class UniversityAnalyzer:
    """Zustandslose Sammlung der Auswertungs-Abfragen.

    `today` ist der Stichtag für alle altersabhängigen Abfragen; None
    bedeutet, dass das Datum erst beim Aufruf gelesen wird. Einzelne
    Aufrufe können den Stichtag per `today=` überschreiben.
    """

    def __init__(
        self,
        today: Optional[date] = None,
        graduate_age: int = 21,
        excellent_mark: float = 8.0,
        head_subject_rule: HeadSubjectRule = HeadSubjectRule.SUBJECT_ID,
    ):
        self.today = today
        self.graduate_age = graduate_age
        self.excellent_mark = excellent_mark
        self.head_subject_rule = HeadSubjectRule(head_subject_rule)

    @classmethod
    def from_config(cls, config) -> "UniversityAnalyzer":
        """Erzeugt einen Analyzer aus einer `AnalyzerConfig`."""
        return cls(
            today=config.evaluation_date,
            graduate_age=config.graduate_age,
            excellent_mark=config.excellent_mark,
            head_subject_rule=config.head_subject_rule,
        )

    def evaluation_date(self, today: Optional[date] = None) -> date:
        """Stichtag: Aufruf-Parameter > Analyzer-Stichtag > heute."""
        return today or self.today or date.today()

    # ── Noten ─────────────────────────────────────────────────────────────────

    def min_subject_mark(
        self, students: Iterable[Student], subject_id: int
    ) -> Maybe:
        """Kleinste Note im Fach `subject_id` über alle Studierenden."""
        lowest = None
        for mark in _flatten_marks(students):
            if mark.subject_id == subject_id and (lowest is None or mark.mark < lowest):
                lowest = mark.mark
        if lowest is None:
            logger.debug(f"min_subject_mark: keine Noten für Fach {subject_id}")
            return ABSENT
        logger.debug(f"min_subject_mark: Fach {subject_id} → {lowest}")
        return Present(value=lowest)

    def average_teacher_mark(
        self, students: Iterable[Student], teacher_id: int
    ) -> Maybe:
        """Durchschnitt aller von Lehrkraft `teacher_id` vergebenen Noten."""
        total = 0.0
        count = 0
        for mark in _flatten_marks(students):
            if mark.teacher_id == teacher_id:
                total += mark.mark
                count += 1
        if count == 0:
            logger.debug(f"average_teacher_mark: keine Noten von Lehrkraft {teacher_id}")
            return ABSENT
        logger.debug(f"average_teacher_mark: Lehrkraft {teacher_id}, {count} Noten")
        return Present(value=total / count)

    # ── Studierende ───────────────────────────────────────────────────────────

    def min_student_age_in_years(
        self, students: Iterable[Student], today: Optional[date] = None
    ) -> int:
        """Alter (volle Jahre) der jüngsten Person. Eingabe darf nicht leer sein."""
        ref = self.evaluation_date(today)
        youngest = None
        for student in students:
            age = student.age_on(ref)
            if youngest is None or age < youngest:
                youngest = age
        if youngest is None:
            raise PreconditionViolation("min_student_age_in_years", "keine Studierenden übergeben")
        logger.debug(f"min_student_age_in_years: {youngest} Jahre (Stichtag {ref})")
        return youngest

    def student_with_highest_average_mark(self, students: Iterable[Student]) -> Student:
        """Person mit dem höchsten Notendurchschnitt.

        Jede übergebene Person braucht mindestens eine Note.
        """
        op = "student_with_highest_average_mark"
        best = _first_max(students, key=lambda s: _required_average(s, op))
        if best is None:
            raise PreconditionViolation(op, "keine Studierenden übergeben")
        logger.debug(f"student_with_highest_average_mark: Studierende/r {best.id}")
        return best

    def sort_students_by_mark_count(self, students: Iterable[Student]) -> list[Student]:
        """Absteigend nach Anzahl Noten, bei Gleichstand aufsteigend nach Nachname."""
        return sorted(students, key=lambda s: (-s.mark_count, s.surname))

    def graduated_excellent_students(
        self, students: Iterable[Student], today: Optional[date] = None
    ) -> list[Student]:
        """Absolvent/innen mit exzellentem Notendurchschnitt, sortiert nach Nachname.

        Personen ohne Noten haben keinen Durchschnitt und fallen heraus.
        """
        ref = self.evaluation_date(today)
        selected = []
        for student in students:
            if student.age_on(ref) < self.graduate_age:
                continue
            avg = student.average_mark()
            if avg is not None and avg >= self.excellent_mark:
                selected.append(student)
        logger.debug(f"graduated_excellent_students: {len(selected)} Treffer (Stichtag {ref})")
        return sorted(selected, key=lambda s: s.surname)

    # ── Fächer ────────────────────────────────────────────────────────────────

    def subjects_by_academic_performance(self, students: Iterable[Student]) -> list[int]:
        """Fach-IDs aufsteigend nach Notendurchschnitt (schwächstes Fach zuerst).

        Gleicher Durchschnitt: aufsteigend nach Fach-ID.
        """
        sums: dict[int, float] = {}
        counts: dict[int, int] = {}
        for mark in _flatten_marks(students):
            sums[mark.subject_id] = sums.get(mark.subject_id, 0.0) + mark.mark
            counts[mark.subject_id] = counts.get(mark.subject_id, 0) + 1
        logger.debug(f"subjects_by_academic_performance: {len(sums)} Fächer")
        return sorted(sums, key=lambda sid: (sums[sid] / counts[sid], sid))

    def subject_most_teachers_lead(self, teachers: Iterable[Teacher]) -> Subject:
        """Fach, das die meisten Lehrkräfte unterrichten.

        Gezählt wird pro Fach-ID; zurückgegeben wird der zuerst gesehene
        Datensatz dieser ID.
        """
        counts: dict[int, int] = {}
        first_seen: dict[int, Subject] = {}
        for teacher in teachers:
            for subject in teacher.taught_subjects:
                counts[subject.id] = counts.get(subject.id, 0) + 1
                first_seen.setdefault(subject.id, subject)
        best_id = _first_max(counts, key=counts.__getitem__)
        if best_id is None:
            raise PreconditionViolation(
                "subject_most_teachers_lead", "keine Lehrkräfte mit Fächern übergeben"
            )
        logger.debug(f"subject_most_teachers_lead: Fach {best_id} ({counts[best_id]} Lehrkräfte)")
        return first_seen[best_id]

    # ── Fachbereiche ──────────────────────────────────────────────────────────

    def head_of_most_successful_department(
        self, departments: Iterable[Department]
    ) -> Teacher:
        """Leitung des Fachbereichs mit dem höchsten Notendurchschnitt."""
        op = "head_of_most_successful_department"

        def department_average(dept: Department) -> float:
            total = 0.0
            count = 0
            for mark in _flatten_marks(dept.students):
                total += mark.mark
                count += 1
            if count == 0:
                raise PreconditionViolation(op, f"Fachbereich {dept.id} hat keine Noten")
            return total / count

        best = _first_max(departments, key=department_average)
        if best is None:
            raise PreconditionViolation(op, "keine Fachbereiche übergeben")
        logger.debug(f"head_of_most_successful_department: Fachbereich {best.id}")
        return best.head

    def subjects_head_teaches_in_department(self, department: Department) -> list[Subject]:
        """Fächer des Fachbereichs, die laut `head_subject_rule` zur Leitung gehören.

        Reihenfolge wie in `department.subjects`.
        """
        head = department.head
        if self.head_subject_rule is HeadSubjectRule.TAUGHT_BY_HEAD:
            taught = head.taught_subject_ids
            return [s for s in department.subjects if s.id in taught]
        # ACHTUNG: historische Regel vergleicht Fach-ID mit Lehrkraft-ID.
        # Zwei verschiedene ID-Räume; Treffer sind meist zufällig.
        return [s for s in department.subjects if s.id == head.id]
