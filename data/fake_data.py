"""Testdaten-Generator für die Hochschul-Auswertung.

Erzeugt reproduzierbare Fake-Daten (fester Seed) mit bewusst
eingebauten Sonderfällen:

  1. Altersgrenze: einige Studierende werden genau am Stichtag 21
  2. Mehrfachnoten: dieselbe Person kann im selben Fach mehrfach benotet sein
  3. Mehrfachleitung: bei mehr Fachbereichen als Lehrkräften leitet
     eine Lehrkraft mehrere Fachbereiche
"""

import random
from datetime import date, timedelta
from typing import Optional

from config.defaults import DEPARTMENT_SUBJECTS, MARK_MAX, MARK_MIN, SUBJECT_CATALOG
from models.department import Department
from models.student import Student, SubjectMark
from models.subject import Subject
from models.teacher import Teacher
from models.university_data import UniversityData

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Anna", "Ben", "Clara", "David", "Elif", "Felix", "Greta", "Hannes",
    "Ida", "Jonas", "Kim", "Lukas", "Mia", "Noah", "Olga", "Paul",
    "Quirin", "Rosa", "Simon", "Tara", "Umut", "Vera", "Wim", "Yara",
]

_LAST_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer",
    "Wagner", "Becker", "Schulz", "Hoffmann", "Schäfer", "Koch",
    "Bauer", "Richter", "Klein", "Wolf", "Schröder", "Neumann",
    "Schwarz", "Zimmermann", "Braun", "Krüger", "Hofmann", "Hartmann",
    "Lange", "Schmitt", "Werner", "Krause", "Lehmann", "Kaiser",
]


class FakeDataGenerator:
    """Generiert einen vollständigen UniversityData-Datensatz."""

    def __init__(
        self,
        seed: Optional[int] = None,
        num_students: int = 40,
        num_teachers: int = 10,
        max_marks_per_student: int = 8,
        today: Optional[date] = None,
    ) -> None:
        if num_teachers < 1:
            raise ValueError(f"num_teachers muss mindestens 1 sein, nicht {num_teachers}")
        if max_marks_per_student < 1:
            raise ValueError(
                f"max_marks_per_student muss mindestens 1 sein, nicht {max_marks_per_student}"
            )
        self.rng = random.Random(seed)
        self.num_students = num_students
        self.num_teachers = num_teachers
        self.max_marks_per_student = max_marks_per_student
        self.today = today or date.today()

    # ─── Fächer ───────────────────────────────────────────────────────────────

    def _generate_subjects(self) -> list[Subject]:
        """Erzeugt alle Fächer aus dem SUBJECT_CATALOG."""
        return [Subject(id=sid, name=name) for sid, name in SUBJECT_CATALOG.items()]

    # ─── Lehrkräfte ───────────────────────────────────────────────────────────

    def _generate_teachers(self, subjects: list[Subject]) -> list[Teacher]:
        """Jede Lehrkraft unterrichtet 1–3 Fächer eines Fachbereichs.

        Die ersten Lehrkräfte werden reihum den Fachbereichen zugeordnet,
        damit jeder Fachbereich mindestens eine Lehrkraft hat.
        """
        by_id = {s.id: s for s in subjects}
        dept_names = list(DEPARTMENT_SUBJECTS)
        teachers = []
        for i in range(self.num_teachers):
            dept = dept_names[i % len(dept_names)] if i < len(dept_names) \
                else self.rng.choice(dept_names)
            pool = DEPARTMENT_SUBJECTS[dept]
            k = self.rng.randint(1, min(3, len(pool)))
            taught = [by_id[sid] for sid in sorted(self.rng.sample(pool, k))]
            name = f"{self.rng.choice(_LAST_NAMES)}, {self.rng.choice(_FIRST_NAMES)}"
            teachers.append(Teacher(id=i + 1, name=name, taught_subjects=taught))
        return teachers

    # ─── Studierende ──────────────────────────────────────────────────────────

    def _birthday_for_age(self, age: int) -> date:
        """Geburtstag, der am Stichtag genau `age` volle Jahre ergibt."""
        latest = _shift_years(self.today, -age)
        return latest - timedelta(days=self.rng.randint(0, 364))

    def _generate_marks(self, subject_ids: list[int],
                        teachers_by_subject: dict[int, list[Teacher]]) -> list[SubjectMark]:
        marks = []
        for _ in range(self.rng.randint(1, self.max_marks_per_student)):
            sid = self.rng.choice(subject_ids)
            teacher = self.rng.choice(teachers_by_subject[sid])
            marks.append(SubjectMark(
                subject_id=sid,
                teacher_id=teacher.id,
                mark=self.rng.randint(MARK_MIN, MARK_MAX),
            ))
        return marks

    # ─── Hauptmethode ─────────────────────────────────────────────────────────

    def generate(self) -> UniversityData:
        """Erzeugt den kompletten Datensatz."""
        subjects = self._generate_subjects()
        teachers = self._generate_teachers(subjects)
        by_id = {s.id: s for s in subjects}

        teachers_by_subject: dict[int, list[Teacher]] = {}
        for t in teachers:
            for s in t.taught_subjects:
                teachers_by_subject.setdefault(s.id, []).append(t)

        departments: list[Department] = []
        dept_students: dict[int, list[Student]] = {}
        for dept_id, (dept_name, sids) in enumerate(DEPARTMENT_SUBJECTS.items(), start=1):
            taught = [sid for sid in sids if sid in teachers_by_subject]
            if not taught:
                continue
            head = teachers_by_subject[taught[0]][0]
            departments.append(Department(
                id=dept_id, name=dept_name, head=head,
                subjects=[by_id[sid] for sid in sids],
            ))
            dept_students[dept_id] = []

        students = []
        for i in range(self.num_students):
            dept = departments[i % len(departments)]
            taught = [s.id for s in dept.subjects if s.id in teachers_by_subject]
            # Jede fünfte Person liegt genau auf der Altersgrenze
            age = 21 if i % 5 == 0 else self.rng.randint(18, 30)
            student = Student(
                id=i + 1,
                surname=self.rng.choice(_LAST_NAMES),
                first_name=self.rng.choice(_FIRST_NAMES),
                birthday=self._birthday_for_age(age),
                subject_marks=self._generate_marks(taught, teachers_by_subject),
            )
            students.append(student)
            dept_students[dept.id].append(student)

        departments = [
            d.model_copy(update={"students": dept_students[d.id]}) for d in departments
        ]
        return UniversityData(
            subjects=subjects,
            teachers=teachers,
            students=students,
            departments=departments,
        )

    def print_summary(self, data: UniversityData) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Testdaten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        total_marks = sum(s.mark_count for s in data.students)
        table.add_row("Fächer", str(len(data.subjects)), "")
        table.add_row("Lehrkräfte", str(len(data.teachers)), "")
        table.add_row("Studierende", str(len(data.students)), f"{total_marks} Noten")
        table.add_row("Fachbereiche", str(len(data.departments)),
                      ", ".join(d.name for d in data.departments))

        console.print(table)


def _shift_years(d: date, years: int) -> date:
    """Verschiebt ein Datum um ganze Jahre; 29.02. wird zum 28.02."""
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        return d.replace(year=d.year + years, day=28)
