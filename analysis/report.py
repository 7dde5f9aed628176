"""Gesamtbericht über einen Datensatz.

Führt alle Abfragen des UniversityAnalyzer aus und fasst die
Ergebnisse zusammen. Jede Abfrage bekommt einen eigenen Iterator,
da die Abfragen ihre Eingabe nur einmal durchlaufen dürfen.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any, Callable, Optional

from pydantic import BaseModel

from analysis.errors import PreconditionViolation
from analysis.university_analyzer import UniversityAnalyzer
from config.schema import AnalyzerConfig
from models.student import Student
from models.subject import Subject
from models.teacher import Teacher
from models.university_data import UniversityData

logger = logging.getLogger(__name__)


# ─── Bericht-Modelle ──────────────────────────────────────────────────────────

class StudentSummary(BaseModel):
    """Kompakte Sicht auf eine/n Studierende/n für den Bericht."""

    id: int
    surname: str
    first_name: str
    age: int
    mark_count: int
    average_mark: Optional[float]

    @classmethod
    def of(cls, student: Student, today: date) -> "StudentSummary":
        avg = student.average_mark()
        return cls(
            id=student.id,
            surname=student.surname,
            first_name=student.first_name,
            age=student.age_on(today),
            mark_count=student.mark_count,
            average_mark=round(avg, 2) if avg is not None else None,
        )


class SubjectPerformance(BaseModel):
    """Ein Fach in der Leistungsrangfolge."""

    subject_id: int
    name: str
    rank: int


class AnalysisReport(BaseModel):
    """Vollständiger Auswertungsbericht für einen Datensatz."""

    evaluation_date: date
    subject_id: int
    teacher_id: int
    department_id: Optional[int]
    min_subject_mark: Optional[float]
    average_teacher_mark: Optional[float]
    min_student_age: Optional[int]
    top_student: Optional[StudentSummary]
    students_by_mark_count: list[StudentSummary]
    subject_ranking: list[SubjectPerformance]
    most_led_subject: Optional[Subject]
    graduates: list[StudentSummary]
    best_department_head: Optional[Teacher]
    head_subjects: list[Subject]
    errors: list[str]   # Verletzte Vorbedingungen einzelner Abfragen

    def print_rich(self) -> None:
        """Gibt den Bericht formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()

        def fmt(v, pattern=""):
            return "[dim]–[/dim]" if v is None else format(v, pattern)

        head = self.best_department_head
        console.print(Panel(
            f"Stichtag: [bold]{self.evaluation_date.isoformat()}[/bold]\n"
            f"Mindestnote Fach {self.subject_id}: [bold]{fmt(self.min_subject_mark)}[/bold] | "
            f"Ø Noten Lehrkraft {self.teacher_id}: "
            f"[bold]{fmt(self.average_teacher_mark, '.2f')}[/bold]\n"
            f"Jüngste/r Studierende/r: [bold]{fmt(self.min_student_age)}[/bold] Jahre\n"
            f"Bestnote: [bold]"
            f"{self.top_student.surname if self.top_student else '–'}[/bold] | "
            f"Häufigstes Fach: [bold]"
            f"{self.most_led_subject.name if self.most_led_subject else '–'}[/bold] | "
            f"Erfolgreichste Leitung: [bold]{head.name if head else '–'}[/bold]",
            title="Auswertung – Übersicht",
            border_style="cyan",
        ))

        s_table = Table(title="Studierende nach Anzahl Noten", box=box.ROUNDED)
        s_table.add_column("ID", justify="right", width=6)
        s_table.add_column("Nachname", width=20)
        s_table.add_column("Alter", justify="right", width=6)
        s_table.add_column("Noten", justify="right", width=6)
        s_table.add_column("Ø", justify="right", width=6)
        s_table.add_column("Exzellent", width=10)
        graduate_ids = {g.id for g in self.graduates}
        for m in self.students_by_mark_count:
            s_table.add_row(
                str(m.id), m.surname, str(m.age), str(m.mark_count),
                fmt(m.average_mark, ".2f"),
                "[green]✓[/green]" if m.id in graduate_ids else "",
            )
        console.print(s_table)

        f_table = Table(title="Fächer nach Leistung (schwächstes zuerst)", box=box.ROUNDED)
        f_table.add_column("Rang", justify="right", width=5)
        f_table.add_column("ID", justify="right", width=5)
        f_table.add_column("Fach", width=30)
        for p in self.subject_ranking:
            f_table.add_row(str(p.rank), str(p.subject_id), p.name)
        console.print(f_table)

        if self.head_subjects:
            names = ", ".join(s.name for s in self.head_subjects)
            console.print(f"Fächer der Leitung (Fachbereich {self.department_id}): {names}")

        if self.errors:
            lines = [f"  [red]• {e}[/red]" for e in self.errors]
            console.print(Panel("\n".join(lines), title="Verletzte Vorbedingungen",
                                border_style="red"))


# ─── Builder ──────────────────────────────────────────────────────────────────

class AnalysisReportBuilder:
    """Berechnet einen AnalysisReport; unabhängige Abfragen optional parallel."""

    def __init__(self, config: AnalyzerConfig):
        self.config = config
        self.analyzer = UniversityAnalyzer.from_config(config)

    def build(self, data: UniversityData, today: Optional[date] = None) -> AnalysisReport:
        """Hauptmethode: führt alle Abfragen aus und gibt einen Report zurück."""
        ref = self.analyzer.evaluation_date(today)
        rc = self.config.report
        department = self._select_department(data)
        a = self.analyzer

        tasks: dict[str, Callable[[], Any]] = {
            "min_subject_mark": lambda: a.min_subject_mark(iter(data.students), rc.subject_id),
            "average_teacher_mark": lambda: a.average_teacher_mark(iter(data.students), rc.teacher_id),
            "min_student_age": lambda: a.min_student_age_in_years(iter(data.students), today=ref),
            "top_student": lambda: a.student_with_highest_average_mark(iter(data.students)),
            "students_by_mark_count": lambda: a.sort_students_by_mark_count(iter(data.students)),
            "subject_ranking": lambda: a.subjects_by_academic_performance(iter(data.students)),
            "most_led_subject": lambda: a.subject_most_teachers_lead(iter(data.teachers)),
            "graduates": lambda: a.graduated_excellent_students(iter(data.students), today=ref),
            "best_department_head": lambda: a.head_of_most_successful_department(iter(data.departments)),
            "head_subjects": lambda: (
                a.subjects_head_teaches_in_department(department) if department else []
            ),
        }
        results, errors = self._run(tasks)

        names = {s.id: s.name for s in data.subjects}
        ranking = [
            SubjectPerformance(subject_id=sid, name=names.get(sid, f"Fach {sid}"), rank=i)
            for i, sid in enumerate(results.get("subject_ranking") or [], start=1)
        ]
        top = results.get("top_student")

        report = AnalysisReport(
            evaluation_date=ref,
            subject_id=rc.subject_id,
            teacher_id=rc.teacher_id,
            department_id=department.id if department else None,
            min_subject_mark=results["min_subject_mark"].value_or(None),
            average_teacher_mark=results["average_teacher_mark"].value_or(None),
            min_student_age=results.get("min_student_age"),
            top_student=StudentSummary.of(top, ref) if top else None,
            students_by_mark_count=[
                StudentSummary.of(s, ref) for s in results["students_by_mark_count"]
            ],
            subject_ranking=ranking,
            most_led_subject=results.get("most_led_subject"),
            graduates=[StudentSummary.of(s, ref) for s in results["graduates"]],
            best_department_head=results.get("best_department_head"),
            head_subjects=results["head_subjects"],
            errors=errors,
        )
        logger.info(
            f"Bericht erstellt: {len(data.students)} Studierende, "
            f"{len(errors)} verletzte Vorbedingungen"
        )
        return report

    # ── Ausführung ────────────────────────────────────────────────────────────

    def _run(self, tasks: dict[str, Callable[[], Any]]) -> tuple[dict[str, Any], list[str]]:
        """Führt die Abfragen aus; Reihenfolge der Fehlerliste folgt `tasks`."""
        workers = self.config.report.max_workers
        results: dict[str, Any] = {}
        errors: list[str] = []

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = {name: pool.submit(fn) for name, fn in tasks.items()}
                outcomes = {name: _outcome(f.result) for name, f in futures.items()}
        else:
            outcomes = {name: _outcome(fn) for name, fn in tasks.items()}

        for name in tasks:
            value, error = outcomes[name]
            if error is not None:
                logger.warning(f"Abfrage '{name}' übersprungen: {error}")
                errors.append(str(error))
            else:
                results[name] = value
        return results, errors

    def _select_department(self, data: UniversityData):
        dept_id = self.config.report.department_id
        if dept_id is None:
            return data.departments[0] if data.departments else None
        return next((d for d in data.departments if d.id == dept_id), None)


def _outcome(fn: Callable[[], Any]) -> tuple[Any, Optional[PreconditionViolation]]:
    try:
        return fn(), None
    except PreconditionViolation as e:
        return None, e
