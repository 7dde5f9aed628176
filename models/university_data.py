"""UniversityData: Vollständiger Datensatz + Referenz-Check (Pydantic v2)."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from models.department import Department
from models.student import Student
from models.subject import Subject
from models.teacher import Teacher


class ReferenceReport(BaseModel):
    """Ergebnis des Referenz-Checks."""

    is_consistent: bool
    errors: list[str]      # Verweise ins Leere (unbekannte IDs)
    warnings: list[str]    # Auffälligkeiten (z.B. Fachbereich ohne Noten)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.is_consistent:
            status = "[bold green]✓ KONSISTENT[/bold green]"
        else:
            status = "[bold red]✗ INKONSISTENT[/bold red]"

        lines = [status]
        if self.errors:
            lines.append("\n[red bold]Fehler:[/red bold]")
            for e in self.errors:
                lines.append(f"  [red]• {e}[/red]")
        if self.warnings:
            lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        if not self.errors and not self.warnings:
            lines.append("[dim]Keine Probleme gefunden.[/dim]")

        console.print(Panel("\n".join(lines), title="Referenz-Check", border_style="cyan"))


class UniversityData(BaseModel):
    """Vollständiger Datensatz: Fächer, Lehrkräfte, Studierende, Fachbereiche."""

    subjects: list[Subject]
    teachers: list[Teacher]
    students: list[Student]
    departments: list[Department] = []
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        total_marks = sum(s.mark_count for s in self.students)
        without_marks = sum(1 for s in self.students if not s.subject_marks)
        lines = [
            f"Fächer: {len(self.subjects)}",
            f"Lehrkräfte: {len(self.teachers)}",
            f"Studierende: {len(self.students)} ({without_marks} ohne Noten)",
            f"Noten gesamt: {total_marks}",
            f"Ø Noten/Studierende: {total_marks / len(self.students):.1f}"
            if self.students else "",
            f"Fachbereiche: {len(self.departments)}",
        ]
        return "\n".join(l for l in lines if l)

    # ─── Referenz-Check ───

    def check_references(self) -> ReferenceReport:
        """Prüft, ob alle Verweise im Datensatz auflösbar sind.

        Der Analyzer selbst validiert nicht; dieser Check gehört zur
        Ladeschicht und wird vor einer Auswertung optional ausgeführt.

        Prüfungen:
        1. Jede Note verweist auf ein bekanntes Fach und eine bekannte Lehrkraft
        2. Unterrichtete Fächer und Fachbereichs-Fächer sind im Katalog
        3. Fachbereichsleitungen sind bekannte Lehrkräfte
        4. Fachbereiche haben Studierende mit Noten (sonst Warnung)
        """
        errors: list[str] = []
        warnings: list[str] = []

        subject_ids = {s.id for s in self.subjects}
        teacher_ids = {t.id for t in self.teachers}

        # ── 1. Noten ─────────────────────────────────────────────────────
        for student in self.students:
            for mark in student.subject_marks:
                if mark.subject_id not in subject_ids:
                    errors.append(
                        f"Studierende/r {student.id} ({student.surname}): "
                        f"Note für unbekanntes Fach {mark.subject_id}."
                    )
                if mark.teacher_id not in teacher_ids:
                    errors.append(
                        f"Studierende/r {student.id} ({student.surname}): "
                        f"Note von unbekannter Lehrkraft {mark.teacher_id}."
                    )

        # ── 2. Fächer-Verweise ───────────────────────────────────────────
        for teacher in self.teachers:
            unknown = sorted(teacher.taught_subject_ids - subject_ids)
            if unknown:
                errors.append(
                    f"Lehrkraft {teacher.id}: unterrichtet unbekannte Fächer {unknown}."
                )
            if not teacher.taught_subjects:
                warnings.append(f"Lehrkraft {teacher.id}: unterrichtet keine Fächer.")

        for dept in self.departments:
            unknown = sorted({s.id for s in dept.subjects} - subject_ids)
            if unknown:
                errors.append(
                    f"Fachbereich {dept.id}: unbekannte Fächer {unknown}."
                )
            # ── 3. Leitung ───────────────────────────────────────────────
            if dept.head.id not in teacher_ids:
                errors.append(
                    f"Fachbereich {dept.id}: Leitung {dept.head.id} ist keine bekannte Lehrkraft."
                )
            # ── 4. Noten im Fachbereich ──────────────────────────────────
            if not dept.students:
                warnings.append(f"Fachbereich {dept.id}: keine Studierenden.")
            elif not any(s.subject_marks for s in dept.students):
                warnings.append(
                    f"Fachbereich {dept.id}: keine Noten – Erfolgsvergleich nicht möglich."
                )

        without_marks = [s.id for s in self.students if not s.subject_marks]
        if without_marks:
            warnings.append(
                f"{len(without_marks)} Studierende ohne Noten "
                f"(Bestnoten-Abfrage nicht möglich): {without_marks[:10]}"
            )

        return ReferenceReport(
            is_consistent=len(errors) == 0,
            errors=errors,
            warnings=warnings,
        )

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den kompletten Datensatz als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "UniversityData":
        """Lädt einen Datensatz aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
