"""Hochschul-Auswertung — Haupt-CLI.

Verwendung:
  python main.py config init              Default-Konfiguration anlegen
  python main.py config show              Konfiguration anzeigen
  python main.py generate                 Fake-Daten erzeugen
  python main.py generate --export-json   Fake-Daten + JSON speichern
  python main.py check                    Referenz-Check des Datensatzes
  python main.py analyze                  Gesamtbericht ausgeben
  python main.py query <abfrage>          Einzelne Abfrage ausführen
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

# Standard-Pfad für gespeicherte UniversityData
DEFAULT_DATA_JSON = Path("output/university_data.json")


def _load_config():
    """Lädt die Konfiguration; ohne Datei gilt die Default-Config."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        return mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red bold]Konfiguration ungültig:[/red bold]\n{e}")
        sys.exit(1)


def _config_log_level() -> str:
    """Log-Level aus der Config; eine ungültige Datei darf `config init --force` nicht blockieren."""
    from config.manager import ConfigManager
    try:
        return ConfigManager().load_or_default().log_level
    except ValueError:
        return "WARNING"


def _load_data_or_abort(json_path: str):
    """Lädt den Datensatz oder bricht mit Fehlermeldung ab."""
    from models.university_data import UniversityData

    p = Path(json_path)
    if not p.exists():
        console.print(
            f"[red]Keine Datendatei gefunden: {p}[/red]\n"
            "Verwenden Sie [bold]python main.py generate --export-json[/bold]."
        )
        sys.exit(1)
    try:
        return UniversityData.load_json(p)
    except ValueError as e:
        console.print(f"[red bold]Datensatz ungültig:[/red bold]\n{e}")
        sys.exit(1)


def _make_analyzer(today=None, rule=None):
    from analysis.university_analyzer import UniversityAnalyzer
    config = _load_config()
    update = {}
    if today is not None:
        update["evaluation_date"] = today.date()
    if rule is not None:
        update["head_subject_rule"] = rule
    return UniversityAnalyzer.from_config(config.model_copy(update=update))


def _print_students(title: str, students, analyzer) -> None:
    ref = analyzer.evaluation_date()
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("ID", justify="right")
    table.add_column("Nachname")
    table.add_column("Vorname")
    table.add_column("Alter", justify="right")
    table.add_column("Noten", justify="right")
    table.add_column("Ø", justify="right")
    for s in students:
        avg = s.average_mark()
        table.add_row(
            str(s.id), s.surname, s.first_name, str(s.age_on(ref)),
            str(s.mark_count), f"{avg:.2f}" if avg is not None else "–",
        )
    console.print(table)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder anlegen."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    if mgr.first_run_check():
        console.print(
            "[yellow]Keine Konfiguration gefunden – es gelten die Defaults.[/yellow]\n"
            "Anlegen mit [bold]python main.py config init[/bold]."
        )
    config = _load_config()

    table = Table(title="Konfiguration", box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    table.add_row("Absolvent/in ab (Jahre)", str(config.graduate_age))
    table.add_row("Exzellent ab (Ø)", f"{config.excellent_mark:.1f}")
    table.add_row("Regel Fächer der Leitung", config.head_subject_rule.value)
    table.add_row(
        "Stichtag",
        config.evaluation_date.isoformat() if config.evaluation_date else "heute",
    )
    table.add_row("Bericht: Fach-ID", str(config.report.subject_id))
    table.add_row("Bericht: Lehrkraft-ID", str(config.report.teacher_id))
    table.add_row("Bericht: Threads", str(config.report.max_workers))
    table.add_row("Log-Level", config.log_level)
    console.print(table)


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False,
              help="Bestehende Konfiguration überschreiben.")
def config_init(force: bool):
    """Legt die Default-Konfiguration als YAML an."""
    from config.defaults import default_analyzer_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check() and not force:
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Mit [bold]--force[/bold] überschreiben."
        )
        return
    mgr.save(default_analyzer_config())


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--students", "num_students", default=40, type=click.IntRange(min=0),
              help="Anzahl Studierende.")
@click.option("--teachers", "num_teachers", default=10, type=click.IntRange(min=1),
              help="Anzahl Lehrkräfte.")
@click.option("--export-json", is_flag=True, default=False,
              help="Datensatz als JSON speichern.")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad für JSON-Export.")
def cmd_generate(seed: int, num_students: int, num_teachers: int,
                 export_json: bool, json_path: str):
    """Erzeugt Testdaten (Fächer, Lehrkräfte, Studierende, Fachbereiche)."""
    from data.fake_data import FakeDataGenerator

    config = _load_config()
    console.print("[bold]Testdaten werden generiert...[/bold]")
    gen = FakeDataGenerator(seed=seed, num_students=num_students,
                            num_teachers=num_teachers, today=config.evaluation_date)
    data = gen.generate()
    gen.print_summary(data)
    console.print(f"\n[dim]{data.summary()}[/dim]")

    if export_json:
        out_path = Path(json_path)
        data.save_json(out_path)
        console.print(f"[green]✓[/green] JSON gespeichert: {out_path}")


# ─── CHECK ────────────────────────────────────────────────────────────────────

@click.command("check")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei.")
def cmd_check(json_path: str):
    """Prüft, ob alle Verweise im Datensatz auflösbar sind."""
    data = _load_data_or_abort(json_path)
    console.print(f"\n{data.summary()}\n")
    report = data.check_references()
    report.print_rich()
    sys.exit(0 if report.is_consistent else 1)


# ─── ANALYZE ──────────────────────────────────────────────────────────────────

@click.command("analyze")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei.")
@click.option("--today", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Stichtag für Altersberechnung (JJJJ-MM-TT).")
@click.option("--workers", type=int, default=None,
              help="Threads für parallele Auswertung (überschreibt Config).")
def cmd_analyze(json_path: str, today, workers):
    """Führt alle Abfragen aus und gibt den Gesamtbericht aus."""
    from analysis.report import AnalysisReportBuilder

    config = _load_config()
    if workers is not None:
        config = config.model_copy(update={
            "report": config.report.model_copy(update={"max_workers": workers}),
        })
    data = _load_data_or_abort(json_path)

    builder = AnalysisReportBuilder(config)
    report = builder.build(data, today=today.date() if today else None)
    report.print_rich()


# ─── QUERY ────────────────────────────────────────────────────────────────────

_json_option = click.option("--json-path", default=str(DEFAULT_DATA_JSON),
                            help="Pfad zur gespeicherten JSON-Datei.")
_today_option = click.option("--today", type=click.DateTime(formats=["%Y-%m-%d"]),
                             default=None, help="Stichtag (JJJJ-MM-TT).")


@click.group("query")
def cmd_query():
    """Einzelne Abfragen auf dem Datensatz."""


@cmd_query.command("min-mark")
@click.option("--subject", "subject_id", type=int, required=True, help="Fach-ID.")
@_json_option
def query_min_mark(subject_id: int, json_path: str):
    """Kleinste Note in einem Fach."""
    data = _load_data_or_abort(json_path)
    result = _make_analyzer().min_subject_mark(iter(data.students), subject_id)
    if result.is_present:
        console.print(f"Mindestnote Fach {subject_id}: [bold]{result.value:g}[/bold]")
    else:
        console.print(f"[yellow]Keine Noten für Fach {subject_id}.[/yellow]")


@cmd_query.command("avg-teacher-mark")
@click.option("--teacher", "teacher_id", type=int, required=True, help="Lehrkraft-ID.")
@_json_option
def query_avg_teacher_mark(teacher_id: int, json_path: str):
    """Durchschnitt der von einer Lehrkraft vergebenen Noten."""
    data = _load_data_or_abort(json_path)
    result = _make_analyzer().average_teacher_mark(iter(data.students), teacher_id)
    if result.is_present:
        console.print(f"Ø Noten Lehrkraft {teacher_id}: [bold]{result.value:.2f}[/bold]")
    else:
        console.print(f"[yellow]Keine Noten von Lehrkraft {teacher_id}.[/yellow]")


@cmd_query.command("min-age")
@_json_option
@_today_option
def query_min_age(json_path: str, today):
    """Alter der jüngsten Person (volle Jahre)."""
    data = _load_data_or_abort(json_path)
    analyzer = _make_analyzer(today)
    _run_or_abort(lambda: console.print(
        f"Jüngste/r Studierende/r: [bold]"
        f"{analyzer.min_student_age_in_years(iter(data.students))}[/bold] Jahre"
    ))


@cmd_query.command("top-student")
@_json_option
def query_top_student(json_path: str):
    """Person mit dem höchsten Notendurchschnitt."""
    data = _load_data_or_abort(json_path)
    analyzer = _make_analyzer()
    _run_or_abort(lambda: _print_students(
        "Höchster Notendurchschnitt",
        [analyzer.student_with_highest_average_mark(iter(data.students))],
        analyzer,
    ))


@cmd_query.command("by-mark-count")
@_json_option
def query_by_mark_count(json_path: str):
    """Studierende nach Anzahl Noten (absteigend), dann Nachname."""
    data = _load_data_or_abort(json_path)
    analyzer = _make_analyzer()
    _print_students("Nach Anzahl Noten",
                    analyzer.sort_students_by_mark_count(iter(data.students)), analyzer)


@cmd_query.command("subject-ranking")
@_json_option
def query_subject_ranking(json_path: str):
    """Fach-IDs nach Notendurchschnitt, schwächstes Fach zuerst."""
    data = _load_data_or_abort(json_path)
    names = {s.id: s.name for s in data.subjects}
    ranking = _make_analyzer().subjects_by_academic_performance(iter(data.students))
    table = Table(title="Fächer nach Leistung", box=box.ROUNDED)
    table.add_column("Rang", justify="right")
    table.add_column("ID", justify="right")
    table.add_column("Fach")
    for i, sid in enumerate(ranking, start=1):
        table.add_row(str(i), str(sid), names.get(sid, "?"))
    console.print(table)


@cmd_query.command("popular-subject")
@_json_option
def query_popular_subject(json_path: str):
    """Fach, das die meisten Lehrkräfte unterrichten."""
    data = _load_data_or_abort(json_path)
    analyzer = _make_analyzer()

    def show():
        subject = analyzer.subject_most_teachers_lead(iter(data.teachers))
        console.print(f"Häufigstes Fach: [bold]{subject.name}[/bold] (ID {subject.id})")
    _run_or_abort(show)


@cmd_query.command("graduates")
@_json_option
@_today_option
def query_graduates(json_path: str, today):
    """Exzellente Absolvent/innen, sortiert nach Nachname."""
    data = _load_data_or_abort(json_path)
    analyzer = _make_analyzer(today)
    _print_students("Exzellente Absolvent/innen",
                    analyzer.graduated_excellent_students(iter(data.students)), analyzer)


@cmd_query.command("best-head")
@_json_option
def query_best_head(json_path: str):
    """Leitung des Fachbereichs mit dem höchsten Notendurchschnitt."""
    data = _load_data_or_abort(json_path)
    analyzer = _make_analyzer()

    def show():
        head = analyzer.head_of_most_successful_department(iter(data.departments))
        console.print(f"Erfolgreichste Leitung: [bold]{head.name}[/bold] (ID {head.id})")
    _run_or_abort(show)


@cmd_query.command("head-subjects")
@click.option("--department", "department_id", type=int, required=True,
              help="Fachbereichs-ID.")
@click.option("--rule", type=click.Choice(["subject_id", "taught_by_head"]), default=None,
              help="Vergleichsregel (überschreibt Config).")
@_json_option
def query_head_subjects(department_id: int, rule, json_path: str):
    """Fächer, die die Leitung im eigenen Fachbereich unterrichtet."""
    data = _load_data_or_abort(json_path)
    dept = next((d for d in data.departments if d.id == department_id), None)
    if dept is None:
        console.print(f"[red]Fachbereich {department_id} nicht gefunden.[/red]")
        sys.exit(1)
    subjects = _make_analyzer(rule=rule).subjects_head_teaches_in_department(dept)
    if not subjects:
        console.print("[dim]Keine Fächer gefunden.[/dim]")
    for s in subjects:
        console.print(f"  {s.id:3d}  {s.name}")


def _run_or_abort(fn) -> None:
    """Führt eine Abfrage aus; verletzte Vorbedingung → Fehlermeldung + Exit 1."""
    from analysis.errors import PreconditionViolation
    try:
        fn()
    except PreconditionViolation as e:
        console.print(f"[red bold]Vorbedingung verletzt:[/red bold] {e}")
        sys.exit(1)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Log-Level (DEBUG, INFO, WARNING, ...); Default aus der Config.")
def cli(log_level):
    """Hochschul-Auswertung: Noten, Ranglisten und Absolvent/innen.

    Starten Sie mit: python main.py generate --export-json
    """
    level = log_level or _config_log_level()
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main():
    """Einstiegspunkt."""
    if len(sys.argv) == 1:
        console.print(Panel(
            "[bold]Hochschul-Auswertung[/bold]\n\n"
            "Noch keine Daten? [bold]python main.py generate --export-json[/bold]",
            border_style="cyan",
        ))
    cli()


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_check)
cli.add_command(cmd_analyze)
cli.add_command(cmd_query)


if __name__ == "__main__":
    main()
