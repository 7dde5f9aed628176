from config.schema import (
    AnalyzerConfig,
    HeadSubjectRule,
    ReportConfig,
)


def default_report_config() -> ReportConfig:
    """Standard-Bericht: Fach 1, Lehrkraft 1, sequentielle Auswertung."""
    return ReportConfig(subject_id=1, teacher_id=1, department_id=None, max_workers=1)


def default_analyzer_config() -> AnalyzerConfig:
    """Komplette Default-Konfiguration.

    Absolvent/in ab 21 vollen Jahren, exzellent ab Notendurchschnitt 8.0.
    Für "Fächer der Leitung" gilt die historische Regel (Fach-ID ==
    Lehrkraft-ID), damit bestehende Auswertungen unverändert bleiben.
    """
    return AnalyzerConfig(
        graduate_age=21,
        excellent_mark=8.0,
        head_subject_rule=HeadSubjectRule.SUBJECT_ID,
        evaluation_date=None,
        report=default_report_config(),
        log_level="WARNING",
    )


# ─── FÄCHERKATALOG ───
# Fach-ID → Name. Grundlage für den Testdaten-Generator.

SUBJECT_CATALOG: dict[int, str] = {
    1:  "Analysis",
    2:  "Lineare Algebra",
    3:  "Theoretische Informatik",
    4:  "Programmierung",
    5:  "Experimentalphysik",
    6:  "Organische Chemie",
    7:  "Volkswirtschaftslehre",
    8:  "Statistik",
    9:  "Wissenschaftliches Schreiben",
    10: "Philosophie",
    11: "Datenbanken",
    12: "Betriebssysteme",
}

# Fachbereich → Fach-IDs
DEPARTMENT_SUBJECTS: dict[str, list[int]] = {
    "Mathematik":          [1, 2, 8],
    "Informatik":          [3, 4, 11, 12],
    "Naturwissenschaften": [5, 6],
    "Geisteswissenschaften": [7, 9, 10],
}

# Notenskala der Testdaten (ganzzahlig, 1 = schlecht, 10 = sehr gut)
MARK_MIN = 1
MARK_MAX = 10
