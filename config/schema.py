import logging
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class HeadSubjectRule(str, Enum):
    """Vergleichsregel für "Fächer, die die Leitung im Fachbereich unterrichtet"."""
    # Historische Regel: Fach-ID == Lehrkraft-ID (vergleicht zwei ID-Räume!)
    SUBJECT_ID = "subject_id"
    # Korrigierte Regel: Fach gehört zu den unterrichteten Fächern der Leitung
    TAUGHT_BY_HEAD = "taught_by_head"


# ─── BERICHT ───

class ReportConfig(BaseModel):
    """Parameter für den Gesamtbericht (`analyze`)."""
    # Fach, für das die Mindestnote ermittelt wird
    subject_id: int = Field(1,
        description="Fach-ID für die Mindestnote im Bericht")
    # Lehrkraft, deren Notendurchschnitt ermittelt wird
    teacher_id: int = Field(1,
        description="Lehrkraft-ID für den Notendurchschnitt im Bericht")
    # Fachbereich für "Fächer der Leitung"; None = erster Fachbereich
    department_id: Optional[int] = None
    # Parallele Auswertung unabhängiger Abfragen (1 = sequentiell)
    max_workers: int = Field(1, ge=1, le=32,
        description="Threads für die parallele Auswertung")


# ─── GESAMTKONFIGURATION ───

class AnalyzerConfig(BaseModel):
    """Gesamtkonfiguration der Auswertung."""
    # Ab diesem Alter (volle Jahre) gilt man als Absolvent/in
    graduate_age: int = Field(21, ge=1, le=120,
        description="Mindestalter für Absolvent/innen")
    # Ab diesem Notendurchschnitt gilt man als exzellent
    excellent_mark: float = Field(8.0, gt=0,
        description="Mindest-Notendurchschnitt für Exzellenz")
    head_subject_rule: HeadSubjectRule = HeadSubjectRule.SUBJECT_ID
    # Stichtag für Altersberechnung; None = heutiges Datum
    evaluation_date: Optional[date] = None
    report: ReportConfig = ReportConfig()
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        v = v.upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"Unbekanntes Log-Level: {v}")
        return v

    @model_validator(mode='after')
    def validate_evaluation_date(self):
        """Ein Stichtag vor dem Jahr 1900 ist fast sicher ein Tippfehler."""
        if self.evaluation_date is not None and self.evaluation_date.year < 1900:
            raise ValueError(
                f"Stichtag {self.evaluation_date.isoformat()} liegt vor 1900")
        return self
