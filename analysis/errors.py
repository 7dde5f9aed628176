"""Fehlerarten der Auswertung."""


class AnalysisError(Exception):
    """Basisklasse aller Auswertungsfehler."""


class PreconditionViolation(AnalysisError, ValueError):
    """Vorbedingung einer Abfrage verletzt (leere Eingabe, fehlende Noten).

    Programmierfehler an der Aufrufstelle, kein behebbarer Laufzeitzustand.
    """

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation}: {message}")
