"""Datenmodell für ein Studienfach (Pydantic v2)."""

from pydantic import BaseModel


class Subject(BaseModel):
    """Repräsentiert ein Fach. Gruppierung immer über `id`, nie über Gleichheit."""

    id: int
    name: str
