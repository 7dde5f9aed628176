"""Datenmodell für eine Lehrkraft (Pydantic v2)."""

from pydantic import BaseModel

from models.subject import Subject


class Teacher(BaseModel):
    """Repräsentiert eine einzelne Lehrkraft."""

    id: int
    name: str = ""
    taught_subjects: list[Subject] = []   # Fächer, die die Lehrkraft unterrichtet

    @property
    def taught_subject_ids(self) -> set[int]:
        """IDs aller unterrichteten Fächer."""
        return {s.id for s in self.taught_subjects}
