"""Datenmodell für einen Fachbereich (Pydantic v2)."""

from pydantic import BaseModel

from models.student import Student
from models.subject import Subject
from models.teacher import Teacher


class Department(BaseModel):
    """Ein Fachbereich mit Leitung, Studierenden und Fächern.

    Die Leitung ist eine Referenz: eine Lehrkraft darf mehrere
    Fachbereiche leiten.
    """

    id: int
    name: str = ""
    head: Teacher
    students: list[Student] = []
    subjects: list[Subject] = []
