from models.subject import Subject
from models.teacher import Teacher
from models.student import Student, SubjectMark
from models.department import Department
from models.university_data import UniversityData, ReferenceReport

__all__ = [
    "Subject",
    "Teacher",
    "Student",
    "SubjectMark",
    "Department",
    "UniversityData",
    "ReferenceReport",
]
