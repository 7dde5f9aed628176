"""Tests für die Datenmodelle, den Referenz-Check und den Testdaten-Generator."""

from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from data.fake_data import FakeDataGenerator
from models import Department, Student, Subject, SubjectMark, Teacher, UniversityData


TODAY = date(2024, 6, 15)


def _make_mini_data() -> UniversityData:
    ana = Subject(id=1, name="Analysis")
    prog = Subject(id=4, name="Programmierung")
    t1 = Teacher(id=1, name="Müller, Anna", taught_subjects=[ana])
    t2 = Teacher(id=2, name="Schmidt, Hans", taught_subjects=[prog, ana])
    students = [
        Student(id=1, surname="Weber", birthday=date(2000, 3, 1),
                subject_marks=[SubjectMark(subject_id=1, teacher_id=1, mark=9),
                               SubjectMark(subject_id=4, teacher_id=2, mark=7)]),
        Student(id=2, surname="Abel", birthday=date(2004, 12, 24),
                subject_marks=[SubjectMark(subject_id=1, teacher_id=2, mark=6)]),
    ]
    dept = Department(id=1, name="Mathematik", head=t1, students=students,
                      subjects=[ana, prog])
    return UniversityData(subjects=[ana, prog], teachers=[t1, t2],
                          students=students, departments=[dept])


# ─── STUDENT ──────────────────────────────────────────────────────────────────

class TestStudent:

    def test_age_on(self):
        s = Student(id=1, surname="A", birthday=date(2000, 6, 15))
        assert s.age_on(date(2024, 6, 14)) == 23
        assert s.age_on(date(2024, 6, 15)) == 24
        assert s.age_on(date(2024, 12, 31)) == 24

    def test_average_mark(self):
        s = Student(id=1, surname="A", birthday=date(2000, 1, 1),
                    subject_marks=[SubjectMark(subject_id=1, teacher_id=1, mark=m)
                                   for m in (6, 7, 8)])
        assert s.average_mark() == pytest.approx(7.0)
        assert s.mark_count == 3

    def test_average_mark_without_marks_is_none(self):
        s = Student(id=1, surname="A", birthday=date(2000, 1, 1))
        assert s.average_mark() is None
        assert s.mark_count == 0

    def test_duplicate_marks_allowed(self):
        mark = SubjectMark(subject_id=1, teacher_id=1, mark=5)
        s = Student(id=1, surname="A", birthday=date(2000, 1, 1),
                    subject_marks=[mark, mark])
        assert s.mark_count == 2

    def test_birthday_parsed_from_iso(self):
        s = Student.model_validate({"id": 1, "surname": "A", "birthday": "2001-02-03"})
        assert s.birthday == date(2001, 2, 3)

    def test_invalid_birthday_raises(self):
        with pytest.raises(ValidationError):
            Student(id=1, surname="A", birthday="kein Datum")


class TestTeacher:

    def test_taught_subject_ids(self):
        t = Teacher(id=1, taught_subjects=[Subject(id=3, name="TI"), Subject(id=4, name="P")])
        assert t.taught_subject_ids == {3, 4}

    def test_head_may_lead_several_departments(self):
        head = Teacher(id=1)
        d1 = Department(id=1, head=head)
        d2 = Department(id=2, head=head)
        assert d1.head.id == d2.head.id == 1


# ─── UNIVERSITY DATA ──────────────────────────────────────────────────────────

class TestUniversityData:

    def test_summary(self):
        summary = _make_mini_data().summary()
        assert "Studierende: 2" in summary
        assert "Noten gesamt: 3" in summary
        assert "Fachbereiche: 1" in summary

    def test_references_consistent(self):
        report = _make_mini_data().check_references()
        assert report.is_consistent
        assert report.errors == []

    def test_unknown_subject_and_teacher(self):
        data = _make_mini_data()
        bad = Student(id=9, surname="Fehler", birthday=date(2001, 1, 1),
                      subject_marks=[SubjectMark(subject_id=99, teacher_id=42, mark=5)])
        data = data.model_copy(update={"students": data.students + [bad]})
        report = data.check_references()
        assert not report.is_consistent
        assert any("unbekanntes Fach 99" in e for e in report.errors)
        assert any("unbekannter Lehrkraft 42" in e for e in report.errors)

    def test_department_without_marks_warns(self):
        data = _make_mini_data()
        empty = Department(id=2, head=data.teachers[0],
                           students=[Student(id=5, surname="Neu", birthday=date(2003, 1, 1))])
        data = data.model_copy(update={"departments": data.departments + [empty]})
        report = data.check_references()
        assert report.is_consistent
        assert any("Fachbereich 2: keine Noten" in w for w in report.warnings)

    def test_unknown_head(self):
        data = _make_mini_data()
        dept = Department(id=3, head=Teacher(id=77))
        data = data.model_copy(update={"departments": [dept]})
        report = data.check_references()
        assert any("Leitung 77" in e for e in report.errors)

    def test_json_roundtrip(self, tmp_path: Path):
        data = _make_mini_data()
        path = tmp_path / "sub" / "data.json"
        data.save_json(path)
        loaded = UniversityData.load_json(path)
        assert loaded.students == data.students
        assert loaded.departments[0].head.id == 1
        assert loaded.created_at is not None

    def test_load_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            UniversityData.load_json(tmp_path / "fehlt.json")


# ─── FAKE DATA ────────────────────────────────────────────────────────────────

class TestFakeDataGenerator:

    def test_reproducible(self):
        d1 = FakeDataGenerator(seed=7, today=TODAY).generate()
        d2 = FakeDataGenerator(seed=7, today=TODAY).generate()
        assert d1.students == d2.students
        assert d1.teachers == d2.teachers

    def test_generated_data_is_consistent(self):
        data = FakeDataGenerator(seed=42, num_students=30, today=TODAY).generate()
        assert len(data.students) == 30
        assert data.check_references().is_consistent

    def test_every_student_has_marks(self):
        data = FakeDataGenerator(seed=1, today=TODAY).generate()
        assert all(s.subject_marks for s in data.students)

    def test_every_department_has_students(self):
        data = FakeDataGenerator(seed=3, num_students=20, today=TODAY).generate()
        assert data.departments
        assert all(d.students for d in data.departments)

    def test_age_boundary_students(self):
        """Jede fünfte Person ist am Stichtag genau 21."""
        data = FakeDataGenerator(seed=5, today=TODAY).generate()
        assert data.students[0].age_on(TODAY) == 21
        assert data.students[5].age_on(TODAY) == 21
        assert all(18 <= s.age_on(TODAY) <= 30 for s in data.students)

    def test_zero_teachers_rejected(self):
        with pytest.raises(ValueError, match="num_teachers"):
            FakeDataGenerator(seed=1, num_teachers=0, today=TODAY)

    def test_zero_marks_per_student_rejected(self):
        with pytest.raises(ValueError, match="max_marks_per_student"):
            FakeDataGenerator(seed=1, max_marks_per_student=0, today=TODAY)

    def test_single_teacher(self):
        data = FakeDataGenerator(seed=3, num_students=10, num_teachers=1, today=TODAY).generate()
        assert len(data.students) == 10
        assert data.check_references().is_consistent
