"""Tests für das Konfigurationssystem."""

from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from analysis.university_analyzer import UniversityAnalyzer
from config.defaults import DEPARTMENT_SUBJECTS, SUBJECT_CATALOG, default_analyzer_config
from config.manager import ConfigManager
from config.schema import AnalyzerConfig, HeadSubjectRule, ReportConfig


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_config_valid(self):
        """Default-Config entspricht den Standardkriterien."""
        config = default_analyzer_config()
        assert config.graduate_age == 21
        assert config.excellent_mark == 8.0
        assert config.head_subject_rule is HeadSubjectRule.SUBJECT_ID
        assert config.evaluation_date is None
        assert config.report.max_workers == 1

    def test_department_subjects_in_catalog(self):
        for dept, ids in DEPARTMENT_SUBJECTS.items():
            for sid in ids:
                assert sid in SUBJECT_CATALOG, f"{dept}: Fach {sid} fehlt im Katalog"

    def test_analyzer_from_config(self):
        config = default_analyzer_config().model_copy(update={
            "evaluation_date": date(2020, 1, 1),
            "graduate_age": 25,
            "head_subject_rule": HeadSubjectRule.TAUGHT_BY_HEAD,
        })
        analyzer = UniversityAnalyzer.from_config(config)
        assert analyzer.today == date(2020, 1, 1)
        assert analyzer.graduate_age == 25
        assert analyzer.head_subject_rule is HeadSubjectRule.TAUGHT_BY_HEAD


# ─── PYDANTIC-VALIDIERUNG ─────────────────────────────────────────────────────

class TestPydanticValidation:
    def test_invalid_graduate_age(self):
        with pytest.raises(ValidationError):
            AnalyzerConfig(graduate_age=0)

    def test_invalid_excellent_mark(self):
        with pytest.raises(ValidationError):
            AnalyzerConfig(excellent_mark=-1)

    def test_invalid_rule(self):
        with pytest.raises(ValidationError):
            AnalyzerConfig(head_subject_rule="teacher_id")

    def test_log_level_normalized(self):
        assert AnalyzerConfig(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            AnalyzerConfig(log_level="LAUT")

    def test_evaluation_date_before_1900(self):
        with pytest.raises(ValidationError):
            AnalyzerConfig(evaluation_date=date(1850, 1, 1))

    def test_max_workers_bounds(self):
        with pytest.raises(ValidationError):
            ReportConfig(max_workers=0)


# ─── CONFIG MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Speichern und erneutes Laden liefert identische Config."""
        config = default_analyzer_config().model_copy(update={
            "evaluation_date": date(2024, 6, 15),
            "head_subject_rule": HeadSubjectRule.TAUGHT_BY_HEAD,
        })
        mgr = ConfigManager()
        mgr.CONFIG_DIR = tmp_path
        mgr.DEFAULT_CONFIG = tmp_path / "analyzer_config.yaml"
        mgr.save(config)
        loaded = mgr.load()
        assert loaded == config

    def test_saved_yaml_has_comments(self, tmp_path: Path):
        mgr = ConfigManager()
        path = tmp_path / "c.yaml"
        mgr.save(default_analyzer_config(), path)
        text = path.read_text(encoding="utf-8")
        assert "Hochschul-Auswertung" in text
        assert "─── Stichtag ───" in text

    def test_first_run_check_no_file(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "nonexistent.yaml"
        assert mgr.first_run_check() is True

    def test_first_run_check_with_file(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "analyzer_config.yaml"
        mgr.save(default_analyzer_config())
        assert mgr.first_run_check() is False

    def test_load_nonexistent_raises(self, tmp_path: Path):
        mgr = ConfigManager()
        with pytest.raises(FileNotFoundError):
            mgr.load(tmp_path / "not_there.yaml")

    def test_load_or_default_without_file(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "nonexistent.yaml"
        assert mgr.load_or_default() == default_analyzer_config()

    def test_load_invalid_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("graduate_age: -5\n", encoding="utf-8")
        with pytest.raises(ValueError, match="ungültig"):
            ConfigManager().load(path)
