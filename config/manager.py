"""Konfigurationsmanager: Laden, Speichern und Validieren.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import AnalyzerConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Hochschul-Auswertung — Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "graduate_age": (
        "Kriterien",
        "Absolvent/in: volle Lebensjahre >= graduate_age.\n"
        "Exzellent: Notendurchschnitt >= excellent_mark.",
    ),
    "head_subject_rule": (
        "Fächer der Fachbereichsleitung",
        "subject_id = historische Regel (Fach-ID == Lehrkraft-ID)\n"
        "taught_by_head = Fach wird von der Leitung unterrichtet",
    ),
    "evaluation_date": (
        "Stichtag",
        "Leer lassen für das heutige Datum (Format JJJJ-MM-TT).",
    ),
    "report": (
        "Gesamtbericht",
        None,
    ),
    "log_level": (
        "Logging",
        None,
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "analyzer_config.yaml"

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> AnalyzerConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py config init' aus."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return AnalyzerConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> AnalyzerConfig:
        """Wie `load`, fällt aber auf die Default-Config zurück, wenn keine Datei existiert."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            from config.defaults import default_analyzer_config
            return default_analyzer_config()
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: AnalyzerConfig, path: Optional[Path] = None) -> None:
        """Speichere Config als YAML mit deutschen Kommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: AnalyzerConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        if "report" in cm:
            report_map = CommentedMap(cm["report"])
            report_map.yaml_add_eol_comment("1 = sequentiell", "max_workers")
            cm["report"] = report_map

        return cm
