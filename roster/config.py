from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import yaml

from roster.domain.colors import PALETTE


def _load_yaml(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _load_json(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _default_color_meanings() -> List[Dict[str, str]]:
    return [
        {"color": "blue", "meaning": "Plantão"},
        {"color": "green", "meaning": "Ambulatório"},
        {"color": "purple", "meaning": "Enfermaria"},
        {"color": "red", "meaning": "Sobreaviso"},
    ]


@dataclass
class RosterConfig:
    db_url: str = "sqlite:///roster.db"
    fallback_color: str = "gray"
    default_color_meanings: List[Dict[str, str]] = field(default_factory=_default_color_meanings)
    default_shift_start: str = "09:00"
    default_shift_end: str = "17:00"
    suggestion_url: str = "http://localhost:3400/suggestShiftAssignments"
    suggestion_timeout: float = 60.0


def load_config(path: str | Path) -> RosterConfig:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    if path.suffix.lower() in {".yaml", ".yml"}:
        raw = _load_yaml(path)
    elif path.suffix.lower() == ".json":
        raw = _load_json(path)
    else:
        raise ValueError("Unsupported config extension. Use .yaml/.yml or .json")

    meanings_in = raw.get("default_color_meanings")
    if meanings_in is None:
        color_meanings = _default_color_meanings()
    else:
        color_meanings = [
            {"color": str(m.get("color", "")).lower(), "meaning": str(m.get("meaning", "")).strip()}
            for m in meanings_in
        ]

    ds = raw.get("default_shift", {})
    cfg = RosterConfig(
        db_url=str(raw.get("db_url", "sqlite:///roster.db")),
        fallback_color=str(raw.get("fallback_color", "gray")).lower(),
        default_color_meanings=color_meanings,
        default_shift_start=str(ds.get("start", "09:00")),
        default_shift_end=str(ds.get("end", "17:00")),
        suggestion_url=str(raw.get("suggestion_url", RosterConfig.suggestion_url)),
        suggestion_timeout=float(raw.get("suggestion_timeout", 60.0)),
    )
    _validate_config(cfg)
    return cfg


def _validate_config(cfg: RosterConfig) -> None:
    if cfg.fallback_color not in PALETTE:
        raise ValueError(f"fallback_color must be one of {', '.join(PALETTE)}")
    seen = set()
    for entry in cfg.default_color_meanings:
        if entry["color"] not in PALETTE:
            raise ValueError(f"default_color_meanings uses unknown color {entry['color']!r}")
        if not entry["meaning"]:
            raise ValueError("default_color_meanings entries need a non-empty meaning")
        if entry["meaning"] in seen:
            raise ValueError(f"default_color_meanings repeats meaning {entry['meaning']!r}")
        seen.add(entry["meaning"])
    if cfg.default_shift_start >= cfg.default_shift_end:
        raise ValueError("default_shift.start must be before default_shift.end")
    if cfg.suggestion_timeout <= 0:
        raise ValueError("suggestion_timeout must be positive")
