from __future__ import annotations

import json
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from deprecation_gate.errors import ConfigError, DeprecationGateError
from deprecation_gate.registry import DEFAULT_TRANSITION_PERIOD_DAYS, DeprecationRegistry

CONFIG_ENV = "DEPRECATION_GATE_CONFIG"
DEFAULT_CONFIG_PATH = Path("config") / "deprecations.json"


@dataclass
class GateSettings:
    registry: DeprecationRegistry = field(default_factory=DeprecationRegistry)
    classes: list[Path] = field(default_factory=list)
    source: Path | None = None


def resolve_config_path(raw: str | Path | None = None, *, cwd: Path | None = None) -> Path:
    base = cwd or Path.cwd()
    value = raw or os.environ.get(CONFIG_ENV, "").strip() or DEFAULT_CONFIG_PATH
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base / path
    if path.is_dir():
        path = path / DEFAULT_CONFIG_PATH.name
    return path


def load_config_data(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"config not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"failed to read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top-level value must be an object")
    return data


def normalize_paths(raw: Iterable[str] | str | None, *, base: Path, where: str = "classes") -> list[Path]:
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = [raw]
    elif not isinstance(raw, (list, tuple)):
        raise ConfigError(f"{where} must be a string or a list")
    paths: list[Path] = []
    for index, item in enumerate(raw):
        if not isinstance(item, str):
            raise ConfigError(f"{where}[{index}] must be a string")
        text = item.strip()
        if not text:
            continue
        path = Path(text).expanduser()
        paths.append(path if path.is_absolute() else (base / path))
    return paths


def _add_entry(registry: DeprecationRegistry, entry: object, *, where: str) -> None:
    if isinstance(entry, str):
        registry.add(entry)
        return
    if not isinstance(entry, dict):
        raise ConfigError(f"{where}: expected a string or an object, got {type(entry).__name__}")
    identifier = entry.get("identifier")
    if not isinstance(identifier, str) or not identifier.strip():
        raise ConfigError(f"{where}: field identifier must be a non-empty string")
    since = entry.get("since")
    if since is not None and not isinstance(since, str):
        raise ConfigError(f"{where}: field since must be a YYYY-MM-DD string")
    transition = entry.get("transition_days", DEFAULT_TRANSITION_PERIOD_DAYS)
    if isinstance(transition, bool) or not isinstance(transition, int):
        raise ConfigError(f"{where}: field transition_days must be an integer")
    registry.add(identifier, since, transition)


def build_registry(entries: Iterable[object], *, source: str = "deprecations") -> DeprecationRegistry:
    registry = DeprecationRegistry()
    for index, entry in enumerate(entries):
        where = f"{source}[{index}]"
        try:
            _add_entry(registry, entry, where=where)
        except ConfigError:
            raise
        except (DeprecationGateError, ValueError) as exc:
            raise ConfigError(f"{where}: {exc}") from exc
    return registry


def load_config(path: Path) -> GateSettings:
    data = load_config_data(path)
    entries = data.get("deprecations", [])
    if not isinstance(entries, list):
        raise ConfigError(f"{path}: field deprecations must be a list")
    registry = build_registry(entries, source=f"{path.name}: deprecations")
    classes = normalize_paths(data.get("classes"), base=path.parent, where=f"{path}: field classes")
    return GateSettings(registry=registry, classes=classes, source=path)
