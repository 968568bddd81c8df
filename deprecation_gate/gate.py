from __future__ import annotations

import datetime as dt
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from deprecation_gate import scanner, verifier
from deprecation_gate.config import GateSettings
from deprecation_gate.errors import DeprecationGateError, VerificationError

GATE_NAME = "deprecation_check"
NO_CLASSES_MESSAGE = "no class paths configured; pass --classes or set \"classes\" in the config."


@dataclass(frozen=True)
class GateResult:
    name: str
    returncode: int
    output: str = ""
    found: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _class_paths(settings: GateSettings, extra: Sequence[Path] | None) -> list[Path]:
    paths = list(settings.classes)
    for path in extra or ():
        if path not in paths:
            paths.append(path)
    return paths


def run_deprecation_gate(
    settings: GateSettings,
    *,
    now: dt.date | str | None = None,
    extra_classes: Sequence[Path] | None = None,
) -> GateResult:
    paths = _class_paths(settings, extra_classes)
    if not paths:
        return GateResult(
            name=GATE_NAME,
            returncode=2,
            output=NO_CLASSES_MESSAGE,
        )
    try:
        found = scanner.scan(paths)
        verifier.verify(settings.registry, found, now)
    except VerificationError as exc:
        return GateResult(name=GATE_NAME, returncode=1, output=str(exc).rstrip("\n"))
    except (DeprecationGateError, OSError) as exc:
        return GateResult(name=GATE_NAME, returncode=2, output=str(exc))
    return GateResult(
        name=GATE_NAME,
        returncode=0,
        output=(
            f"deprecation gate OK (expected: {len(settings.registry)}, "
            f"classes: {len(paths)} path(s))."
        ),
        found=tuple(found),
    )


def list_deprecations(
    settings: GateSettings,
    *,
    extra_classes: Sequence[Path] | None = None,
) -> GateResult:
    paths = _class_paths(settings, extra_classes)
    if not paths:
        return GateResult(name="deprecation_list", returncode=2, output=NO_CLASSES_MESSAGE)
    try:
        found = scanner.scan(paths)
    except (DeprecationGateError, OSError) as exc:
        return GateResult(name="deprecation_list", returncode=2, output=str(exc))
    return GateResult(
        name="deprecation_list",
        returncode=0,
        output="\n".join(found),
        found=tuple(found),
    )
