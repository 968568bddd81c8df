from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path

import pytest

import deprecation_gate
from deprecation_gate import cli
from deprecation_gate.errors import ConfigError, EXPIRED_DEPRECATIONS_MESSAGE
from tests.classfile_builder import class_bytes


@pytest.fixture()
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    classes = tmp_path / "target" / "classes" / "com" / "acme"
    classes.mkdir(parents=True)
    (classes / "Foo.class").write_bytes(class_bytes("com/acme/Foo", deprecated=True))
    (classes / "Bar.class").write_bytes(class_bytes("com/acme/Bar", fields={"OLD:I": True}))
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "deprecations.json").write_text(
        json.dumps(
            {
                "deprecations": [
                    {"identifier": "com.acme.Foo", "since": "2020-01-01", "transition_days": 7},
                    {"identifier": "com.acme.Bar#OLD", "since": "2020-01-01", "transition_days": 30},
                ],
                "classes": ["../target/classes"],
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_main_passes(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = cli.main(["--now", "2020-01-09"])
    out = capsys.readouterr().out
    assert rc == 0
    assert out.startswith("[deprecation-gate] deprecation gate OK")


def test_main_blocks_on_expired(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = cli.main(["--config", "config/deprecations.json", "--now", "2020-01-10"])
    err = capsys.readouterr().err
    assert rc == 1
    assert f"[deprecation-gate] BLOCK: {EXPIRED_DEPRECATIONS_MESSAGE}:" in err
    assert '- "com.acme.Foo"' in err
    assert "com.acme.Bar#OLD" not in err


def test_main_respects_pinned_today(
    project: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("DEPRECATION_GATE_TODAY", "2021-01-01")
    assert cli.main([]) == 1
    assert "com.acme.Bar#OLD" in capsys.readouterr().err


def test_main_rejects_bad_now(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--now", "tomorrow"]) == 2
    assert "[deprecation-gate] ERROR: invalid date" in capsys.readouterr().err


def test_main_reports_missing_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:  # noqa: ANN001
    monkeypatch.chdir(tmp_path)
    assert cli.main([]) == 2
    assert "config not found" in capsys.readouterr().err


def test_list_works_without_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:  # noqa: ANN001
    classes = tmp_path / "out"
    classes.mkdir()
    (classes / "Foo.class").write_bytes(
        class_bytes("com/acme/Foo", methods={"m(ILjava/lang/String;)V": True})
    )
    monkeypatch.chdir(tmp_path)

    assert cli.main(["--list", "--classes", "out"]) == 0
    assert capsys.readouterr().out.splitlines() == ["com.acme.Foo#m(int, java.lang.String)"]


def test_list_uses_configured_classes(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--list"]) == 0
    assert capsys.readouterr().out.splitlines() == ["com.acme.Bar#OLD", "com.acme.Foo"]


def test_excepthook_prints_single_line_for_gate_errors(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    exc = ConfigError("broken entry\nsecond line")
    cli.excepthook(ConfigError, exc, None)
    assert capsys.readouterr().err == "[deprecation-gate] ERROR: broken entry second line\n"

    calls: list[type[BaseException]] = []
    monkeypatch.setattr(sys, "__excepthook__", lambda exc_type, value, tb: calls.append(exc_type))
    monkeypatch.setenv(cli.DEBUG_ENV, "1")
    cli.excepthook(ConfigError, exc, None)
    monkeypatch.delenv(cli.DEBUG_ENV)
    cli.excepthook(KeyError, KeyError("x"), None)
    assert calls == [ConfigError, KeyError]


def test_importing_the_package_leaves_excepthook_alone(monkeypatch: pytest.MonkeyPatch) -> None:
    def sentinel(exc_type, value, tb) -> None:
        return None

    monkeypatch.setattr(sys, "excepthook", sentinel)
    importlib.reload(deprecation_gate)
    importlib.reload(cli)
    assert sys.excepthook is sentinel


def test_run_installs_excepthook(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "excepthook", sys.__excepthook__)
    monkeypatch.setattr(cli, "main", lambda argv=None: 0)
    assert cli.run() == 0
    assert sys.excepthook is cli.excepthook


@pytest.mark.parametrize("classes", [5, True, {"dir": "target/classes"}])
def test_main_rejects_non_list_classes_in_config(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], classes: object
) -> None:
    config_path = tmp_path / "deprecations.json"
    config_path.write_text(json.dumps({"deprecations": [], "classes": classes}), encoding="utf-8")

    assert cli.main(["--config", str(config_path)]) == 2
    assert "field classes must be a string or a list" in capsys.readouterr().err
