from deprecation_gate.cli import run

raise SystemExit(run())
