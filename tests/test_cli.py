from __future__ import annotations

import io
import json
import sys
from pathlib import Path

import pytest
import yaml

from qna.cli.main import EXIT_CONFIG, EXIT_FATAL, EXIT_INTERRUPTED, main

CLIENT_BUNDLE = """\
actions:
  - prompt: Client?
    parameter: IS_CLIENT
    type: bool
  - maps:
      - parameter: ORG
        condition: IS_CLIENT
        value: us
      - parameter: ORG
        condition: "!IS_CLIENT"
        value: them
  - statement: All done.
"""


@pytest.fixture
def bundle_file(tmp_path: Path) -> Path:
    p = tmp_path / "client.yaml"
    p.write_text(CLIENT_BUNDLE, encoding="utf-8")
    return p


def _stdin(monkeypatch: pytest.MonkeyPatch, *answers: str) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO("".join(f"{a}\n" for a in answers)))


def test_validate_prints_action_counts(bundle_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["validate", str(bundle_file)])

    out = capsys.readouterr().out
    assert "=== BUNDLE ===" in out
    assert "actions: 3" in out
    assert "question: 1" in out
    assert "mapping: 1" in out


def test_validate_rejects_bad_bundle(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = tmp_path / "bad.json"
    p.write_text(json.dumps({"actions": [{"review": "sometimes"}]}), encoding="utf-8")

    with pytest.raises(SystemExit) as info:
        main(["validate", str(p)])

    assert info.value.code == EXIT_CONFIG
    assert "invalid review scope" in capsys.readouterr().err


def test_run_prints_values_as_yaml(
    bundle_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, "yes")

    main(["run", str(bundle_file)])

    out = capsys.readouterr().out
    assert "Client?\n[y/n]" in out
    assert "All done." in out
    values = yaml.safe_load(out.split("=== VALUES ===", 1)[1])
    assert values == {"IS_CLIENT": True, "ORG": "us"}


def test_run_json_with_results(
    bundle_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, "no")

    main(["run", str(bundle_file), "--format", "json", "--show-results"])

    out = capsys.readouterr().out
    payload = json.loads(out[out.index("{\n") :])
    assert payload["values"] == {"IS_CLIENT": False, "ORG": "them"}
    assert [r["parameter"] for r in payload["results"]] == ["IS_CLIENT", "ORG"]
    assert payload["results"][1]["mapped_value"] == "them"


def test_run_with_env_parameters_asks_nothing(
    bundle_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    params = tmp_path / "params.env"
    params.write_text("IS_CLIENT=false\nORG=partners\n", encoding="utf-8")
    _stdin(monkeypatch)

    main(["run", str(bundle_file), str(params)])

    out = capsys.readouterr().out
    assert "Client?" not in out
    assert yaml.safe_load(out.split("=== VALUES ===", 1)[1]) == {"IS_CLIENT": False, "ORG": "partners"}


def test_run_exits_when_input_closes(
    bundle_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch)

    with pytest.raises(SystemExit) as info:
        main(["run", str(bundle_file)])

    assert info.value.code == EXIT_INTERRUPTED
    assert "Input closed" in capsys.readouterr().err


def test_run_exits_on_invalid_initial_value(
    bundle_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    params = tmp_path / "params.json"
    params.write_text(json.dumps({"IS_CLIENT": "perhaps"}), encoding="utf-8")
    _stdin(monkeypatch)

    with pytest.raises(SystemExit) as info:
        main(["run", str(bundle_file), str(params)])

    assert info.value.code == EXIT_FATAL
    assert "IS_CLIENT" in capsys.readouterr().err


@pytest.mark.parametrize("width", ["0", "-5"])
def test_run_rejects_non_positive_width(
    bundle_file: Path, width: str, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, "yes")

    with pytest.raises(SystemExit) as info:
        main(["run", str(bundle_file), "--width", width])

    assert info.value.code == EXIT_CONFIG
    err = capsys.readouterr().err
    assert "print width must be a positive int" in err


def test_unknown_log_level_is_a_usage_error(bundle_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as info:
        main(["validate", str(bundle_file), "--log-level", "loud"])

    assert info.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_log_level_is_case_insensitive(bundle_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["validate", str(bundle_file), "--log-level", "debug"])

    assert "=== BUNDLE ===" in capsys.readouterr().out
