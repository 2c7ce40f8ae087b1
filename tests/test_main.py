"""Tests for the command line front end."""

import json

import pytest

from authoring_installer import main as main_mod
from authoring_installer.errors import PersistenceError, ValidationError
from authoring_installer.modes import InstallMode, Phase, decide_mode
from authoring_installer.pipeline import PipelineResult


@pytest.mark.parametrize(
    "argv,force,expected",
    [
        ([], False, InstallMode.INTERACTIVE),
        (None, False, InstallMode.INTERACTIVE),
        (["--serverPort", "8080"], False, InstallMode.UNATTENDED),
        (["--interactive", "--serverPort", "8080"], True, InstallMode.INTERACTIVE),
    ],
)
def test_decide_mode(argv, force, expected):
    assert decide_mode(argv, force_interactive=force) is expected


def test_every_setting_is_a_flag():
    args = main_mod.build_parser().parse_args(
        ["--serverPort", "8080", "--name", "main", "--email", "a@b.io", "--smtpPassword", "x"]
    )
    overrides = main_mod.collect_overrides(args)
    assert overrides == {"serverPort": "8080", "name": "main", "email": "a@b.io", "smtpPassword": "x"}


def test_command_line_beats_override_file(tmp_path):
    path = tmp_path / "install.json"
    path.write_text(json.dumps({"serverPort": 7000, "dbName": "from-file"}), encoding="utf-8")

    args = main_mod.build_parser().parse_args(["--overrides", str(path), "--serverPort", "8080"])
    overrides = main_mod.collect_overrides(args)

    assert overrides == {"serverPort": "8080", "dbName": "from-file"}


def test_yaml_override_file(tmp_path):
    pytest.importorskip("yaml")
    path = tmp_path / "install.yaml"
    path.write_text("email: a@b.io\nuseffmpeg: true\n", encoding="utf-8")

    args = main_mod.build_parser().parse_args(["--overrides", str(path)])

    assert main_mod.collect_overrides(args) == {"email": "a@b.io", "useffmpeg": True}


def test_missing_override_file_is_an_error(tmp_path):
    args = main_mod.build_parser().parse_args(["--overrides", str(tmp_path / "nope.yaml")])

    with pytest.raises(ValidationError) as exc:
        main_mod.collect_overrides(args)

    assert "nope.yaml" in exc.value.message


def test_main_refuses_to_run_without_the_override_file(monkeypatch, tmp_path, capsys):
    fake = _fake_run(PipelineResult(exit_code=0, message="All done", phase=Phase.DONE))
    monkeypatch.setattr(main_mod, "run", fake)

    code = main_mod.main(["--log", str(tmp_path / "install.log"), "--overrides", str(tmp_path / "nope.json")])

    assert code == 1
    assert fake.calls == []
    assert "Override file not found" in capsys.readouterr().out


def _fake_run(result=None, error=None):
    calls = []

    def fake(**kwargs):
        calls.append(kwargs)
        if error is not None:
            raise error
        return result

    fake.calls = calls
    return fake


def test_main_reports_success(monkeypatch, tmp_path, capsys):
    fake = _fake_run(PipelineResult(exit_code=0, message="All done", phase=Phase.DONE))
    monkeypatch.setattr(main_mod, "run", fake)

    code = main_mod.main(["--log", str(tmp_path / "install.log"), "--email", "a@b.io"])

    assert code == 0
    assert "All done" in capsys.readouterr().out
    assert fake.calls[0]["mode"] is InstallMode.UNATTENDED
    assert fake.calls[0]["overrides"] == {"email": "a@b.io"}


def test_main_reports_failure(monkeypatch, tmp_path, capsys):
    result = PipelineResult(exit_code=1, message="Tenant 'master' already exists", phase=Phase.ABORTED)
    monkeypatch.setattr(main_mod, "run", _fake_run(result))

    code = main_mod.main(["--log", str(tmp_path / "install.log")])

    assert code == 1
    assert "Tenant 'master' already exists" in capsys.readouterr().out


def test_main_exits_on_persistence_failure(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(main_mod, "run", _fake_run(error=PersistenceError("Failed to write .env")))

    code = main_mod.main(["--log", str(tmp_path / "install.log")])

    assert code == 1
    assert "Install Failed." in capsys.readouterr().out
