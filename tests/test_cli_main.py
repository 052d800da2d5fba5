from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from hmmpath.cli import main as cli_main
from hmmpath.cli.commands import decode, validate


def test_build_arg_parser_accepts_all_registered_commands() -> None:
    parser = cli_main.build_arg_parser()
    args = parser.parse_args(["decode", "--model", "m.hmm", "--data", "obs.txt"])
    assert args.command == "decode"
    assert args.handler is decode.run
    assert args.out_dir is None and args.mode is None
    args = parser.parse_args(["validate", "--model", "m.hmm", "--mode", "debug"])
    assert args.command == "validate"
    assert args.handler is validate.run
    assert args.mode == "debug"


def test_command_is_required() -> None:
    with pytest.raises(SystemExit):
        cli_main.build_arg_parser().parse_args([])


def test_decode_requires_model_and_data() -> None:
    parser = cli_main.build_arg_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["decode", "--model", "m.hmm"])


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as info:
        cli_main.main(["--version"])
    assert info.value.code == 0
    assert capsys.readouterr().out.startswith("hmmpath ")


def test_main_returns_handler_status(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[argparse.Namespace] = []

    def _fake_run(args: argparse.Namespace) -> int:
        seen.append(args)
        return 3

    monkeypatch.setattr(validate, "run", _fake_run)
    # the parser binds the handler when built, so patch before main() builds it
    assert cli_main.main(["validate", "--model", "m.hmm"]) == 3
    assert seen[0].model == "m.hmm"


def test_app_exits_with_command_status(
    weather_files: tuple[Path, Path], tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    model_path, _ = weather_files
    monkeypatch.setattr("sys.argv", ["hmmpath", "validate", "--model", str(model_path), "--log-dir", str(tmp_path / "l")])
    with pytest.raises(SystemExit) as info:
        cli_main.app()
    assert info.value.code == 0
