"""Tests for the brewprov CLI argument parsing and dispatch."""

import json
from unittest.mock import MagicMock, patch

import pytest

from args import parse_args
from brewprov import dispatch
from constants import ExitCodes
from provider.errors import BrewOwnershipError, ExecutionFailure

BREW = "/usr/local/bin/brew"


class TestArgParsing:
    """Tests for CLI argument parsing."""

    def test_defaults(self):
        ns = parse_args(["list"])
        assert ns.action == "list"
        assert ns.LOG_LEVEL == "INFO"
        assert ns.LOG_FILE is None
        assert ns.CONFIG is None
        assert ns.BREW_PATH is None

    def test_install_with_options(self):
        ns = parse_args(["install", "wget", "--version", "1.21", "--", "--HEAD", "--force"])
        assert ns.PACKAGE == "wget"
        assert ns.VERSION == "1.21"
        assert ns.INSTALL_OPTIONS == ["--HEAD", "--force"]

    def test_install_option_equals_form(self):
        ns = parse_args(["install", "wget", "-o=--HEAD", "--install-option=--force"])
        assert ns.INSTALL_OPTIONS == ["--HEAD", "--force"]

    def test_install_option_combined_with_passthrough(self):
        ns = parse_args(["update", "wget", "-o=--HEAD", "--", "--force"])
        assert ns.INSTALL_OPTIONS == ["--HEAD", "--force"]

    def test_passthrough_rejected_without_install_options(self):
        with pytest.raises(SystemExit):
            parse_args(["list", "--", "--force"])

    def test_ensure(self):
        ns = parse_args(["ensure", "node", "--ensure", "latest", "--dry-run"])
        assert ns.ENSURE == "latest"
        assert ns.DRY_RUN is True

    def test_ensure_default_present(self):
        assert parse_args(["ensure", "node"]).ENSURE == "present"

    def test_global_options(self):
        ns = parse_args(["--loglevel", "DEBUG", "--brew-path", "/opt/homebrew/bin/brew", "-c", "x.yml", "query", "git"])
        assert ns.LOG_LEVEL == "DEBUG"
        assert ns.BREW_PATH == "/opt/homebrew/bin/brew"
        assert ns.CONFIG == "x.yml"
        assert ns.PACKAGE == "git"

    def test_no_action(self):
        assert parse_args([]).action is None

    def test_invalid_loglevel_exits(self):
        with pytest.raises(SystemExit):
            parse_args(["--loglevel", "LOUD", "list"])


@pytest.fixture
def runner():
    r = MagicMock()
    r.brew_path = BREW
    r.execute.return_value = ""
    return r


@pytest.fixture(autouse=True)
def _suitable():
    with patch("brewprov.HomebrewProvider.suitable", return_value=True):
        yield


class TestDispatch:
    """Tests for action dispatch and exit code mapping."""

    def test_list_prints_json(self, runner, capsys):
        runner.execute.return_value = "wget 1.21.3\nnode 18.0.0\n"
        assert dispatch(parse_args(["list"]), runner) == ExitCodes.SUCCESS.value
        assert json.loads(capsys.readouterr().out) == [
            {"name": "wget", "ensure": "1.21.3", "provider": "homebrew"},
            {"name": "node", "ensure": "18.0.0", "provider": "homebrew"},
        ]

    def test_query_absent_prints_null(self, runner, capsys):
        assert dispatch(parse_args(["query", "wget"]), runner) == ExitCodes.SUCCESS.value
        assert json.loads(capsys.readouterr().out) is None

    def test_latest(self, runner, capsys):
        runner.execute.return_value = "==> git: stable 2.40.0 (bottled), HEAD\n"
        dispatch(parse_args(["latest", "git"]), runner)
        assert json.loads(capsys.readouterr().out) == {"name": "git", "latest": "2.40.0"}

    def test_installed(self, runner, capsys):
        runner.execute.return_value = "Not installed\n"
        dispatch(parse_args(["installed", "node", ]), runner)
        assert json.loads(capsys.readouterr().out) == {"name": "node", "installed": False}

    def test_install_versioned(self, runner):
        assert dispatch(parse_args(["install", "Node", "--version", "18", "--", "--force"]), runner) == 0
        runner.execute.assert_called_once_with(
            [BREW, "install", "node@18", "--force"], fail_on_error=True, combine=True
        )

    def test_update_defaults_to_latest_marker(self, runner):
        runner.execute.side_effect = ["installed\n", ""]
        assert dispatch(parse_args(["update", "wget"]), runner) == 0
        assert runner.execute.call_args[0][0] == [BREW, "upgrade", "wget"]

    def test_ensure_dry_run(self, runner, capsys):
        assert dispatch(parse_args(["ensure", "wget", "--dry-run"]), runner) == 0
        assert json.loads(capsys.readouterr().out) == {
            "name": "wget", "before": "absent", "action": "install", "ensure": None,
        }

    def test_provider_error_exit_code(self, runner):
        runner.execute.side_effect = ExecutionFailure("No such keg")
        assert dispatch(parse_args(["uninstall", "wget"]), runner) == ExitCodes.PROVIDER_ERROR.value

    def test_checksum_exit_code(self, runner):
        runner.execute.return_value = "Already downloaded: /nonexistent/x.tgz\nsha256 checksum mismatch"
        assert dispatch(parse_args(["install", "wget"]), runner) == ExitCodes.CHECKSUM_MISMATCH.value

    def test_permission_exit_code(self, runner):
        runner.execute.side_effect = BrewOwnershipError("owned by root")
        assert dispatch(parse_args(["list"]), runner) == ExitCodes.PERMISSION_ERROR.value

    def test_no_action(self, runner, capsys):
        assert dispatch(parse_args([]), runner) == ExitCodes.USAGE_ERROR.value
        assert "No action provided" in capsys.readouterr().err

    def test_unsuitable(self, runner):
        with patch("brewprov.HomebrewProvider.suitable", return_value=False):
            assert dispatch(parse_args(["list"]), runner) == ExitCodes.UNSUITABLE.value
