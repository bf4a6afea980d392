"""Unit tests for pairsh.cli."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from pairsh.cli import entrypoint, main
from pairsh.cli.run import split_tool_args
from pairsh.cli.shared import configure_logging
from pairsh.errors import BootstrapError
from pairsh.models import PairshConfig


def _run_patches(**overrides):
    """Return a patch.multiple context for interactive mode with overrides."""
    defaults = dict(
        load_config=MagicMock(return_value=PairshConfig()),
        configure_logging=MagicMock(),
        session_loop=MagicMock(return_value=0),
    )
    defaults.update(overrides)
    return patch.multiple("pairsh.cli.run", **defaults)


# ---------------------------------------------------------------------------
# interactive mode
# ---------------------------------------------------------------------------


class TestRun:
    def test_default_route_starts_session_loop(self):
        loop = MagicMock(return_value=0)
        with _run_patches(session_loop=loop):
            assert main([]) == 0

        config = loop.call_args.args[0]
        assert config == PairshConfig()
        assert loop.call_args.kwargs["extra_args"] == []

    def test_loop_exit_code_is_returned(self):
        with _run_patches(session_loop=MagicMock(return_value=1)):
            assert main([]) == 1

    def test_flags_override_config(self):
        loop = MagicMock(return_value=0)
        with _run_patches(session_loop=loop):
            main(["--no-venv", "--program", "/opt/aider", "--log-file", "/tmp/p.log"])

        config = loop.call_args.args[0]
        assert config.use_venv is False
        assert config.program == "/opt/aider"
        assert config.log_file == "/tmp/p.log"

    def test_args_after_double_dash_go_to_tool(self):
        loop = MagicMock(return_value=0)
        with _run_patches(session_loop=loop):
            main(["-d", "--", "--model", "sonnet", "--setup"])

        assert loop.call_args.kwargs["extra_args"] == ["--model", "sonnet", "--setup"]

    def test_debug_and_log_file_reach_logging_setup(self):
        logging_setup = MagicMock()
        with _run_patches(configure_logging=logging_setup):
            main(["--debug", "--log-file", "/tmp/p.log"])

        logging_setup.assert_called_once_with(True, "/tmp/p.log", quiet=True)

    def test_split_tool_args(self):
        assert split_tool_args(["-d"]) == (["-d"], [])
        assert split_tool_args(["-d", "--", "--", "x"]) == (["-d"], ["--", "x"])

    def test_version_output_contains_version_string(self, capsys):
        with pytest.raises(SystemExit):
            main(["--version"])

        assert "0.1.0" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# setup
# ---------------------------------------------------------------------------


class TestSetup:
    def test_reports_new_environment(self, capsys, tmp_path):
        config = PairshConfig(venv_path=str(tmp_path / "venv"))
        with patch("pairsh.cli.bootstrap.load_config", return_value=config):
            with patch("pairsh.cli.bootstrap.bootstrap", return_value=True) as mock_bootstrap:
                assert main(["setup"]) == 0

        mock_bootstrap.assert_called_once_with(config)
        assert "Installed aider-chat" in capsys.readouterr().out

    def test_reports_existing_environment(self, capsys):
        with patch("pairsh.cli.bootstrap.load_config", return_value=PairshConfig()):
            with patch("pairsh.cli.bootstrap.bootstrap", return_value=False):
                assert main(["setup"]) == 0

        assert "already present" in capsys.readouterr().out

    def test_venv_flag_overrides_path(self, tmp_path):
        with patch("pairsh.cli.bootstrap.load_config", return_value=PairshConfig()):
            with patch("pairsh.cli.bootstrap.bootstrap", return_value=True) as mock_bootstrap:
                main(["setup", "--venv", str(tmp_path / "other")])

        assert mock_bootstrap.call_args.args[0].venv_path == str(tmp_path / "other")

    def test_failure_prints_error_and_returns_one(self, capsys):
        with patch("pairsh.cli.bootstrap.load_config", return_value=PairshConfig()):
            with patch(
                "pairsh.cli.bootstrap.bootstrap",
                side_effect=BootstrapError("could not create virtual environment"),
            ):
                assert main(["setup"]) == 1

        assert "Error: could not create virtual environment" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# configure
# ---------------------------------------------------------------------------


class TestConfigure:
    def test_updates_are_saved(self, tmp_path):
        saved = MagicMock(return_value=tmp_path / "config.json")
        with patch("pairsh.cli.configure.load_config", return_value=PairshConfig()):
            with patch("pairsh.cli.configure.save_config", saved):
                code = main(
                    [
                        "configure",
                        "--program", "aider2",
                        "--arg=--model",
                        "--arg", "sonnet",
                        "--no-venv",
                        "--key-prefix", "C-x a",
                    ]
                )

        assert code == 0
        config = saved.call_args.args[0]
        assert config.program == "aider2"
        assert config.args == ["--model", "sonnet"]
        assert config.use_venv is False
        assert config.key_prefix == "C-x a"

    def test_reset_args_restores_defaults(self, tmp_path):
        saved = MagicMock(return_value=tmp_path / "config.json")
        existing = PairshConfig(args=["--yes"])
        with patch("pairsh.cli.configure.load_config", return_value=existing):
            with patch("pairsh.cli.configure.save_config", saved):
                main(["configure", "--reset-args"])

        assert saved.call_args.args[0].args == ["--no-pretty"]

    def test_conflicting_log_file_flags(self, capsys):
        assert main(["configure", "--log-file", "x", "--clear-log-file"]) == 2
        assert "cannot be used together" in capsys.readouterr().err

    def test_invalid_key_prefix(self, capsys):
        assert main(["configure", "--key-prefix", "C-1"]) == 2
        assert "unsupported control key" in capsys.readouterr().err

    def test_write_failure_returns_one(self, capsys):
        with patch("pairsh.cli.configure.load_config", return_value=PairshConfig()):
            with patch("pairsh.cli.configure.save_config", side_effect=OSError("read-only")):
                assert main(["configure", "--program", "x"]) == 1

        assert "read-only" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# keys
# ---------------------------------------------------------------------------


class TestKeys:
    def test_lists_every_action_chord(self, capsys):
        with patch("pairsh.cli.keys.load_config", return_value=PairshConfig()):
            assert main(["keys"]) == 0

        out = capsys.readouterr().out
        assert "C-c d" in out
        assert "/diff" in out
        assert "C-c q" in out
        assert len(out.strip().splitlines()) == 14

    def test_prefix_flag(self, capsys):
        assert main(["keys", "--prefix", "C-x a"]) == 0
        assert "C-x a u" in capsys.readouterr().out


class TestEntrypoint:
    def test_entrypoint_raises_system_exit_with_main_code(self):
        with patch("pairsh.cli.app.main", return_value=0):
            with pytest.raises(SystemExit) as exc_info:
                entrypoint()

        assert exc_info.value.code == 0


class TestConfigureLogging:
    def test_quiet_terminal_session_discards_records(self):
        with patch("pairsh.cli.shared.logging.basicConfig") as basic_config:
            configure_logging(False, quiet=True)

        handlers = basic_config.call_args.kwargs["handlers"]
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.NullHandler)

    def test_log_file_wins_over_quiet(self, tmp_path):
        with patch("pairsh.cli.shared.logging.basicConfig") as basic_config:
            configure_logging(True, str(tmp_path / "p.log"), quiet=True)

        assert basic_config.call_args.kwargs["filename"] == str(tmp_path / "p.log")
        assert "handlers" not in basic_config.call_args.kwargs

    def test_plain_commands_log_to_stderr(self):
        with patch("pairsh.cli.shared.logging.basicConfig") as basic_config:
            configure_logging(False)

        basic_config.assert_called_once_with(
            level=logging.WARNING, format="%(name)s %(levelname)s: %(message)s"
        )
