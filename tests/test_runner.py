"""Tests for mapping pipeline outcomes to a single exit code."""

from buildchain.model import Command, Pipeline
from buildchain.runner import EXIT_SPAWN_ERROR, EXIT_TIMEOUT, run_pipeline
from buildchain.supervisor import StepTimeout
from step_helpers import hanging_step, logging_step, read_log


def _pipeline(*commands, timeout=5):
    return Pipeline(commands=commands, timeout=timeout)


def scripted(codes):
    def supervisor(command, timeout, prior_result):
        if prior_result != 0:
            return prior_result
        return codes.get(command.name, 0)
    return supervisor


def test_success():
    result = run_pipeline(
        _pipeline(Command("configure", "x"), Command("build", "y")),
        supervisor=scripted({}),
    )
    assert result.status == "success"
    assert result.exit_code == 0
    assert result.ok
    assert result.steps == {"configure": "ok", "build": "ok"}


def test_plain_failure_keeps_the_exit_code(capsys):
    result = run_pipeline(
        _pipeline(Command("configure", "x"), Command("build", "y"), Command("install", "z")),
        supervisor=scripted({"build": 2}),
    )
    assert result.status == "failed"
    assert result.exit_code == 2
    assert "build" in result.message
    assert result.steps == {"configure": "ok", "build": "failed", "install": "skipped"}
    assert "STEP FAILED: build" in capsys.readouterr().out


def test_timeout_maps_to_reserved_code(capsys):
    def supervisor(command, timeout, prior_result):
        raise StepTimeout(command, timeout, pid=0)

    result = run_pipeline(_pipeline(Command("configure", "x"), Command("build", "y")), supervisor=supervisor)
    assert result.status == "timeout"
    assert result.exit_code == EXIT_TIMEOUT
    assert result.message == "Wait time is over."
    assert result.steps == {"configure": "timeout", "build": "skipped"}
    assert "Wait time is over." in capsys.readouterr().out


def test_timeout_with_real_process(log_path):
    result = run_pipeline(
        _pipeline(Command("configure", hanging_step(30)), Command("build", logging_step(log_path, "build")), timeout=0.5)
    )
    assert result.status == "timeout"
    assert result.exit_code == EXIT_TIMEOUT
    assert read_log(log_path) == []


def test_spawn_error_maps_to_reserved_code(log_path):
    result = run_pipeline(
        _pipeline(
            Command("configure", "definitely-not-a-real-binary-buildchain"),
            Command("build", logging_step(log_path, "build")),
        )
    )
    assert result.status == "error"
    assert result.exit_code == EXIT_SPAWN_ERROR
    assert result.steps == {"configure": "error", "build": "skipped"}
    assert read_log(log_path) == []


def test_reserved_codes_are_distinct():
    assert EXIT_TIMEOUT != EXIT_SPAWN_ERROR
    assert 0 not in (EXIT_TIMEOUT, EXIT_SPAWN_ERROR)


def test_signal_death_maps_to_shell_style_code():
    result = run_pipeline(
        _pipeline(Command("configure", "x"), Command("build", "y")),
        supervisor=scripted({"build": -9}),
    )
    assert result.status == "failed"
    assert result.exit_code == 137
    assert "killed by signal 9" in result.message
    assert result.steps == {"configure": "ok", "build": "failed"}
