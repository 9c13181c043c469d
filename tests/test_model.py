import pytest

from buildchain.model import Command, Pipeline, PipelineResult


def test_pipeline_stores_commands_as_tuple():
    p = Pipeline(commands=[Command("a", "true"), Command("b", "true")], timeout=5)
    assert isinstance(p.commands, tuple)
    assert p.names == ["a", "b"]


def test_pipeline_requires_a_command():
    with pytest.raises(ValueError, match="at least one command"):
        Pipeline(commands=(), timeout=5)


@pytest.mark.parametrize("timeout", [0, -1])
def test_pipeline_requires_positive_timeout(timeout):
    with pytest.raises(ValueError, match="Timeout"):
        Pipeline(commands=(Command("a", "true"),), timeout=timeout)


def test_pipeline_rejects_duplicate_names():
    with pytest.raises(ValueError, match="Duplicate"):
        Pipeline(commands=(Command("a", "true"), Command("a", "false")), timeout=5)


def test_command_is_immutable():
    cmd = Command("a", "true")
    with pytest.raises(AttributeError):
        cmd.run = "false"


def test_result_ok_only_on_success():
    assert PipelineResult(status="success", exit_code=0).ok
    assert not PipelineResult(status="failed", exit_code=2).ok
