import pytest

from buildchain.ui.console import Console, set_console


@pytest.fixture(autouse=True)
def _plain_console():
    """Each test starts with a fresh non-debug console."""
    set_console(Console())
    yield
    set_console(Console())


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "steps.log"
