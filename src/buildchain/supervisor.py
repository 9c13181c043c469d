# supervisor.py
from __future__ import annotations

import os
import shlex
import signal
import subprocess
import sys
import threading
from dataclasses import dataclass, field
from typing import Dict

from .model import Command
from .ui.console import get_console


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

@dataclass(eq=False)
class PipelineError(Exception):
    """
    Structured pipeline error with enough context for:
      - clean CLI output
      - mapping to a reserved exit code
      - debugging without full tracebacks
    """
    kind: str
    step: str | None
    message: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}"]
        if self.step:
            lines.append(f"step={self.step}")
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


class StepTimeout(PipelineError):
    """The child did not exit before the deadline and was killed."""

    def __init__(self, command: Command, timeout: float, pid: int):
        super().__init__(
            kind="timeout",
            step=command.name,
            message="Wait time is over.",
            details={"cmd": command.run, "timeout": timeout, "pid": pid},
        )
        self.command = command
        self.timeout = timeout
        self.pid = pid


class StepSpawnError(PipelineError):
    """The command could not be started at all."""

    def __init__(self, command: Command, reason: str):
        super().__init__(
            kind="spawn",
            step=command.name,
            message=f"could not start command: {reason}",
            details={"cmd": command.run},
        )
        self.command = command


# ----------------------------------------------------------------------
# Execution primitive
# ----------------------------------------------------------------------

_POSIX = os.name == "posix"

# pid -> child of every step currently waiting on its process
_running: Dict[int, subprocess.Popen] = {}
_running_lock = threading.Lock()


def _kill(proc: subprocess.Popen) -> None:
    if _POSIX:
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        proc.kill()


def kill_running() -> None:
    """
    Kill every step process (and its process group) still running.

    Children live in their own process group, so Ctrl-C at the terminal
    does not reach them; the chain calls this when interrupted.
    """
    with _running_lock:
        procs = list(_running.values())
    for proc in procs:
        _kill(proc)


def _spawn(command: Command) -> subprocess.Popen:
    try:
        argv = shlex.split(command.run)
    except ValueError as e:
        raise StepSpawnError(command, str(e)) from e
    if not argv:
        raise StepSpawnError(command, "empty command")

    # Child writes straight to our stdout/stderr; flush ours first so
    # console lines and child output stay in order.
    sys.stdout.flush()
    sys.stderr.flush()

    try:
        # Own process group on POSIX so a kill reaches make/ninja/compilers too
        return subprocess.Popen(
            argv,
            stdout=None,
            stderr=None,
            start_new_session=_POSIX,
        )
    except OSError as e:
        raise StepSpawnError(command, e.strerror or str(e)) from e


def run_step(command: Command, timeout: float, prior_result: int = 0) -> int:
    """
    Run one command under a wall-clock deadline.

    Returns the child's exit code, or `prior_result` untouched (nothing is
    spawned) when an earlier step already failed.

    Raises:
      StepTimeout: the child outlived `timeout` seconds; it has been killed.
      StepSpawnError: the command could not be started.
    """
    if prior_result != 0:
        return prior_result

    console = get_console()
    console.print_step(command.name, command.run)

    proc = _spawn(command)
    with _running_lock:
        _running[proc.pid] = proc
    try:
        return proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill(proc)
        proc.wait()
        raise StepTimeout(command, timeout, proc.pid) from None
    finally:
        with _running_lock:
            _running.pop(proc.pid, None)
