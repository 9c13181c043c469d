# chain.py
from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from itertools import accumulate
from typing import Callable, Dict, List, Optional

from .model import (
    Command,
    Pipeline,
    STEP_ERROR,
    STEP_FAILED,
    STEP_OK,
    STEP_SKIPPED,
    STEP_TIMEOUT,
)
from .supervisor import StepTimeout, kill_running, run_step
from .ui.console import get_console

# run_step(command, timeout, prior_result) -> exit code
Supervisor = Callable[[Command, float, int], int]


def _forward(src: Future, dst: Future) -> None:
    exc = src.exception()
    if exc is not None:
        dst.set_exception(exc)
    else:
        dst.set_result(src.result())


class TaskChain:
    """
    Linear chain of asynchronous steps, one future per command.

    Node i+1 is only submitted to the pool once node i has completed and
    receives node i's exit code as its `prior_result`. An exception raised
    by any node completes every later node with that same exception,
    without running them.

        chain = TaskChain(pipeline).start()
        ...                 # caller is free to do other work here
        code = chain.result()
    """

    def __init__(
        self,
        pipeline: Pipeline,
        *,
        supervisor: Supervisor = run_step,
        max_workers: int = 2,
    ):
        self.pipeline = pipeline
        self.supervisor = supervisor
        self.max_workers = max_workers
        self._pool: Optional[ThreadPoolExecutor] = None
        self._nodes: List[Future] = []

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def _then(self, prev: Future, command: Command) -> Future:
        """Return a future for `command` that starts once `prev` is done."""
        nxt: Future = Future()
        timeout = self.pipeline.timeout

        def _continue(done: Future) -> None:
            exc = done.exception()
            if exc is not None:
                # unwinds the rest of the chain; nothing else runs
                nxt.set_exception(exc)
                return
            try:
                inner = self._pool.submit(self.supervisor, command, timeout, done.result())
            except Exception as e:
                nxt.set_exception(e)
                return
            inner.add_done_callback(lambda f: _forward(f, nxt))

        prev.add_done_callback(_continue)
        return nxt

    def start(self) -> "TaskChain":
        """Submit the first step and wire the rest as continuations."""
        if self._pool is not None:
            raise RuntimeError("TaskChain can only be started once")

        commands = self.pipeline.commands
        get_console().print_debug(
            f"chain: {len(commands)} step(s), timeout={self.pipeline.timeout:g}s"
        )

        self._pool = ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="buildchain",
        )
        first = self._pool.submit(self.supervisor, commands[0], self.pipeline.timeout, 0)
        self._nodes = list(accumulate(commands[1:], self._then, initial=first))
        return self

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def done(self) -> bool:
        return bool(self._nodes) and self._nodes[-1].done()

    def result(self) -> int:
        """
        Block until the last step is done and return its exit code.

        Re-raises StepTimeout / StepSpawnError from whichever step hit it.
        On Ctrl-C the running step is killed before the pool is joined.
        """
        if self._pool is None:
            raise RuntimeError("TaskChain has not been started")
        try:
            return self._nodes[-1].result()
        except KeyboardInterrupt:
            kill_running()
            raise
        finally:
            self._pool.shutdown(wait=True)

    def statuses(self) -> Dict[str, str]:
        """
        Per-step status, in pipeline order. Blocks until the chain is done.

        Derived from the node futures only: a step after the first failure
        (nonzero exit or exception) never ran and is reported as skipped.
        """
        out: Dict[str, str] = {}
        blocked = False
        for command, node in zip(self.pipeline.commands, self._nodes):
            if blocked:
                out[command.name] = STEP_SKIPPED
                continue
            exc = node.exception()
            if exc is not None:
                out[command.name] = STEP_TIMEOUT if isinstance(exc, StepTimeout) else STEP_ERROR
                blocked = True
            elif node.result() != 0:
                out[command.name] = STEP_FAILED
                blocked = True
            else:
                out[command.name] = STEP_OK
        return out


def execute(pipeline: Pipeline, *, supervisor: Supervisor = run_step) -> int:
    """Run the pipeline and return the exit code of the last step allowed to run."""
    return TaskChain(pipeline, supervisor=supervisor).start().result()
