# runner.py
from __future__ import annotations

from .chain import Supervisor, TaskChain
from .model import Pipeline, PipelineResult
from .supervisor import StepSpawnError, StepTimeout, run_step
from .ui.console import get_console

# Reserved exit codes for failures that have no process exit code of their
# own (same values as coreutils `timeout` and POSIX shells use).
EXIT_TIMEOUT = 124
EXIT_SPAWN_ERROR = 127


def run_pipeline(pipeline: Pipeline, *, supervisor: Supervisor = run_step) -> PipelineResult:
    """
    Run the chain and fold every outcome into a single PipelineResult:

      0            -> success, exit 0
      nonzero c    -> failed, exit c
      signal N     -> failed, exit 128 + N
      StepTimeout  -> timeout, exit EXIT_TIMEOUT
      spawn error  -> error, exit EXIT_SPAWN_ERROR
    """
    console = get_console()
    chain = TaskChain(pipeline, supervisor=supervisor).start()

    try:
        code = chain.result()
    except StepTimeout as e:
        console.print_failure(
            e.step or "?",
            str(e),
            hint=f"Step did not finish within {e.timeout:g}s; raise --timeout if it needs longer.",
        )
        return PipelineResult(
            status="timeout",
            exit_code=EXIT_TIMEOUT,
            message=e.message,
            steps=chain.statuses(),
        )
    except StepSpawnError as e:
        console.print_failure(e.step or "?", str(e), hint="Check that the tool is installed and on PATH.")
        return PipelineResult(
            status="error",
            exit_code=EXIT_SPAWN_ERROR,
            message=e.message,
            steps=chain.statuses(),
        )

    steps = chain.statuses()
    if code == 0:
        return PipelineResult(status="success", exit_code=0, steps=steps)

    failed = next((name for name, status in steps.items() if status == "failed"), "?")
    if code < 0:
        # killed by signal N: report 128 + N, as shells do
        reason = f"killed by signal {-code}"
        exit_code = 128 - code
    else:
        reason = f"exited with code {code}"
        exit_code = code
    console.print_failure(failed, reason, exit_code=exit_code)
    return PipelineResult(
        status="failed",
        exit_code=exit_code,
        message=f"Step '{failed}' {reason}",
        steps=steps,
    )
