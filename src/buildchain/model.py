# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


# Per-step statuses reported after a run
STEP_OK = "ok"
STEP_FAILED = "failed"
STEP_SKIPPED = "skipped"
STEP_TIMEOUT = "timeout"
STEP_ERROR = "error"


@dataclass(frozen=True)
class Command:
    """A single external invocation (one stage) inside a pipeline."""
    name: str
    run: str


@dataclass(frozen=True)
class Pipeline:
    """
    Ordered commands plus one timeout (seconds) applied to every step.

    Invariants: at least one command, timeout > 0.
    """
    commands: Tuple[Command, ...]
    timeout: float

    def __post_init__(self) -> None:
        # accept any sequence, store a tuple
        object.__setattr__(self, "commands", tuple(self.commands))
        if not self.commands:
            raise ValueError("Pipeline must have at least one command")
        if self.timeout <= 0:
            raise ValueError(f"Timeout must be greater than 0, got {self.timeout}")

        names = self.names
        if len(set(names)) != len(names):
            dupes = sorted({n for n in names if names.count(n) > 1})
            raise ValueError(f"Duplicate step names found: {dupes}")

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.commands]


@dataclass
class PipelineResult:
    """Outcome of a whole pipeline run, as seen by the CLI."""
    status: str  # "success" | "failed" | "timeout" | "error"
    exit_code: int
    message: Optional[str] = None
    steps: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "success"
