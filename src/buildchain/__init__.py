from .model import Command, Pipeline, PipelineResult
from .supervisor import PipelineError, StepSpawnError, StepTimeout, run_step
from .chain import TaskChain, execute
from .runner import run_pipeline
from .stages import sh, build_pipeline

__all__ = [
    "Command",
    "Pipeline",
    "PipelineResult",
    "PipelineError",
    "StepSpawnError",
    "StepTimeout",
    "run_step",
    "TaskChain",
    "execute",
    "run_pipeline",
    "sh",
    "build_pipeline",
]
