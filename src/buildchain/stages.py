# stages.py
from __future__ import annotations

import shlex
from typing import List

from .model import Command, Pipeline

CONFIGS = ("Debug", "Release")

DEFAULT_SOURCE_DIR = "."
DEFAULT_BUILD_DIR = "_builds"
DEFAULT_INSTALL_DIR = "_install"
DEFAULT_TIMEOUT = 30


# ---------------------------------------------------------------------
# Step helper
# ---------------------------------------------------------------------

def sh(name: str, cmd: str) -> Command:
    """Create a command step."""
    return Command(name=name, run=cmd)


# ---------------------------------------------------------------------
# CMake stages
# ---------------------------------------------------------------------

def configure_command(
    config: str,
    *,
    source_dir: str = DEFAULT_SOURCE_DIR,
    build_dir: str = DEFAULT_BUILD_DIR,
    install_dir: str = DEFAULT_INSTALL_DIR,
) -> Command:
    q = shlex.quote
    return sh(
        "configure",
        f"cmake -H{q(source_dir)} -B{q(build_dir)} "
        f"-DCMAKE_INSTALL_PREFIX={q(install_dir)} "
        f"-DCMAKE_BUILD_TYPE={q(config)}",
    )


def build_command(build_dir: str = DEFAULT_BUILD_DIR) -> Command:
    return sh("build", f"cmake --build {shlex.quote(build_dir)}")


def install_command(build_dir: str = DEFAULT_BUILD_DIR) -> Command:
    return sh("install", f"cmake --build {shlex.quote(build_dir)} --target install")


def pack_command(build_dir: str = DEFAULT_BUILD_DIR) -> Command:
    return sh("pack", f"cmake --build {shlex.quote(build_dir)} --target package")


def build_pipeline(
    config: str = "Debug",
    *,
    install: bool = False,
    pack: bool = False,
    timeout: float = DEFAULT_TIMEOUT,
    source_dir: str = DEFAULT_SOURCE_DIR,
    build_dir: str = DEFAULT_BUILD_DIR,
    install_dir: str = DEFAULT_INSTALL_DIR,
) -> Pipeline:
    """
    Assemble the ordered CMake commands for the selected stages.

    configure and build always run; install and pack are appended (in that
    order) when requested.
    """
    if config not in CONFIGS:
        raise ValueError(f"Config should be {'|'.join(CONFIGS)}, but it is {config}")
    if timeout <= 0:
        raise ValueError("Timeout can't be less or equal 0.")

    commands: List[Command] = [
        configure_command(
            config,
            source_dir=source_dir,
            build_dir=build_dir,
            install_dir=install_dir,
        ),
        build_command(build_dir),
    ]
    if install:
        commands.append(install_command(build_dir))
    if pack:
        commands.append(pack_command(build_dir))

    return Pipeline(commands=tuple(commands), timeout=timeout)
