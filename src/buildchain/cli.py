# cli.py
from __future__ import annotations

import sys

import click

from buildchain.runner import run_pipeline
from buildchain.stages import (
    CONFIGS,
    DEFAULT_BUILD_DIR,
    DEFAULT_INSTALL_DIR,
    DEFAULT_SOURCE_DIR,
    DEFAULT_TIMEOUT,
    build_pipeline,
)
from buildchain.ui.console import Console, set_console, get_console


def stage_options(fn):
    """Options shared by `run` and `plan`: which stages, where, how long."""
    options = [
        click.option(
            "--config",
            type=click.Choice(CONFIGS),
            default="Debug",
            show_default=True,
            envvar="BUILDCHAIN_CONFIG",
            help="Build configuration",
        ),
        click.option("--install", is_flag=True, default=False, help="Add install stage (in the install directory)"),
        click.option("--pack", is_flag=True, default=False, help="Add pack stage (CPack package)"),
        click.option(
            "--timeout",
            type=click.IntRange(min=1),
            default=DEFAULT_TIMEOUT,
            show_default=True,
            envvar="BUILDCHAIN_TIMEOUT",
            help="Wait time per step (in seconds)",
        ),
        click.option(
            "--source-dir",
            default=DEFAULT_SOURCE_DIR,
            show_default=True,
            envvar="BUILDCHAIN_SOURCE_DIR",
            help="CMake source directory",
        ),
        click.option(
            "--build-dir",
            default=DEFAULT_BUILD_DIR,
            show_default=True,
            envvar="BUILDCHAIN_BUILD_DIR",
            help="CMake build directory",
        ),
        click.option(
            "--install-dir",
            default=DEFAULT_INSTALL_DIR,
            show_default=True,
            envvar="BUILDCHAIN_INSTALL_DIR",
            help="Install prefix",
        ),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
def cli(debug):
    """buildchain: configure, build, install and pack a CMake project, stopping at the first failure."""
    console = Console(debug=debug)
    set_console(console)


@cli.command()
@stage_options
def run(config, install, pack, timeout, source_dir, build_dir, install_dir):
    """Run the build pipeline."""
    console = get_console()

    try:
        pipeline = build_pipeline(
            config,
            install=install,
            pack=pack,
            timeout=timeout,
            source_dir=source_dir,
            build_dir=build_dir,
            install_dir=install_dir,
        )

        console.print_run_started(
            config=config,
            step_count=len(pipeline.commands),
            timeout=pipeline.timeout,
        )

        result = run_pipeline(pipeline)

        console.print_results(result.steps)
        if not result.ok:
            console.print_error(
                "Build failed",
                result.message or f"exit code {result.exit_code}",
            )
        sys.exit(result.exit_code)

    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


@cli.command()
@stage_options
def plan(config, install, pack, timeout, source_dir, build_dir, install_dir):
    """Print the commands `run` would execute, without running them."""
    console = get_console()
    try:
        pipeline = build_pipeline(
            config,
            install=install,
            pack=pack,
            timeout=timeout,
            source_dir=source_dir,
            build_dir=build_dir,
            install_dir=install_dir,
        )
    except ValueError as e:
        console.print_error("Invalid pipeline", str(e))
        sys.exit(1)

    console.print_plan([(c.name, c.run) for c in pipeline.commands])
    console.print_info(f"Timeout: {pipeline.timeout:g}s per step")


if __name__ == "__main__":
    cli()
