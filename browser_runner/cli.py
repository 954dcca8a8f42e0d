"""CLI entry point for browser-runner.

Usage:
    browser-runner [serve|runSpecs|init|version|help] [options]
"""

import json
import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import click
import selenium

from . import __version__
from .config.parser import resolve_options
from .config.schema import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH
from .runner.orchestrator import run_specs, start_server

CLI_NAME = "browser-runner"
FRAMEWORK_PACKAGE = "node_modules/jasmine-core/package.json"


def find_framework_version(base_dir: Path) -> Optional[str]:
    """Version of the test framework installed under base_dir, if any."""
    package_json = Path(base_dir) / FRAMEWORK_PACKAGE
    if not package_json.is_file():
        return None
    with open(package_json, "r", encoding="utf-8") as f:
        return json.load(f).get("version")


def wait_for_interrupt(server: Any) -> None:
    """Block until Ctrl-C, then stop the server."""
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        click.echo("\nStopping server")
    finally:
        server.stop()


@dataclass
class CommandContext:
    """What the commands act on. Replaced when embedding or testing."""
    base_dir: Path = field(default_factory=Path.cwd)
    start_server: Callable[..., Any] = start_server
    run_specs: Callable[..., Any] = run_specs
    wait: Callable[[Any], None] = wait_for_interrupt
    framework_version: Callable[[Path], Optional[str]] = find_framework_version


def run_options(func):
    """Options shared by serve and runSpecs."""
    decorators = [
        click.option("--config", "config_path", help="Path to the config file."),
        click.option("--port", type=int, help="Port to serve on."),
        click.option("--browser", help="Browser to launch, e.g. firefox or chrome."),
        click.option("--fail-fast", is_flag=True, default=False,
                     help="Stop at the first spec failure."),
        click.option("--color/--no-color", default=None, help="Colour the output."),
        click.option("--random/--no-random", default=None,
                     help="Run specs in random order."),
        click.option("--seed", help="Random order seed."),
        click.option("--reporter", "reporters", multiple=True,
                     help="Reporter to use. Repeatable."),
        click.option("--clear-reporters/--no-clear-reporters", default=None,
                     help="Remove the page's own reporters before running."),
        click.option("--filter", "spec_filter", help="Only run specs matching this pattern."),
        click.option("--hide-disabled/--no-hide-disabled", default=None,
                     help="Hide disabled specs in the output."),
        click.option("--timeout", type=float,
                     help="Seconds to wait for the run to finish."),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def _cli_values(params: dict) -> dict[str, Any]:
    """Map click parameters onto config-file keys. None means not given."""
    return {
        "port": params.get("port"),
        "browser": {"name": params["browser"]} if params.get("browser") else None,
        "failFast": params.get("fail_fast") or None,
        "color": params.get("color"),
        "random": params.get("random"),
        "seed": params.get("seed"),
        "reporters": list(params["reporters"]) if params.get("reporters") else None,
        "clearReporters": params.get("clear_reporters"),
        "filter": params.get("spec_filter"),
        "hideDisabled": params.get("hide_disabled"),
        "timeout": params.get("timeout"),
    }


@click.group(
    invoke_without_command=True,
    context_settings={"max_content_width": 80, "help_option_names": ["-h", "--help"]},
)
@click.option("--verbose", is_flag=True, help="Log orchestration steps.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Run a spec suite in a real browser.

    With no command, serves the suite for manual runs in a browser.
    """
    ctx.ensure_object(CommandContext)
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve)


@cli.command()
@run_options
@click.pass_obj
def serve(deps: CommandContext, config_path: Optional[str], **params):
    """Serve the suite and wait for a browser to open it."""
    options = resolve_options(deps.base_dir, config_path, _cli_values(params))
    server = deps.start_server(options)
    click.echo(f"Serving specs at http://{options.hostname}:{server.port()}/")
    deps.wait(server)


@cli.command("runSpecs")
@run_options
@click.pass_context
def run_specs_command(ctx: click.Context, config_path: Optional[str], **params):
    """Run the suite once in a browser and exit with its status."""
    deps: CommandContext = ctx.obj
    options = resolve_options(deps.base_dir, config_path, _cli_values(params))

    exit_code = 0

    def set_exit_code(code: int) -> None:
        nonlocal exit_code
        exit_code = code

    deps.run_specs(options, set_exit_code=set_exit_code, base_dir=deps.base_dir)
    ctx.exit(exit_code)


@cli.command()
@click.pass_obj
def init(deps: CommandContext):
    """Create a default config file if none exists."""
    path = Path(deps.base_dir) / DEFAULT_CONFIG_PATH
    if path.exists():
        click.echo(f"{DEFAULT_CONFIG_PATH} already exists, leaving it unchanged")
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(DEFAULT_CONFIG)
    click.echo(f"Wrote {DEFAULT_CONFIG_PATH}")


@cli.command()
@click.pass_obj
def version(deps: CommandContext):
    """Print version information."""
    click.echo(f"{CLI_NAME} v{__version__}")
    click.echo(f"selenium v{selenium.__version__}")
    framework = deps.framework_version(Path(deps.base_dir))
    if framework:
        click.echo(f"jasmine-core v{framework}")


@cli.command("help")
@click.pass_context
def help_command(ctx: click.Context):
    """Show commands and the options of serve and runSpecs."""
    click.echo(ctx.parent.get_help())
    click.echo()
    command_ctx = click.Context(run_specs_command, info_name="runSpecs", parent=ctx.parent)
    click.echo(run_specs_command.get_help(command_ctx))


def main():
    """Main CLI entry point."""
    try:
        code = cli.main(prog_name=CLI_NAME, standalone_mode=False)

    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)

    except (click.Abort, KeyboardInterrupt):
        click.echo("Interrupted", err=True)
        sys.exit(130)

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    sys.exit(code if isinstance(code, int) else 0)


if __name__ == "__main__":
    main()
