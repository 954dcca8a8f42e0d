"""Run orchestration.

Coordinates one browser run:
1. Start the static server
2. Launch the browser and open the harness page
3. Resolve reporters and run the suite in the page
4. Close the browser, then stop the server
5. Map the run's overall status to an exit code

Whatever was acquired is released on every path out of a run, in reverse
order of acquisition. Teardown failures are logged and never replace the
run's result or error.
"""

import logging
import os
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Callable, Optional, Union

from ..browser.webdriver import build_webdriver as default_build_webdriver
from ..config.schema import RunOptions
from ..reporting.resolver import resolve_reporters
from ..server.static_server import Server
from .page_runner import RunResult, Runner

logger = logging.getLogger("browser_runner.orchestrator")

EXIT_CODES = {
    "passed": 0,
    "incomplete": 2,
    "failed": 3,
}
UNKNOWN_STATUS_EXIT_CODE = 1


def exit_code_for(result: Any) -> int:
    """Exit code for a run's overall status. Unknown statuses map to 1."""
    if isinstance(result, dict):
        status = result.get("overallStatus")
    else:
        status = getattr(result, "overall_status", None)
    return EXIT_CODES.get(status, UNKNOWN_STATUS_EXIT_CODE)


def build_run_config(options: RunOptions) -> dict[str, Any]:
    """Build the config handed to Runner.run.

    Env flags from the options are merged with the top-level random, seed
    and hideDisabled settings. fail_fast forces both stop flags on.
    Internet Explorer gets the JSON-DOM transport, every other browser the
    batch transport.
    """
    env = dict(options.env)
    if options.random is not None:
        env["random"] = options.random
    if options.seed is not None:
        env["seed"] = options.seed
    if options.hide_disabled is not None:
        env["hideDisabled"] = options.hide_disabled
    if options.fail_fast:
        env["stopOnSpecFailure"] = True
        env["stopSpecOnExpectationFailure"] = True

    config: dict[str, Any] = {"env": env}
    if options.filter:
        config["filter"] = options.filter
    if options.clear_reporters:
        config["clear_reporters"] = True

    if options.browser.is_internet_explorer:
        config["json_dom_reporter"] = True
    else:
        config["batch_reporter"] = True
    return config


def _release(name: str, release: Callable[[], Any]) -> None:
    try:
        release()
        logger.debug("Released %s", name)
    except Exception as e:
        logger.warning("Failed to release %s: %s", name, e, exc_info=True)


def start_server(
    options: Optional[RunOptions] = None,
    *,
    server_factory: Callable[[RunOptions], Any] = Server,
) -> Any:
    """Start a long-lived server for manual runs in a browser.

    Returns:
        The started server. The caller stops it.
    """
    options = options or RunOptions()
    server = server_factory(options)
    server.start()
    logger.info("Server listening on port %s", server.port())
    return server


def run_specs(
    options: Optional[RunOptions] = None,
    *,
    server_factory: Callable[[RunOptions], Any] = Server,
    runner_factory: Callable[..., Any] = Runner,
    build_webdriver: Callable[[Any], Any] = default_build_webdriver,
    set_exit_code: Optional[Callable[[int], None]] = None,
    base_dir: Optional[Union[str, Path]] = None,
) -> RunResult:
    """Run the suite once in a browser.

    Args:
        options: Merged run options. None uses defaults.
        server_factory: Builds the server from the options.
        runner_factory: Builds the in-page runner. Called with
            ``webdriver``, ``reporters``, ``host`` and ``timeout``.
        build_webdriver: Launches the browser from ``options.browser``.
        set_exit_code: Receives the exit code when the run completes.
        base_dir: Directory reporter references are resolved against.
            Defaults to options.base_dir, then the working directory.

    Returns:
        The runner's result.

    Raises:
        Exception: Whatever the server, browser, reporter resolution or
            runner raised, unchanged, after teardown.
    """
    options = options or RunOptions()
    base_dir = base_dir or options.base_dir or os.getcwd()

    server = server_factory(options)
    server.start(port=options.port if options.port is not None else 0)

    with ExitStack() as resources:
        resources.callback(_release, "server", server.stop)

        host = f"http://{options.hostname}:{server.port()}/"
        session = build_webdriver(options.browser)
        resources.callback(_release, "browser", session.close)
        session.navigate(host)

        reporters = resolve_reporters(options.reporters, base_dir, color=options.color)
        runner = runner_factory(
            webdriver=session,
            reporters=reporters,
            host=host,
            timeout=options.timeout,
        )
        result = runner.run(build_run_config(options))

    if set_exit_code is not None:
        set_exit_code(exit_code_for(result))
    return result
