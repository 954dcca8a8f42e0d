# Shared fakes for the server, browser and in-page runner.
#
# Every fake appends to one call log so tests can check both that a resource
# was released and the order releases happened in.

from pathlib import Path

import pytest

from browser_runner.runner.page_runner import RunResult

FIXTURES = Path(__file__).parent / "fixtures"


class FakeServer:
    def __init__(self, log, options=None, port=4321, start_error=None, stop_error=None):
        self.log = log
        self.options = options
        self._port = port
        self.start_error = start_error
        self.stop_error = stop_error
        self.start_args = []

    def start(self, port=None):
        self.log.append("server.start")
        self.start_args.append(port)
        if self.start_error:
            raise self.start_error
        return self

    def port(self):
        return self._port

    def stop(self):
        self.log.append("server.stop")
        if self.stop_error:
            raise self.stop_error


class FakeSession:
    def __init__(self, log, close_error=None, script_results=None):
        self.log = log
        self.close_error = close_error
        self.script_results = list(script_results or [])
        self.urls = []
        self.scripts = []

    def navigate(self, url):
        self.log.append("browser.navigate")
        self.urls.append(url)

    def execute_script(self, script, *args):
        self.scripts.append((script, args))
        if self.script_results:
            return self.script_results.pop(0)
        return None

    def close(self):
        self.log.append("browser.close")
        if self.close_error:
            raise self.close_error


class FakeRunner:
    def __init__(self, log, result=None, error=None, **kwargs):
        self.log = log
        self.result = result
        self.error = error
        self.kwargs = kwargs
        self.configs = []

    def run(self, config):
        self.log.append("runner.run")
        self.configs.append(config)
        if self.error:
            raise self.error
        return self.result


class Harness:
    """Builds fakes and records what the orchestrator did with them."""

    def __init__(self):
        self.log = []
        self.server = FakeServer(self.log)
        self.session = FakeSession(self.log)
        self.runners = []
        self.browser_requests = []
        self.exit_codes = []
        self.run_result = RunResult(overall_status="passed")
        self.run_error = None
        self.construct_error = None

    def server_factory(self, options):
        self.server.options = options
        return self.server

    def build_webdriver(self, browser):
        self.log.append("browser.build")
        self.browser_requests.append(browser)
        return self.session

    def runner_factory(self, **kwargs):
        self.log.append("runner.construct")
        if self.construct_error:
            raise self.construct_error
        runner = FakeRunner(self.log, result=self.run_result, error=self.run_error, **kwargs)
        self.runners.append(runner)
        return runner

    def set_exit_code(self, code):
        self.exit_codes.append(code)

    def deps(self):
        return {
            "server_factory": self.server_factory,
            "runner_factory": self.runner_factory,
            "build_webdriver": self.build_webdriver,
            "set_exit_code": self.set_exit_code,
        }

    @property
    def runner(self):
        return self.runners[-1]


@pytest.fixture
def harness():
    return Harness()


@pytest.fixture
def fixtures_dir():
    return FIXTURES
