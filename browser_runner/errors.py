"""Exception types raised by browser-runner."""


class BrowserRunnerError(Exception):
    """Base class for browser-runner errors."""


class ConfigError(BrowserRunnerError, ValueError):
    """Configuration is malformed or missing required values.

    Raised before any server or browser is started.
    """


class ReporterLoadError(BrowserRunnerError):
    """A reporter reference could not be loaded or instantiated."""

    def __init__(self, spec: str, cause: BaseException):
        self.spec = spec
        self.cause = cause
        super().__init__(f"Failed to register reporter {spec}: {cause}")
