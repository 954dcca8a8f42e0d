"""Run option data models.

Defines the dataclasses a config file and the command line are parsed into.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


DEFAULT_CONFIG_PATH = "spec/support/browser-runner.json"
DEFAULT_PORT = 8888
DEFAULT_HOSTNAME = "localhost"
INTERNET_EXPLORER = "internet explorer"

# JSON key -> RunOptions attribute
OPTION_KEYS = {
    "srcDir": "src_dir",
    "srcFiles": "src_files",
    "specDir": "spec_dir",
    "specFiles": "spec_files",
    "helpers": "helpers",
    "frameworkDir": "framework_dir",
    "frameworkScripts": "framework_scripts",
    "frameworkStyles": "framework_styles",
    "reporters": "reporters",
    "random": "random",
    "seed": "seed",
    "failFast": "fail_fast",
    "color": "color",
    "clearReporters": "clear_reporters",
    "filter": "filter",
    "hideDisabled": "hide_disabled",
    "timeout": "timeout",
    "port": "port",
    "hostname": "hostname",
    "browser": "browser",
    "env": "env",
}

ENV_KEYS = (
    "stopOnSpecFailure",
    "stopSpecOnExpectationFailure",
    "random",
    "seed",
    "hideDisabled",
)

DEFAULT_CONFIG = """{
  "srcDir": "src",
  "srcFiles": [
    "**/*.js"
  ],
  "specDir": "spec",
  "specFiles": [
    "**/*[sS]pec.js"
  ],
  "helpers": [
    "helpers/**/*.js"
  ],
  "frameworkDir": "node_modules/jasmine-core/lib/jasmine-core",
  "env": {
    "stopSpecOnExpectationFailure": false,
    "stopOnSpecFailure": false,
    "random": true
  },
  "browser": {
    "name": "firefox"
  }
}
"""


@dataclass
class BrowserOptions:
    """Which browser to launch and how."""
    name: str = "firefox"
    use_remote_grid: bool = False
    grid_url: Optional[str] = None
    capabilities: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.name = (self.name or "firefox").strip()

    @property
    def is_internet_explorer(self) -> bool:
        return self.name.lower() == INTERNET_EXPLORER

    @classmethod
    def from_value(cls, value: Any) -> "BrowserOptions":
        """Build from a config value: a name string or a mapping."""
        if value is None:
            return cls()
        if isinstance(value, BrowserOptions):
            return value
        if isinstance(value, str):
            return cls(name=value)
        if not isinstance(value, dict):
            raise ValueError(f"'browser' must be a name or a mapping, got {type(value).__name__}")
        return cls(
            name=value.get("name", "firefox"),
            use_remote_grid=bool(value.get("useRemoteSeleniumGrid", False)),
            grid_url=value.get("seleniumGridUrl"),
            capabilities=dict(value.get("capabilities") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.use_remote_grid:
            data["useRemoteSeleniumGrid"] = True
        if self.grid_url:
            data["seleniumGridUrl"] = self.grid_url
        if self.capabilities:
            data["capabilities"] = dict(self.capabilities)
        return data


@dataclass
class RunOptions:
    """Merged configuration for one serve or run."""
    src_dir: str = "."
    src_files: list[str] = field(default_factory=list)
    spec_dir: str = "spec"
    spec_files: list[str] = field(default_factory=list)
    helpers: list[str] = field(default_factory=list)
    framework_dir: Optional[str] = None
    framework_scripts: list[str] = field(
        default_factory=lambda: ["jasmine.js", "jasmine-html.js", "boot0.js"]
    )
    framework_styles: list[str] = field(default_factory=lambda: ["jasmine.css"])
    reporters: list[Any] = field(default_factory=list)
    random: Optional[bool] = None
    seed: Optional[str] = None
    fail_fast: bool = False
    color: Optional[bool] = None
    clear_reporters: bool = False
    filter: Optional[str] = None
    hide_disabled: Optional[bool] = None
    timeout: Optional[float] = None
    port: Optional[int] = None
    hostname: str = DEFAULT_HOSTNAME
    browser: BrowserOptions = field(default_factory=BrowserOptions)
    env: dict[str, Any] = field(default_factory=dict)
    base_dir: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert back to config-file keys, omitting unset values."""
        data: dict[str, Any] = {}
        for key, attr in OPTION_KEYS.items():
            value = getattr(self, attr)
            if attr == "browser":
                value = value.to_dict()
            if value is None:
                continue
            data[key] = value
        data.update(self.extra)
        return data


@dataclass
class ValidationError:
    """A single validation error."""
    path: str
    message: str
    severity: str = "error"  # "error" or "warning"


@dataclass
class ValidationResult:
    """Result of option validation."""
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def __str__(self) -> str:
        if self.valid:
            msg = "Valid"
            if self.warnings:
                msg += f" ({self.warning_count} warnings)"
            return msg
        return f"Invalid: {self.error_count} errors, {self.warning_count} warnings"
