"""Run option validator.

Validates parsed RunOptions before any server or browser is started.
"""

from pathlib import Path

from .schema import ENV_KEYS, RunOptions, ValidationError, ValidationResult

VALID_BROWSERS = {
    "firefox",
    "headlessfirefox",
    "chrome",
    "headlesschrome",
    "microsoftedge",
    "safari",
    "internet explorer",
}


def validate_options(options: RunOptions) -> ValidationResult:
    """Validate merged run options.

    Checks:
    - Port range
    - Browser name and remote grid settings
    - Env flags
    - Directories and file patterns (warnings only)

    Args:
        options: Parsed RunOptions to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[ValidationError] = []
    warnings: list[ValidationError] = []

    _validate_server(options, errors, warnings)
    _validate_browser(options, errors, warnings)
    _validate_env(options, errors, warnings)

    if not options.spec_files:
        warnings.append(ValidationError(
            path="specFiles",
            message="No spec file patterns configured. The run will have no specs.",
            severity="warning",
        ))

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def _validate_server(
    options: RunOptions,
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> None:
    """Validate server settings."""
    if options.port is not None and not 0 <= options.port <= 65535:
        errors.append(ValidationError(
            path="port",
            message=f"Port must be between 0 and 65535, got {options.port}.",
        ))

    if options.timeout is not None and options.timeout <= 0:
        errors.append(ValidationError(
            path="timeout",
            message=f"Timeout must be positive, got {options.timeout}.",
        ))

    if not options.hostname:
        errors.append(ValidationError(
            path="hostname",
            message="'hostname' must not be empty.",
        ))

    base_dir = Path(options.base_dir or ".")
    for key, value in (("srcDir", options.src_dir), ("specDir", options.spec_dir)):
        if value and not (base_dir / value).is_dir():
            warnings.append(ValidationError(
                path=key,
                message=f"Directory '{value}' does not exist.",
                severity="warning",
            ))


def _validate_browser(
    options: RunOptions,
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> None:
    """Validate browser settings."""
    browser = options.browser

    if browser.use_remote_grid and not browser.grid_url:
        errors.append(ValidationError(
            path="browser.seleniumGridUrl",
            message="'seleniumGridUrl' is required when 'useRemoteSeleniumGrid' is set.",
        ))

    # Grid sessions are built from the same options classes as local ones.
    if browser.name.lower() not in VALID_BROWSERS:
        errors.append(ValidationError(
            path="browser.name",
            message=f"Unsupported browser '{browser.name}'. Must be one of: {', '.join(sorted(VALID_BROWSERS))}",
        ))


def _validate_env(
    options: RunOptions,
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> None:
    """Validate env flags."""
    for key, value in options.env.items():
        if key not in ENV_KEYS:
            warnings.append(ValidationError(
                path=f"env.{key}",
                message=f"Unknown env option '{key}' is passed through unchanged.",
                severity="warning",
            ))
        elif key not in ("seed",) and not isinstance(value, bool):
            errors.append(ValidationError(
                path=f"env.{key}",
                message=f"'{key}' must be true or false, got {value!r}.",
            ))
